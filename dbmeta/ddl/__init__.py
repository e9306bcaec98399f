"""DDL generation package for dbmeta."""

from dbmeta.ddl.base import DDLQuery, DialectGenerator
from dbmeta.ddl.dm import DMDialectGenerator
from dbmeta.ddl.mysql import MySQLDialectGenerator
from dbmeta.ddl.registry import DialectRegistry

__all__ = [
    "DDLQuery",
    "DialectGenerator",
    "DialectRegistry",
    "DMDialectGenerator",
    "MySQLDialectGenerator",
]
