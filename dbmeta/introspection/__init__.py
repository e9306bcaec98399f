"""Schema introspection package for dbmeta."""

from dbmeta.introspection.base import CatalogReader, matches_pattern
from dbmeta.introspection.introspector import SchemaIntrospector, merge_index_rows
from dbmeta.introspection.sqlalchemy_reader import SQLAlchemyCatalogReader

__all__ = [
    "CatalogReader",
    "SQLAlchemyCatalogReader",
    "SchemaIntrospector",
    "matches_pattern",
    "merge_index_rows",
]
