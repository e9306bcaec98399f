"""Models package for dbmeta."""

from dbmeta.models.base import BaseModel
from dbmeta.models.schema import (
    ColumnMeta,
    DatabaseType,
    IndexKey,
    IndexMeta,
    TableMeta,
    TableType,
)
from dbmeta.models.types import JdbcType, SemanticCategory, classify, is_temporal

__all__ = [
    "BaseModel",
    "ColumnMeta",
    "DatabaseType",
    "IndexKey",
    "IndexMeta",
    "TableMeta",
    "TableType",
    "JdbcType",
    "SemanticCategory",
    "classify",
    "is_temporal",
]
