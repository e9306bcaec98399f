"""
SQLAlchemy catalog reader for dbmeta.

Answers catalog questions through the SQLAlchemy Inspector, translating
reflected column types into vendor-neutral type codes so every dialect
SQLAlchemy can reflect yields the same row shape.
"""

import re
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Inspector
from sqlalchemy.exc import CompileError
from sqlalchemy.sql import sqltypes
from sqlalchemy.types import TypeEngine

from dbmeta.introspection.base import TABLE_INDEX_OTHER, CatalogReader, Row, matches_pattern
from dbmeta.models.schema import TableType
from dbmeta.models.types import JdbcType
from dbmeta.utils.logger import get_logger

logger = get_logger(__name__)

_LABEL_CUT = re.compile(r"\(|\s+(?:CHARACTER SET|CHARSET|COLLATE)\b", re.IGNORECASE)
_LABEL_MODIFIERS = re.compile(r"\s+(?:UNSIGNED|ZEROFILL)\b", re.IGNORECASE)

# Vendor type labels whose code is not obvious from the SQLAlchemy type class
_LABEL_TYPES: Mapping[str, JdbcType] = MappingProxyType(
    {
        "BIT": JdbcType.BIT,
        "BOOL": JdbcType.BOOLEAN,
        "BOOLEAN": JdbcType.BOOLEAN,
        "TINYINT": JdbcType.TINYINT,
        "SMALLINT": JdbcType.SMALLINT,
        "MEDIUMINT": JdbcType.INTEGER,
        "INT": JdbcType.INTEGER,
        "INTEGER": JdbcType.INTEGER,
        "BIGINT": JdbcType.BIGINT,
        "FLOAT": JdbcType.FLOAT,
        "REAL": JdbcType.REAL,
        "DOUBLE": JdbcType.DOUBLE,
        "DOUBLE PRECISION": JdbcType.DOUBLE,
        "DECIMAL": JdbcType.DECIMAL,
        "DEC": JdbcType.DECIMAL,
        "NUMERIC": JdbcType.NUMERIC,
        "NUMBER": JdbcType.NUMERIC,
        "CHAR": JdbcType.CHAR,
        "CHARACTER": JdbcType.CHAR,
        "NCHAR": JdbcType.NCHAR,
        "VARCHAR": JdbcType.VARCHAR,
        "VARCHAR2": JdbcType.VARCHAR,
        "CHARACTER VARYING": JdbcType.VARCHAR,
        "NVARCHAR": JdbcType.NVARCHAR,
        "NVARCHAR2": JdbcType.NVARCHAR,
        "TINYTEXT": JdbcType.VARCHAR,
        "ENUM": JdbcType.CHAR,
        "SET": JdbcType.CHAR,
        "TEXT": JdbcType.LONGVARCHAR,
        "MEDIUMTEXT": JdbcType.LONGVARCHAR,
        "LONGTEXT": JdbcType.LONGVARCHAR,
        "JSON": JdbcType.LONGVARCHAR,
        "NTEXT": JdbcType.LONGNVARCHAR,
        "CLOB": JdbcType.CLOB,
        "NCLOB": JdbcType.NCLOB,
        "XML": JdbcType.SQLXML,
        "ROWID": JdbcType.ROWID,
        "DATE": JdbcType.DATE,
        "YEAR": JdbcType.DATE,
        "TIME": JdbcType.TIME,
        "TIME WITHOUT TIME ZONE": JdbcType.TIME,
        "TIME WITH TIME ZONE": JdbcType.TIME_WITH_TIMEZONE,
        "DATETIME": JdbcType.TIMESTAMP,
        "DATETIME2": JdbcType.TIMESTAMP,
        "TIMESTAMP": JdbcType.TIMESTAMP,
        "TIMESTAMP WITHOUT TIME ZONE": JdbcType.TIMESTAMP,
        "TIMESTAMP WITH TIME ZONE": JdbcType.TIMESTAMP_WITH_TIMEZONE,
        "DATETIMEOFFSET": JdbcType.DATETIMEOFFSET,
        "BINARY": JdbcType.BINARY,
        "VARBINARY": JdbcType.VARBINARY,
        "BYTEA": JdbcType.BINARY,
        "TINYBLOB": JdbcType.VARBINARY,
        "BLOB": JdbcType.BLOB,
        "MEDIUMBLOB": JdbcType.LONGVARBINARY,
        "LONGBLOB": JdbcType.LONGVARBINARY,
        "IMAGE": JdbcType.LONGVARBINARY,
    }
)

# Checked in order, most specific class first
_GENERIC_TYPES: tuple[tuple[type[TypeEngine], JdbcType], ...] = (
    (sqltypes.Boolean, JdbcType.BOOLEAN),
    (sqltypes.BigInteger, JdbcType.BIGINT),
    (sqltypes.SmallInteger, JdbcType.SMALLINT),
    (sqltypes.Integer, JdbcType.INTEGER),
    (sqltypes.Float, JdbcType.FLOAT),
    (sqltypes.Numeric, JdbcType.DECIMAL),
    (sqltypes.DateTime, JdbcType.TIMESTAMP),
    (sqltypes.Date, JdbcType.DATE),
    (sqltypes.Time, JdbcType.TIME),
    (sqltypes.Enum, JdbcType.CHAR),
    (sqltypes.Text, JdbcType.LONGVARCHAR),
    (sqltypes.String, JdbcType.VARCHAR),
    (sqltypes.LargeBinary, JdbcType.LONGVARBINARY),
    (sqltypes.JSON, JdbcType.LONGVARCHAR),
    (sqltypes.ARRAY, JdbcType.ARRAY),
)

_DEFAULT_SIZES: Mapping[JdbcType, int] = MappingProxyType(
    {
        JdbcType.BIT: 1,
        JdbcType.BOOLEAN: 1,
        JdbcType.TINYINT: 3,
        JdbcType.SMALLINT: 5,
        JdbcType.INTEGER: 10,
        JdbcType.BIGINT: 19,
    }
)


def type_label(sa_type: TypeEngine, dialect: Any) -> str:
    """
    Render the vendor label of a reflected type, without length or collation.

    ``VARCHAR(64) COLLATE utf8mb4_bin`` becomes ``VARCHAR``.
    """
    try:
        compiled = sa_type.compile(dialect=dialect)
    except CompileError:
        compiled = getattr(sa_type, "__visit_name__", None) or type(sa_type).__name__
    label = _LABEL_CUT.split(str(compiled), maxsplit=1)[0]
    return " ".join(label.split()).upper()


def resolve_jdbc_type(sa_type: TypeEngine, label: str) -> JdbcType:
    """
    Map a reflected SQLAlchemy type to a vendor-neutral type code.

    The vendor label is consulted first, then the SQLAlchemy generic
    type hierarchy. Anything unrecognised maps to OTHER.
    """
    code = _LABEL_TYPES.get(_LABEL_MODIFIERS.sub("", label))
    if code is not None:
        return code

    for sa_class, jdbc_type in _GENERIC_TYPES:
        if isinstance(sa_type, sa_class):
            if jdbc_type is JdbcType.TIMESTAMP and getattr(sa_type, "timezone", False):
                return JdbcType.TIMESTAMP_WITH_TIMEZONE
            return jdbc_type
    return JdbcType.OTHER


def column_size(sa_type: TypeEngine, jdbc_type: JdbcType) -> int:
    """Declared length or precision of a reflected type, 0 when unknown."""
    for attr in ("length", "display_width", "precision"):
        value = getattr(sa_type, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
    return _DEFAULT_SIZES.get(jdbc_type, 0)


class SQLAlchemyCatalogReader(CatalogReader):
    """
    Catalog reader backed by the SQLAlchemy Inspector.

    Wraps one open ``Connection``; the caller owns its lifecycle.
    """

    def __init__(self, connection: Connection):
        self.connection = connection
        self._inspector: Inspector | None = None

    @property
    def inspector(self) -> Inspector:
        """Inspector bound to the wrapped connection, created lazily."""
        if self._inspector is None:
            self._inspector = inspect(self.connection)
        return self._inspector

    def default_catalog(self) -> str | None:
        return self.connection.engine.url.database

    def default_schema(self) -> str | None:
        return self.inspector.default_schema_name

    def get_tables(
        self,
        catalog: str | None,
        schema: str | None,
        table_name_pattern: str | None,
        types: Sequence[TableType],
    ) -> list[Row]:
        rows: list[Row] = []
        for table_type in types:
            names = self._names_for_type(schema, table_type)
            for name in names:
                if not matches_pattern(name, table_name_pattern):
                    continue
                rows.append(
                    {
                        "table_cat": catalog,
                        "table_schem": schema,
                        "table_name": name,
                        "table_type": table_type.value,
                        "remarks": self._table_comment(schema, name),
                    }
                )
        return rows

    def _names_for_type(self, schema: str | None, table_type: TableType) -> list[str]:
        if table_type is TableType.TABLE:
            return self.inspector.get_table_names(schema=schema)
        if table_type is TableType.VIEW:
            return self.inspector.get_view_names(schema=schema)
        try:
            if table_type is TableType.MATERIALIZED_VIEW:
                return self.inspector.get_materialized_view_names(schema=schema)
            return self.inspector.get_temp_table_names()
        except NotImplementedError:
            logger.debug(f"{table_type.value} listing not supported by {self.connection.dialect.name}")
            return []

    def _table_comment(self, schema: str | None, table_name: str) -> str | None:
        try:
            comment = self.inspector.get_table_comment(table_name, schema=schema)
        except NotImplementedError:
            return None
        return comment.get("text") if comment else None

    def get_primary_keys(self, catalog: str | None, schema: str | None, table_name: str) -> list[Row]:
        pk = self.inspector.get_pk_constraint(table_name, schema=schema) or {}
        return [
            {
                "table_name": table_name,
                "column_name": column_name,
                "key_seq": seq,
                "pk_name": pk.get("name"),
            }
            for seq, column_name in enumerate(pk.get("constrained_columns") or [], start=1)
        ]

    def get_columns(self, catalog: str | None, schema: str | None, table_name: str) -> list[Row]:
        dialect = self.connection.dialect
        rows: list[Row] = []
        for position, col in enumerate(self.inspector.get_columns(table_name, schema=schema), start=1):
            sa_type = col["type"]
            label = type_label(sa_type, dialect)
            jdbc_type = resolve_jdbc_type(sa_type, label)

            row: Row = {
                "table_schem": schema,
                "table_name": table_name,
                "column_name": col["name"],
                "data_type": int(jdbc_type),
                "type_name": label,
                "column_size": column_size(sa_type, jdbc_type),
                "nullable": col.get("nullable", True),
                "remarks": col.get("comment"),
                "column_def": col.get("default"),
                "ordinal_position": position,
            }

            # Optional entries: only present when the dialect reports them
            scale = getattr(sa_type, "scale", None)
            if isinstance(scale, int):
                row["decimal_digits"] = scale
            autoincrement = col.get("autoincrement")
            if isinstance(autoincrement, bool):
                row["is_autoincrement"] = autoincrement
            if col.get("identity"):
                row["is_autoincrement"] = True

            enums = getattr(sa_type, "enums", None)
            if enums is None and label == "SET":
                enums = getattr(sa_type, "values", None)
            if enums:
                row["enum_values"] = [str(value) for value in enums]

            rows.append(row)
        return rows

    def get_index_info(self, catalog: str | None, schema: str | None, table_name: str) -> list[Row]:
        rows: list[Row] = []

        pk = self.inspector.get_pk_constraint(table_name, schema=schema) or {}
        for seq, column_name in enumerate(pk.get("constrained_columns") or [], start=1):
            rows.append(
                {
                    "table_name": table_name,
                    "non_unique": False,
                    "index_name": pk.get("name") or "PRIMARY",
                    "type": TABLE_INDEX_OTHER,
                    "ordinal_position": seq,
                    "column_name": column_name,
                }
            )

        for idx in self.inspector.get_indexes(table_name, schema=schema):
            # Expression indexes report None for computed members
            column_names = [c for c in idx.get("column_names", []) if c is not None]
            for seq, column_name in enumerate(column_names, start=1):
                rows.append(
                    {
                        "table_name": table_name,
                        "non_unique": not idx.get("unique", False),
                        "index_name": idx["name"] or f"idx_{table_name}",
                        "type": TABLE_INDEX_OTHER,
                        "ordinal_position": seq,
                        "column_name": column_name,
                    }
                )
        return rows
