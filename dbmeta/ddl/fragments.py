"""
Shared DDL fragment builders.

Pure functions used by every dialect generator: identifier quoting,
literal escaping, the type fragment and the default-value clause.
"""

from dbmeta.exceptions import DDLValidationError
from dbmeta.models.schema import ColumnMeta
from dbmeta.models.types import JdbcType, is_temporal

_INTEGER_TYPES = frozenset({JdbcType.TINYINT, JdbcType.SMALLINT, JdbcType.INTEGER, JdbcType.BIGINT})
_DECIMAL_TYPES = frozenset(
    {JdbcType.REAL, JdbcType.FLOAT, JdbcType.DOUBLE, JdbcType.NUMERIC, JdbcType.DECIMAL}
)
_TEMPORAL_TYPES = frozenset(
    {
        JdbcType.DATE,
        JdbcType.TIME,
        JdbcType.TIME_WITH_TIMEZONE,
        JdbcType.TIMESTAMP,
        JdbcType.TIMESTAMP_WITH_TIMEZONE,
    }
)
_CHAR_TYPES = frozenset({JdbcType.CHAR, JdbcType.NCHAR, JdbcType.VARCHAR, JdbcType.NVARCHAR})
_LOB_TYPES = frozenset(
    {
        JdbcType.LONGVARCHAR,
        JdbcType.LONGNVARCHAR,
        JdbcType.NCLOB,
        JdbcType.CLOB,
        JdbcType.BLOB,
        JdbcType.LONGVARBINARY,
        JdbcType.VARBINARY,
        JdbcType.SQLXML,
        JdbcType.ROWID,
        JdbcType.BINARY,
    }
)
_BOOLEAN_TYPES = frozenset({JdbcType.BIT, JdbcType.BOOLEAN})
_VALUE_LIST_TYPES = frozenset({"ENUM", "SET"})

CURRENT_TIMESTAMP = "CURRENT_TIMESTAMP"


def quote_ident(name: str, quote: str = '"') -> str:
    """Quote an identifier, doubling any embedded quote character."""
    return f"{quote}{name.replace(quote, quote * 2)}{quote}"


def escape_literal(value: str) -> str:
    """Escape a value for use inside a single-quoted SQL literal."""
    return value.replace("'", "''")


def _value_list(values: list[str]) -> str:
    return ",".join(f"'{escape_literal(v)}'" for v in values)


def type_fragment(column: ColumnMeta, jdbc_type: int) -> str:
    """
    Render the type part of a column definition.

    Branches on the exact type code rather than its semantic category,
    since DDL spelling differs per vendor type (``TINYINT(1)`` vs
    ``TINYINT``, ``ENUM('a','b')`` vs ``VARCHAR(n)``).

    Args:
        column: Column metadata
        jdbc_type: Type code to render the column as

    Returns:
        Type fragment such as ``VARCHAR(64)`` or ``DECIMAL(10,2)``

    Raises:
        DDLValidationError: If a decimal column declares a length below its scale
    """
    type_name = column.jdbc_type_name
    length = column.column_length
    scale = column.scale

    if jdbc_type in _INTEGER_TYPES:
        if jdbc_type == JdbcType.TINYINT and length == 1:
            return "TINYINT(1)"
        return type_name

    if jdbc_type in _DECIMAL_TYPES:
        if length > 0 and scale > 0:
            if length < scale:
                raise DDLValidationError(
                    f"Column {column.column_name}: length {length} must not be less than scale {scale}",
                    column_name=column.column_name,
                    details={"length": length, "scale": scale},
                )
            return f"{type_name}({length},{scale})"
        return type_name

    if jdbc_type in _TEMPORAL_TYPES:
        return type_name

    if jdbc_type in _CHAR_TYPES:
        if type_name.upper() in _VALUE_LIST_TYPES:
            if column.enum_values:
                return f"{type_name}({_value_list(column.enum_values)})"
            return type_name
        if type_name.upper() == "TINYTEXT":
            return type_name
        return f"{type_name}({length})"

    if jdbc_type in _LOB_TYPES:
        return type_name

    if jdbc_type in _BOOLEAN_TYPES:
        if length == 1:
            return "TINYINT(1)"
        return f"{type_name}({length})"

    if length <= 0:
        return type_name
    return f"{type_name}({length})"


def is_null_default(value: str | None) -> bool:
    """Whether a stored default means "no default"."""
    return value is None or not value.strip() or value.strip().lower() == "null"


def default_value_clause(column: ColumnMeta) -> str:
    """
    Render the ``DEFAULT`` clause of a column, or ``""`` when there is none.

    Temporal columns always default to the current timestamp; their raw
    default text is not trusted to be a valid literal.
    """
    value = column.column_default
    if is_null_default(value):
        return ""
    if is_temporal(column.jdbc_type):
        return f"DEFAULT {CURRENT_TIMESTAMP}"
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        return f"DEFAULT {value}"
    return f"DEFAULT '{escape_literal(value)}'"


def join_fragments(*fragments: str | None) -> str:
    """Join non-empty fragments with single spaces."""
    return " ".join(f.strip() for f in fragments if f and f.strip())
