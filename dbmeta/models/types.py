"""
Vendor-neutral column type codes for dbmeta.

Type codes follow the numbering of the standard JDBC ``java.sql.Types``
constants so that catalog rows from any driver share one vocabulary.
Two read-only lookups are built once at import time:

- ``JdbcType.of_code``: numeric code -> ``JdbcType`` member
- ``classify``: numeric code -> coarse ``SemanticCategory``
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class JdbcType(IntEnum):
    """Vendor-neutral column type codes."""

    ARRAY = 2003
    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    BLOB = 2004
    CLOB = 2005
    BOOLEAN = 16
    # Oracle
    CURSOR = -10
    UNDEFINED = -2147482648
    NVARCHAR = -9
    NCHAR = -15
    NCLOB = 2011
    STRUCT = 2002
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    REF = 2006
    DATALINK = 70
    ROWID = -8
    LONGNVARCHAR = -16
    SQLXML = 2009
    # SQL Server 2008
    DATETIMEOFFSET = -155
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014

    @classmethod
    def of_code(cls, code: int) -> "JdbcType | None":
        """Look up a member by its numeric code, ``None`` if unknown."""
        return _CODE_LOOKUP.get(code)


_CODE_LOOKUP: Mapping[int, JdbcType] = MappingProxyType({t.value: t for t in JdbcType})


class SemanticCategory(IntEnum):
    """Coarse classification of a column type, independent of DDL rendering."""

    NONE = 0
    NUMBER = 1
    STRING = 2
    DATE = 3
    BOOLEAN = 4
    INTEGER = 5
    BIGNUMBER = 6
    SERIALIZABLE = 7
    BINARY = 8
    TIMESTAMP = 9
    TIME = 10
    INET = 11


def _build_category_table() -> Mapping[int, SemanticCategory]:
    table: dict[int, SemanticCategory] = {}
    groups = {
        SemanticCategory.STRING: (
            JdbcType.CHAR,
            JdbcType.NCHAR,
            JdbcType.VARCHAR,
            JdbcType.NVARCHAR,
            JdbcType.LONGVARCHAR,
            JdbcType.LONGNVARCHAR,
            JdbcType.CLOB,
            JdbcType.NCLOB,
            JdbcType.SQLXML,
            JdbcType.ROWID,
        ),
        SemanticCategory.INTEGER: (JdbcType.INTEGER, JdbcType.TINYINT, JdbcType.SMALLINT),
        SemanticCategory.NUMBER: (
            JdbcType.DECIMAL,
            JdbcType.DOUBLE,
            JdbcType.FLOAT,
            JdbcType.REAL,
            JdbcType.NUMERIC,
        ),
        SemanticCategory.TIMESTAMP: (JdbcType.TIMESTAMP, JdbcType.TIMESTAMP_WITH_TIMEZONE),
        SemanticCategory.DATE: (JdbcType.DATE,),
        SemanticCategory.TIME: (JdbcType.TIME, JdbcType.TIME_WITH_TIMEZONE),
        SemanticCategory.BOOLEAN: (JdbcType.BOOLEAN, JdbcType.BIT),
        SemanticCategory.BINARY: (
            JdbcType.BINARY,
            JdbcType.BLOB,
            JdbcType.VARBINARY,
            JdbcType.LONGVARBINARY,
        ),
        SemanticCategory.BIGNUMBER: (JdbcType.BIGINT,),
    }
    for category, codes in groups.items():
        for code in codes:
            table[int(code)] = category
    return MappingProxyType(table)


_CATEGORY_TABLE = _build_category_table()

TEMPORAL_CATEGORIES = frozenset(
    {SemanticCategory.DATE, SemanticCategory.TIME, SemanticCategory.TIMESTAMP}
)


def classify(jdbc_type: int) -> SemanticCategory:
    """
    Classify a vendor-neutral type code.

    Args:
        jdbc_type: Numeric type code (see ``JdbcType``)

    Returns:
        The semantic category; unmapped codes are treated as strings
    """
    return _CATEGORY_TABLE.get(int(jdbc_type), SemanticCategory.STRING)


def is_temporal(jdbc_type: int) -> bool:
    """Whether the code belongs to a date, time or timestamp category."""
    return classify(jdbc_type) in TEMPORAL_CATEGORIES
