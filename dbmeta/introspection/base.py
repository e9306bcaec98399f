"""
Catalog reader interface for dbmeta.

A catalog reader answers the standard catalog questions (tables, primary
keys, columns, indexes) for one open connection and returns plain row
dictionaries. Row keys follow the usual catalog result-set columns in
lower case:

- tables:       table_cat, table_schem, table_name, table_type, remarks
- primary keys: table_name, column_name, key_seq, pk_name
- columns:      table_schem, table_name, column_name, data_type, type_name,
                column_size, decimal_digits, nullable, remarks, column_def,
                ordinal_position, is_autoincrement, enum_values
- index info:   table_name, non_unique, index_name, type, ordinal_position,
                column_name

``decimal_digits`` and ``is_autoincrement`` are optional; readers leave
them out when the driver cannot report them.
"""

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Sequence

from dbmeta.models.schema import TableType

Row = dict[str, Any]

# Index row ``type`` values
TABLE_INDEX_STATISTIC = 0
TABLE_INDEX_CLUSTERED = 1
TABLE_INDEX_HASHED = 2
TABLE_INDEX_OTHER = 3


class CatalogReader(ABC):
    """
    Abstract base class for catalog readers.

    Implementations wrap one open connection; they never open or close
    connections themselves.
    """

    @abstractmethod
    def default_catalog(self) -> str | None:
        """Catalog the connection is bound to, if the database has one."""
        ...

    @abstractmethod
    def default_schema(self) -> str | None:
        """Schema used when the caller does not name one."""
        ...

    @abstractmethod
    def get_tables(
        self,
        catalog: str | None,
        schema: str | None,
        table_name_pattern: str | None,
        types: Sequence[TableType],
    ) -> list[Row]:
        """
        List tables matching the filters.

        Args:
            catalog: Catalog name
            schema: Schema name
            table_name_pattern: Name pattern with ``%``/``_`` wildcards, None for all
            types: Table types to include

        Returns:
            One row per table, in catalog order
        """
        ...

    @abstractmethod
    def get_primary_keys(self, catalog: str | None, schema: str | None, table_name: str) -> list[Row]:
        """List primary key columns of a table."""
        ...

    @abstractmethod
    def get_columns(self, catalog: str | None, schema: str | None, table_name: str) -> list[Row]:
        """List columns of a table in ordinal order."""
        ...

    @abstractmethod
    def get_index_info(self, catalog: str | None, schema: str | None, table_name: str) -> list[Row]:
        """List index entries of a table, one row per indexed column."""
        ...


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    parts = []
    escaped = False
    for char in pattern:
        if escaped:
            parts.append(re.escape(char))
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def matches_pattern(name: str, pattern: str | None) -> bool:
    """
    Match a name against a catalog pattern.

    ``%`` matches any run of characters, ``_`` exactly one, and a
    backslash escapes the next character. A blank pattern matches all.
    """
    if not pattern:
        return True
    return _compile_pattern(pattern).fullmatch(name) is not None
