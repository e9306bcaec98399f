"""
Schema metadata models for dbmeta.

Defines data models for database schema elements:
- Columns, Indexes, Tables
- Database and table-type identifiers
"""

import re
from enum import Enum
from typing import Any, Collection, Mapping, NamedTuple

from pydantic import ConfigDict, Field, model_validator

from dbmeta.models.base import BaseModel
from dbmeta.models.types import JdbcType, SemanticCategory, classify


class DatabaseType(str, Enum):
    """Database engines known to dbmeta."""

    MYSQL = "mysql"
    MARIADB = "mariadb"
    ORACLE = "oracle"
    POSTGRESQL = "postgresql"
    SQLSERVER = "sqlserver"
    SQLITE = "sqlite"
    H2 = "h2"
    DB2 = "db2"
    DM = "dm"
    KINGBASE = "kingbase"
    CLICKHOUSE = "clickhouse"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str | None) -> "DatabaseType":
        """Match a database type by its identifier, ignoring case; OTHER if unknown."""
        if name:
            lowered = name.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return cls.OTHER

    @classmethod
    def from_url(cls, url: str) -> "DatabaseType":
        """
        Detect the database type from a connection URL.

        Accepts SQLAlchemy URLs (``mysql+pymysql://...``) as well as
        JDBC URLs (``jdbc:mysql://...``).

        Args:
            url: Connection URL

        Returns:
            The detected type, OTHER when nothing matches
        """
        lowered = url.strip().lower()
        if lowered.startswith("jdbc:"):
            lowered = lowered[len("jdbc:"):]
        scheme = re.split(r"[:+]", lowered, maxsplit=1)[0]
        return _URL_SCHEMES.get(scheme, cls.OTHER)


_URL_SCHEMES: dict[str, DatabaseType] = {
    "mysql": DatabaseType.MYSQL,
    "cobar": DatabaseType.MYSQL,
    "mariadb": DatabaseType.MARIADB,
    "oracle": DatabaseType.ORACLE,
    "postgresql": DatabaseType.POSTGRESQL,
    "postgres": DatabaseType.POSTGRESQL,
    "sqlserver": DatabaseType.SQLSERVER,
    "mssql": DatabaseType.SQLSERVER,
    "sqlite": DatabaseType.SQLITE,
    "h2": DatabaseType.H2,
    "db2": DatabaseType.DB2,
    "ibm_db_sa": DatabaseType.DB2,
    "dm": DatabaseType.DM,
    "kingbase": DatabaseType.KINGBASE,
    "kingbase8": DatabaseType.KINGBASE,
    "clickhouse": DatabaseType.CLICKHOUSE,
}


class TableType(str, Enum):
    """Table-type filters understood by the catalog."""

    TABLE = "TABLE"
    VIEW = "VIEW"
    MATERIALIZED_VIEW = "MATERIALIZED VIEW"
    LOCAL_TEMPORARY = "LOCAL TEMPORARY"


def normalize_comment(comment: str | None) -> str:
    """Fold line breaks into tabs so comments stay on one line."""
    if not comment or not comment.strip():
        return ""
    return re.sub(r"\r\n|\r|\n", "\t", comment)


def catalog_flag(value: Any) -> bool:
    """
    Read a catalog yes/no column.

    Catalog result sets report flags such as ``is_autoincrement`` as the
    strings ``"YES"``/``"NO"``/``""``; readers may also pass real booleans.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().upper() == "YES"
    return bool(value)


class ColumnMeta(BaseModel):
    """
    Column metadata model.

    One physical column as reported by the catalog. Built once per
    catalog row and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    schema_name: str | None = Field(default=None, description="Schema name")
    table_name: str = Field(..., description="Table name")
    column_name: str = Field(..., description="Column name")
    primary_key: bool = Field(default=False, description="Is primary key")
    auto_increment: bool = Field(default=False, description="Is auto increment")
    ordinal_position: int = Field(default=0, description="1-based column position in table")
    column_default: str | None = Field(default=None, description="Raw default literal")
    nullable: bool = Field(default=True, description="Is nullable")
    jdbc_type: int = Field(default=int(JdbcType.VARCHAR), description="Vendor-neutral type code")
    jdbc_type_name: str = Field(default="VARCHAR", description="Vendor type label")
    column_length: int = Field(default=0, description="Precision or character length")
    scale: int = Field(default=0, description="Decimal digits")
    column_comment: str = Field(default="", description="Column comment")
    enum_values: list[str] = Field(default_factory=list, description="ENUM/SET literal values")

    @property
    def category(self) -> SemanticCategory:
        """Semantic category of the column type."""
        return classify(self.jdbc_type)

    @classmethod
    def from_row(cls, row: Mapping[str, Any], primary_keys: Collection[str] = ()) -> "ColumnMeta":
        """
        Build column metadata from one catalog column row.

        Scale and auto-increment are optional row entries; drivers that
        cannot report them simply leave them out.

        Args:
            row: Catalog column row
            primary_keys: Primary key column names of the owning table

        Returns:
            ColumnMeta instance
        """
        column_name = row["column_name"]
        return cls(
            schema_name=row.get("table_schem"),
            table_name=row["table_name"],
            column_name=column_name,
            primary_key=bool(column_name) and column_name in primary_keys,
            auto_increment=catalog_flag(row.get("is_autoincrement")),
            ordinal_position=int(row.get("ordinal_position") or 0),
            column_default=row.get("column_def"),
            nullable=bool(row.get("nullable", True)),
            jdbc_type=int(row.get("data_type", JdbcType.VARCHAR)),
            jdbc_type_name=row.get("type_name") or "VARCHAR",
            column_length=int(row.get("column_size") or 0),
            scale=int(row.get("decimal_digits") or 0),
            column_comment=normalize_comment(row.get("remarks")),
            enum_values=list(row.get("enum_values") or []),
        )


class IndexKey(NamedTuple):
    """Composite key identifying one index of one table."""

    table_name: str
    index_name: str


class IndexMeta(BaseModel):
    """
    Index metadata model.

    After merging, ``column_name`` holds the comma-joined columns of the
    index in catalog order. Two entries are equal when they name the same
    index of the same table.
    """

    model_config = ConfigDict(frozen=True)

    table_name: str = Field(..., description="Table name")
    index_name: str = Field(..., description="Index name")
    column_name: str = Field(default="", description="Indexed column(s), comma-joined")
    non_unique: bool = Field(default=True, description="Index allows duplicate values")

    @property
    def key(self) -> IndexKey:
        return IndexKey(self.table_name, self.index_name)

    @property
    def column_names(self) -> list[str]:
        return [name for name in self.column_name.split(",") if name]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexMeta):
            return NotImplemented
        return (self.index_name, self.table_name) == (other.index_name, other.table_name)

    def __hash__(self) -> int:
        return hash((self.index_name, self.table_name))


class TableMeta(BaseModel):
    """
    Table metadata model.

    Created from a single table-list row; primary keys, columns and
    indexes are filled in afterwards, in that order.
    """

    catalog: str | None = Field(default=None, description="Catalog name")
    schema_name: str | None = Field(default=None, description="Schema name")
    table_name: str = Field(..., description="Table name")
    table_comment: str | None = Field(default=None, description="Table comment")
    table_type: str = Field(default=TableType.TABLE.value, description="TABLE, VIEW, ...")
    pk_names: set[str] = Field(default_factory=set, description="Primary key column names")
    index_info_list: list[IndexMeta] = Field(default_factory=list, description="Merged indexes")
    columns: dict[str, ColumnMeta] = Field(default_factory=dict, description="Columns by name")

    @model_validator(mode="after")
    def _check_primary_keys(self) -> "TableMeta":
        if not self.columns:
            return self
        missing = [name for name in self.pk_names if name not in self.columns]
        if missing:
            raise ValueError(f"Primary key column(s) {missing} not found in table {self.table_name}")
        for name, column in self.columns.items():
            if column.primary_key != (name in self.pk_names):
                raise ValueError(
                    f"Column {self.table_name}.{name} primary key flag disagrees with pk_names"
                )
        return self

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TableMeta":
        """Build the base table record from one catalog table row."""
        return cls(
            catalog=row.get("table_cat"),
            schema_name=row.get("table_schem"),
            table_name=row["table_name"],
            table_comment=normalize_comment(row.get("remarks")) or None,
            table_type=row.get("table_type") or TableType.TABLE.value,
        )

    def is_primary_key(self, column_name: str | None) -> bool:
        """Check whether a column belongs to the primary key."""
        return bool(column_name) and column_name in self.pk_names

    def get_column(self, name: str) -> ColumnMeta | None:
        """Get column by name."""
        return self.columns.get(name)

    def ordered_columns(self) -> list[ColumnMeta]:
        """Columns in catalog order."""
        return list(self.columns.values())

    def primary_key_columns(self) -> list[ColumnMeta]:
        """Get primary key columns in catalog order."""
        return [col for col in self.columns.values() if col.primary_key]
