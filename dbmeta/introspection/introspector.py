"""
Schema introspector for dbmeta.

Reads catalog metadata through a ``CatalogReader`` and assembles
``TableMeta`` / ``ColumnMeta`` / ``IndexMeta`` records.
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Sequence, TypeVar

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from dbmeta.exceptions import MetadataRetrievalError
from dbmeta.introspection.base import TABLE_INDEX_OTHER, TABLE_INDEX_STATISTIC, CatalogReader, Row
from dbmeta.introspection.sqlalchemy_reader import SQLAlchemyCatalogReader
from dbmeta.models.schema import ColumnMeta, IndexKey, IndexMeta, TableMeta, TableType
from dbmeta.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

ReaderFactory = Callable[[Connection], CatalogReader]


def merge_index_rows(table_name: str, rows: Iterable[Row]) -> list[IndexMeta]:
    """
    Fold per-column index rows into one ``IndexMeta`` per index.

    Rows sharing ``(table_name, index_name)`` are merged by appending their
    column names, comma-separated, in arrival order. Statistic rows
    (``type == 0``) are not indexes and are skipped.

    Args:
        table_name: Owning table name
        rows: Catalog index rows

    Returns:
        Merged indexes in order of first appearance
    """
    merged: dict[IndexKey, IndexMeta] = {}
    for row in rows:
        if int(row.get("type", TABLE_INDEX_OTHER)) == TABLE_INDEX_STATISTIC:
            continue
        index_name = row.get("index_name")
        if not index_name:
            continue

        key = IndexKey(table_name, index_name)
        column_name = row.get("column_name") or ""
        existing = merged.get(key)
        if existing is None:
            merged[key] = IndexMeta(
                table_name=table_name,
                index_name=index_name,
                column_name=column_name,
                non_unique=bool(row.get("non_unique", True)),
            )
        elif column_name:
            joined = ",".join(filter(None, (existing.column_name, column_name)))
            merged[key] = existing.model_copy(update={"column_name": joined})
    return list(merged.values())


class SchemaIntrospector:
    """
    Reads schema metadata from a live database.

    Bound to either an ``Engine`` (each operation checks out its own
    connection and returns it before finishing, even on error) or a
    ``Connection`` (used as-is and left open). One introspector must not
    be shared across threads when bound to a single ``Connection``.

    Usage:
        introspector = SchemaIntrospector(create_engine(url))
        tables = introspector.get_table_meta(table_name_pattern="user%")
    """

    def __init__(self, bind: Engine | Connection, reader_factory: ReaderFactory = SQLAlchemyCatalogReader):
        self.bind = bind
        self.reader_factory = reader_factory

    @contextmanager
    def _open_reader(self, operation: str) -> Iterator[CatalogReader]:
        """Provide a catalog reader over a scoped connection."""
        if isinstance(self.bind, Connection):
            yield self.reader_factory(self.bind)
            return

        try:
            connection = self.bind.connect()
        except SQLAlchemyError as e:
            logger.error(f"Failed to acquire connection for {operation}: {e}")
            raise MetadataRetrievalError(
                f"failed to acquire connection for {operation}", operation="connect"
            ) from e

        with connection:
            yield self.reader_factory(connection)

    def _fetch(
        self,
        operation: str,
        table_name: str | None,
        func: Callable[..., T],
        *args: Any,
    ) -> T:
        """Run one catalog call, wrapping driver errors."""
        logger.debug(f"Fetching {operation}" + (f" for table {table_name}" if table_name else ""))
        try:
            return func(*args)
        except SQLAlchemyError as e:
            message = f"failed to fetch {operation}"
            if table_name:
                message += f" for table {table_name}"
            logger.error(f"{message}: {e}")
            raise MetadataRetrievalError(
                message, operation=operation, details={"table": table_name}
            ) from e

    @staticmethod
    def _normalize_types(types: Sequence[TableType | str] | None) -> list[TableType]:
        if not types:
            return [TableType.TABLE]
        return [t if isinstance(t, TableType) else TableType(t) for t in types]

    def _resolve_scope(
        self, reader: CatalogReader, catalog: str | None, schema: str | None
    ) -> tuple[str | None, str | None]:
        if not catalog:
            catalog = self._fetch("default catalog", None, reader.default_catalog)
        if not schema:
            schema = self._fetch("default schema", None, reader.default_schema)
        return catalog, schema

    def _list_tables(
        self,
        reader: CatalogReader,
        catalog: str | None,
        schema: str | None,
        table_name_pattern: str | None,
        types: list[TableType],
    ) -> list[Row]:
        rows = self._fetch(
            "table list", None, reader.get_tables, catalog, schema, table_name_pattern or None, types
        )
        wanted = {t.value for t in types}
        return [row for row in rows if row.get("table_name") and row.get("table_type") in wanted]

    def _primary_keys(
        self, reader: CatalogReader, catalog: str | None, schema: str | None, table_name: str
    ) -> set[str]:
        rows = self._fetch("primary keys", table_name, reader.get_primary_keys, catalog, schema, table_name)
        pk_names = {row["column_name"] for row in rows if row.get("column_name")}
        if len(pk_names) > 1:
            logger.warning(f"Table {table_name} has a composite primary key: [{', '.join(sorted(pk_names))}]")
        return pk_names

    def _columns(
        self,
        reader: CatalogReader,
        catalog: str | None,
        schema: str | None,
        table_name: str,
        pk_names: set[str],
    ) -> dict[str, ColumnMeta]:
        rows = self._fetch("columns", table_name, reader.get_columns, catalog, schema, table_name)
        columns: dict[str, ColumnMeta] = {}
        for row in rows:
            column = ColumnMeta.from_row(row, pk_names)
            columns[column.column_name] = column
        return columns

    def list_table_names(
        self,
        schema: str | None = None,
        table_name_pattern: str | None = None,
        types: Sequence[TableType | str] | None = None,
    ) -> list[str]:
        """
        List table names.

        Args:
            schema: Schema name, connection default when blank
            table_name_pattern: Name pattern (``%``/``_`` wildcards), all when blank
            types: Table types to include, TABLE only by default

        Returns:
            Table names in catalog order
        """
        table_types = self._normalize_types(types)
        with self._open_reader("table list") as reader:
            catalog, schema = self._resolve_scope(reader, None, schema)
            rows = self._list_tables(reader, catalog, schema, table_name_pattern, table_types)
        names = [row["table_name"] for row in rows]
        logger.debug(f"Found {len(names)} table(s) of type {[t.value for t in table_types]} in {schema}")
        return names

    def get_simple_table_meta(
        self,
        catalog: str | None = None,
        schema: str | None = None,
        table_name_pattern: str | None = None,
        types: Sequence[TableType | str] | None = None,
    ) -> list[TableMeta]:
        """Table-level records only, without keys, columns or indexes."""
        table_types = self._normalize_types(types)
        with self._open_reader("table list") as reader:
            catalog, schema = self._resolve_scope(reader, catalog, schema)
            rows = self._list_tables(reader, catalog, schema, table_name_pattern, table_types)
        return [TableMeta.from_row(row) for row in rows]

    def get_table_meta(
        self,
        catalog: str | None = None,
        schema: str | None = None,
        table_name_pattern: str | None = None,
        types: Sequence[TableType | str] | None = None,
    ) -> list[TableMeta]:
        """
        Read full metadata for every matching table.

        For each table the primary keys are read first, then the columns
        (flagged against the known primary keys), then the indexes.

        Args:
            catalog: Catalog name, connection default when blank
            schema: Schema name, connection default when blank
            table_name_pattern: Name pattern (``%``/``_`` wildcards), all when blank
            types: Table types to include, TABLE only by default

        Returns:
            List of TableMeta in catalog order

        Raises:
            MetadataRetrievalError: If any catalog step fails
        """
        table_types = self._normalize_types(types)
        with self._open_reader("table metadata") as reader:
            catalog, schema = self._resolve_scope(reader, catalog, schema)
            tables = [
                TableMeta.from_row(row)
                for row in self._list_tables(reader, catalog, schema, table_name_pattern, table_types)
            ]

            for table in tables:
                table_catalog = table.catalog or catalog
                table_schema = table.schema_name or schema

                table.pk_names = self._primary_keys(reader, table_catalog, table_schema, table.table_name)
                table.columns = self._columns(
                    reader, table_catalog, table_schema, table.table_name, table.pk_names
                )
                index_rows = self._fetch(
                    "indexes",
                    table.table_name,
                    reader.get_index_info,
                    table_catalog,
                    table_schema,
                    table.table_name,
                )
                table.index_info_list = merge_index_rows(table.table_name, index_rows)

        logger.info(f"Read metadata for {len(tables)} table(s) in {schema}")
        return tables

    def get_column_meta(
        self,
        catalog: str | None = None,
        schema: str | None = None,
        table_name: str | None = None,
    ) -> list[ColumnMeta]:
        """
        Read column metadata of one table.

        Returns:
            Columns in catalog order; empty when ``table_name`` is blank
        """
        if not table_name or not table_name.strip():
            return []

        with self._open_reader("columns") as reader:
            catalog, schema = self._resolve_scope(reader, catalog, schema)
            pk_names = self._primary_keys(reader, catalog, schema, table_name)
            columns = self._columns(reader, catalog, schema, table_name, pk_names)
        return list(columns.values())

    def get_column_names(self, table_name: str, schema: str | None = None) -> list[str]:
        """Column names of one table in catalog order."""
        return [column.column_name for column in self.get_column_meta(schema=schema, table_name=table_name)]
