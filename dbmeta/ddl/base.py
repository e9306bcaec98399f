"""
Base DDL generator interface for dbmeta.

Defines the abstract dialect generator. Concrete generators decide on
quoting, primary key placement and comment placement; the type and
default-value fragments come from the shared ``fragments`` module.
"""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Sequence

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from dbmeta.ddl import fragments
from dbmeta.exceptions import MetadataRetrievalError
from dbmeta.models.schema import ColumnMeta, DatabaseType, TableMeta
from dbmeta.utils.logger import get_logger

logger = get_logger(__name__)


class DDLQuery(NamedTuple):
    """A server-side DDL lookup and the result column holding the text."""

    statement: TextClause
    params: dict[str, Any]
    column: int


class DialectGenerator(ABC):
    """
    Abstract base class for dialect DDL generators.

    Generators are stateless: every method renders from its arguments
    alone, so one instance may be shared freely.

    Class attributes:
        inline_primary_key: Primary key is flagged on the column itself
            instead of a trailing ``PRIMARY KEY (...)`` clause
        inline_table_comment: Table comment is a ``CREATE TABLE`` option
            instead of separate ``COMMENT ON`` statements
        statement_terminator: Appended to the ``CREATE TABLE`` statement
    """

    inline_primary_key: bool = False
    inline_table_comment: bool = False
    statement_terminator: str = ""
    identifier_quote: str = '"'

    @property
    @abstractmethod
    def db_type(self) -> DatabaseType:
        """Get the database type rendered by this generator."""
        ...

    def quote_identifier(self, name: str) -> str:
        return fragments.quote_ident(name, self.identifier_quote)

    def quote_table_reference(self, schema: str | None, table: str) -> str:
        """Quoted ``schema.table`` reference; the schema part is dropped when blank."""
        if not schema or not schema.strip():
            return self.quote_identifier(table)
        return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"

    def type_fragment(self, column: ColumnMeta, jdbc_type: int) -> str:
        return fragments.type_fragment(column, jdbc_type)

    def default_value_clause(self, column: ColumnMeta) -> str:
        return fragments.default_value_clause(column)

    @abstractmethod
    def column_definition_clause(self, column: ColumnMeta) -> str:
        """
        Render one column definition.

        Args:
            column: Column metadata

        Returns:
            Fragment such as ``"name" VARCHAR(64) NOT NULL``
        """
        ...

    @abstractmethod
    def primary_key_clause(self, pk_names: Sequence[str]) -> str:
        """
        Render the trailing primary key clause.

        Args:
            pk_names: Primary key column names in column order

        Returns:
            Fragment starting with ``", PRIMARY KEY"``, or ``""``
        """
        ...

    @abstractmethod
    def table_comment_statements(
        self,
        schema: str | None,
        table: str,
        table_comment: str | None,
        columns: Sequence[ColumnMeta],
    ) -> list[str]:
        """
        Render table and column comments.

        Returns:
            A single inline table option, or separate ``COMMENT ON``
            statements, depending on ``inline_table_comment``
        """
        ...

    def table_options(self) -> str:
        """Engine/charset suffix of ``CREATE TABLE``."""
        return ""

    def generate_create_table_statements(
        self,
        schema: str | None,
        table: str,
        table_comment: str | None,
        columns: Sequence[ColumnMeta],
    ) -> list[str]:
        """
        Render ``CREATE TABLE`` plus any separate comment statements.

        Column order in the output follows ``columns`` exactly.

        Returns:
            Statements in execution order; empty when there are no columns
        """
        if not columns:
            return []

        body = ", ".join(self.column_definition_clause(column) for column in columns)
        pk_names = [column.column_name for column in columns if column.primary_key]
        body += self.primary_key_clause(pk_names)
        comments = self.table_comment_statements(schema, table, table_comment, columns)

        create = fragments.join_fragments(
            "CREATE TABLE",
            self.quote_table_reference(schema, table),
            f"( {body} )",
            self.table_options(),
            *(comments if self.inline_table_comment else ()),
        )
        statements = [create + self.statement_terminator]
        if not self.inline_table_comment:
            statements.extend(comments)

        logger.debug(f"Generated {self.db_type.value} DDL for {table}: {len(columns)} column(s)")
        return statements

    def generate_create_table_sql(
        self,
        schema: str | None,
        table: str,
        table_comment: str | None,
        columns: Sequence[ColumnMeta],
    ) -> str:
        """
        Render the full ``CREATE TABLE`` text on one line.

        Returns:
            DDL text, or ``""`` when there are no columns
        """
        return " ".join(self.generate_create_table_statements(schema, table, table_comment, columns))

    def generate_table_ddl(self, table: TableMeta, schema: str | None = None) -> str:
        """Render DDL for an introspected table, optionally into another schema."""
        return self.generate_create_table_sql(
            schema if schema is not None else table.schema_name,
            table.table_name,
            table.table_comment,
            table.ordered_columns(),
        )

    @abstractmethod
    def table_ddl_query(self, schema: str | None, table: str) -> DDLQuery:
        """Server-side lookup returning the stored DDL of a table."""
        ...

    @abstractmethod
    def view_ddl_query(self, schema: str | None, view: str) -> DDLQuery:
        """Server-side lookup returning the stored DDL of a view."""
        ...

    def fetch_table_ddl(self, connection: Connection, schema: str | None, table: str) -> str | None:
        """Ask the server for the DDL it holds for a table."""
        return self._fetch_ddl(connection, self.table_ddl_query(schema, table), "table DDL", table)

    def fetch_view_ddl(self, connection: Connection, schema: str | None, view: str) -> str | None:
        """Ask the server for the DDL it holds for a view."""
        return self._fetch_ddl(connection, self.view_ddl_query(schema, view), "view DDL", view)

    def _fetch_ddl(self, connection: Connection, query: DDLQuery, operation: str, name: str) -> str | None:
        try:
            row = connection.execute(query.statement, query.params).fetchone()
        except SQLAlchemyError as e:
            message = f"failed to fetch {operation} for {name}"
            logger.error(f"{message}: {e}")
            raise MetadataRetrievalError(message, operation=operation, details={"table": name}) from e

        if row is None or row[query.column] is None:
            return None
        return str(row[query.column])
