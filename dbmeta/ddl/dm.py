"""
DM (Dameng) DDL generator for dbmeta.

Double-quoted identifiers, ``PRIMARY KEY`` flagged on the column itself,
and comments emitted as separate ``COMMENT ON`` statements.
"""

from typing import Sequence

from sqlalchemy import text

from dbmeta.ddl import fragments
from dbmeta.ddl.base import DDLQuery, DialectGenerator
from dbmeta.models.schema import ColumnMeta, DatabaseType, normalize_comment


class DMDialectGenerator(DialectGenerator):
    """DM-family DDL generator."""

    inline_primary_key = True
    inline_table_comment = False
    statement_terminator = ";"
    identifier_quote = '"'

    @property
    def db_type(self) -> DatabaseType:
        return DatabaseType.DM

    def column_definition_clause(self, column: ColumnMeta) -> str:
        not_null = "NOT NULL" if not column.nullable or column.primary_key else ""
        primary_key = "PRIMARY KEY" if column.primary_key else ""
        auto_increment = "AUTO_INCREMENT" if column.primary_key and column.auto_increment else ""

        return fragments.join_fragments(
            self.quote_identifier(column.column_name),
            self.type_fragment(column, column.jdbc_type),
            not_null,
            primary_key,
            auto_increment,
            self.default_value_clause(column),
        )

    def primary_key_clause(self, pk_names: Sequence[str]) -> str:
        # Flagged per column in column_definition_clause
        return ""

    def table_comment_statements(
        self,
        schema: str | None,
        table: str,
        table_comment: str | None,
        columns: Sequence[ColumnMeta],
    ) -> list[str]:
        table_ref = self.quote_table_reference(schema, table)
        statements = []
        if table_comment and table_comment.strip():
            comment = fragments.escape_literal(normalize_comment(table_comment))
            statements.append(f"COMMENT ON TABLE {table_ref} IS '{comment}';")
        for column in columns:
            if column.column_comment.strip():
                column_ref = f"{table_ref}.{self.quote_identifier(column.column_name)}"
                comment = fragments.escape_literal(normalize_comment(column.column_comment))
                statements.append(f"COMMENT ON COLUMN {column_ref} IS '{comment}';")
        return statements

    def table_ddl_query(self, schema: str | None, table: str) -> DDLQuery:
        return DDLQuery(
            text("SELECT DBMS_METADATA.GET_DDL('TABLE', :name, :schema) FROM DUAL"),
            {"name": table, "schema": schema},
            0,
        )

    def view_ddl_query(self, schema: str | None, view: str) -> DDLQuery:
        return DDLQuery(
            text("SELECT DBMS_METADATA.GET_DDL('VIEW', :name, :schema) FROM DUAL"),
            {"name": view, "schema": schema},
            0,
        )
