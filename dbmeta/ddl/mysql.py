"""
MySQL DDL generator for dbmeta.

Backtick quoting, a trailing ``PRIMARY KEY (...)`` clause and the table
comment as an inline ``COMMENT='...'`` option.
"""

from typing import Sequence

from sqlalchemy import text

from dbmeta.ddl import fragments
from dbmeta.ddl.base import DDLQuery, DialectGenerator
from dbmeta.models.schema import ColumnMeta, DatabaseType, normalize_comment

TABLE_OPTIONS = "ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_0900_ai_ci"


def _escape_comment(comment: str) -> str:
    # Backslash is an escape character in MySQL string literals
    return normalize_comment(comment).replace("\\", "\\\\").replace("'", "\\'")


class MySQLDialectGenerator(DialectGenerator):
    """MySQL-family DDL generator."""

    inline_primary_key = False
    inline_table_comment = True
    identifier_quote = "`"

    @property
    def db_type(self) -> DatabaseType:
        return DatabaseType.MYSQL

    def column_definition_clause(self, column: ColumnMeta) -> str:
        default_clause = self.default_value_clause(column)

        if not column.nullable or column.primary_key:
            nullability = "NOT NULL"
        elif not default_clause:
            nullability = "DEFAULT NULL"
        else:
            nullability = ""

        auto_increment = "AUTO_INCREMENT" if column.primary_key and column.auto_increment else ""

        comment = ""
        if column.column_comment.strip():
            comment = f"COMMENT '{_escape_comment(column.column_comment)}'"

        return fragments.join_fragments(
            self.quote_identifier(column.column_name),
            self.type_fragment(column, column.jdbc_type),
            nullability,
            auto_increment,
            default_clause,
            comment,
        )

    def primary_key_clause(self, pk_names: Sequence[str]) -> str:
        if not pk_names:
            return ""
        joined = ", ".join(self.quote_identifier(name) for name in pk_names)
        clause = f", PRIMARY KEY ({joined})"
        # Composite keys use a BTREE index
        if len(pk_names) > 1:
            clause += " USING BTREE"
        return clause

    def table_comment_statements(
        self,
        schema: str | None,
        table: str,
        table_comment: str | None,
        columns: Sequence[ColumnMeta],
    ) -> list[str]:
        if not table_comment or not table_comment.strip():
            return []
        return [f"COMMENT='{_escape_comment(table_comment)}'"]

    def table_options(self) -> str:
        return TABLE_OPTIONS

    def table_ddl_query(self, schema: str | None, table: str) -> DDLQuery:
        return DDLQuery(text(f"SHOW CREATE TABLE {self.quote_table_reference(schema, table)}"), {}, 1)

    def view_ddl_query(self, schema: str | None, view: str) -> DDLQuery:
        return DDLQuery(text(f"SHOW CREATE VIEW {self.quote_table_reference(schema, view)}"), {}, 1)
