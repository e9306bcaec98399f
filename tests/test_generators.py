"""
Test MySQL and DM DDL generators.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from dbmeta.ddl import DMDialectGenerator, MySQLDialectGenerator
from dbmeta.exceptions import MetadataRetrievalError
from dbmeta.models.schema import ColumnMeta, DatabaseType, TableMeta
from dbmeta.models.types import JdbcType


def users_columns() -> list[ColumnMeta]:
    return [
        ColumnMeta(
            table_name="users",
            column_name="id",
            primary_key=True,
            auto_increment=True,
            nullable=False,
            jdbc_type=int(JdbcType.INTEGER),
            jdbc_type_name="INT",
            column_length=10,
            column_comment="primary id",
        ),
        ColumnMeta(
            table_name="users",
            column_name="name",
            nullable=False,
            jdbc_type=int(JdbcType.VARCHAR),
            jdbc_type_name="VARCHAR",
            column_length=64,
        ),
        ColumnMeta(
            table_name="users",
            column_name="created_at",
            jdbc_type=int(JdbcType.TIMESTAMP),
            jdbc_type_name="TIMESTAMP",
            column_default="CURRENT_TIMESTAMP",
        ),
    ]


def auto_column(primary_key: bool) -> ColumnMeta:
    return ColumnMeta(
        table_name="t",
        column_name="seq",
        primary_key=primary_key,
        auto_increment=True,
        jdbc_type=int(JdbcType.BIGINT),
        jdbc_type_name="BIGINT",
        column_length=19,
    )


class TestMySQLDialectGenerator:
    """MySQL-family rendering."""

    def setup_method(self):
        self.generator = MySQLDialectGenerator()

    def test_round_trip(self):
        sql = self.generator.generate_create_table_sql("app", "users", "user table", users_columns())

        assert sql == (
            "CREATE TABLE `app`.`users` ( "
            "`id` INT NOT NULL AUTO_INCREMENT COMMENT 'primary id', "
            "`name` VARCHAR(64) NOT NULL, "
            "`created_at` TIMESTAMP DEFAULT CURRENT_TIMESTAMP, "
            "PRIMARY KEY (`id`) ) "
            "ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_0900_ai_ci "
            "COMMENT='user table'"
        )
        assert sql.index("`id`") < sql.index("`name`") < sql.index("`created_at`")

    def test_single_statement(self):
        statements = self.generator.generate_create_table_statements(
            "app", "users", "user table", users_columns()
        )
        assert len(statements) == 1

    def test_no_columns_renders_nothing(self):
        assert self.generator.generate_create_table_sql("app", "users", "user table", []) == ""
        assert self.generator.generate_create_table_statements("app", "users", None, []) == []

    def test_auto_increment_requires_primary_key(self):
        assert "AUTO_INCREMENT" in self.generator.column_definition_clause(auto_column(True))
        assert "AUTO_INCREMENT" not in self.generator.column_definition_clause(auto_column(False))

    def test_nullable_column_without_default(self):
        column = ColumnMeta(
            table_name="t", column_name="note", jdbc_type=int(JdbcType.VARCHAR), column_length=20
        )
        assert self.generator.column_definition_clause(column) == "`note` VARCHAR(20) DEFAULT NULL"

    def test_nullable_column_with_default(self):
        column = ColumnMeta(
            table_name="t",
            column_name="status",
            jdbc_type=int(JdbcType.VARCHAR),
            column_length=8,
            column_default="new",
        )
        assert self.generator.column_definition_clause(column) == "`status` VARCHAR(8) DEFAULT 'new'"

    def test_null_literal_default_is_dropped(self):
        column = ColumnMeta(
            table_name="t",
            column_name="note",
            jdbc_type=int(JdbcType.VARCHAR),
            column_length=20,
            column_default="NULL",
        )
        assert "DEFAULT 'NULL'" not in self.generator.column_definition_clause(column)

    def test_composite_primary_key_uses_btree(self):
        assert self.generator.primary_key_clause(["a", "b"]) == ", PRIMARY KEY (`a`, `b`) USING BTREE"
        assert self.generator.primary_key_clause(["a"]) == ", PRIMARY KEY (`a`)"
        assert self.generator.primary_key_clause([]) == ""

    def test_comment_quotes_escaped(self):
        assert self.generator.table_comment_statements(None, "t", "it's", []) == ["COMMENT='it\\'s'"]
        assert self.generator.table_comment_statements(None, "t", "  ", []) == []

    def test_table_reference(self):
        assert self.generator.quote_table_reference("app", "users") == "`app`.`users`"
        assert self.generator.quote_table_reference(None, "users") == "`users`"

    def test_generate_table_ddl_retargets_schema(self):
        columns = users_columns()
        table = TableMeta(
            schema_name="src",
            table_name="users",
            pk_names={"id"},
            columns={c.column_name: c for c in columns},
        )
        assert self.generator.generate_table_ddl(table).startswith("CREATE TABLE `src`.`users`")
        assert self.generator.generate_table_ddl(table, schema="dst").startswith("CREATE TABLE `dst`.`users`")

    def test_db_type(self):
        assert self.generator.db_type is DatabaseType.MYSQL


class TestDMDialectGenerator:
    """DM-family rendering."""

    def setup_method(self):
        self.generator = DMDialectGenerator()

    def test_round_trip(self):
        statements = self.generator.generate_create_table_statements(
            "app", "users", "user table", users_columns()
        )

        assert statements == [
            'CREATE TABLE "app"."users" ( '
            '"id" INT NOT NULL PRIMARY KEY AUTO_INCREMENT, '
            '"name" VARCHAR(64) NOT NULL, '
            '"created_at" TIMESTAMP DEFAULT CURRENT_TIMESTAMP );',
            "COMMENT ON TABLE \"app\".\"users\" IS 'user table';",
            "COMMENT ON COLUMN \"app\".\"users\".\"id\" IS 'primary id';",
        ]

    def test_sql_joins_statements(self):
        sql = self.generator.generate_create_table_sql("app", "users", "user table", users_columns())
        assert sql.startswith('CREATE TABLE "app"."users"')
        assert "PRIMARY KEY (" not in sql
        assert sql.endswith("COMMENT ON COLUMN \"app\".\"users\".\"id\" IS 'primary id';")

    def test_no_columns_renders_nothing(self):
        assert self.generator.generate_create_table_sql("app", "users", "user table", []) == ""

    def test_auto_increment_requires_primary_key(self):
        assert "AUTO_INCREMENT" in self.generator.column_definition_clause(auto_column(True))
        assert "AUTO_INCREMENT" not in self.generator.column_definition_clause(auto_column(False))

    def test_comment_quotes_doubled(self):
        column = ColumnMeta(table_name="t", column_name="c", column_comment="it's")
        assert self.generator.table_comment_statements("app", "t", None, [column]) == [
            "COMMENT ON COLUMN \"app\".\"t\".\"c\" IS 'it''s';"
        ]

    def test_db_type(self):
        assert self.generator.db_type is DatabaseType.DM


class TestServerDDL:
    """DDL lookups executed against the server."""

    def test_mysql_show_create_table(self):
        connection = MagicMock()
        connection.execute.return_value.fetchone.return_value = ("users", "CREATE TABLE `users` (...)")

        ddl = MySQLDialectGenerator().fetch_table_ddl(connection, "app", "users")

        assert ddl == "CREATE TABLE `users` (...)"
        statement = connection.execute.call_args.args[0]
        assert str(statement) == "SHOW CREATE TABLE `app`.`users`"

    def test_dm_get_ddl_binds_names(self):
        connection = MagicMock()
        connection.execute.return_value.fetchone.return_value = ('CREATE VIEW "V" AS ...',)

        ddl = DMDialectGenerator().fetch_view_ddl(connection, "APP", "V")

        assert ddl == 'CREATE VIEW "V" AS ...'
        assert connection.execute.call_args.args[1] == {"name": "V", "schema": "APP"}

    def test_missing_row_returns_none(self):
        connection = MagicMock()
        connection.execute.return_value.fetchone.return_value = None
        assert MySQLDialectGenerator().fetch_view_ddl(connection, None, "v") is None

    def test_driver_error_is_wrapped(self):
        connection = MagicMock()
        connection.execute.side_effect = OperationalError("SHOW CREATE TABLE", {}, Exception("gone"))

        with pytest.raises(MetadataRetrievalError) as exc_info:
            MySQLDialectGenerator().fetch_table_ddl(connection, None, "users")

        assert exc_info.value.operation == "table DDL"
        assert isinstance(exc_info.value.__cause__, OperationalError)


def nullable_pk_column() -> ColumnMeta:
    return ColumnMeta(
        table_name="t",
        column_name="code",
        primary_key=True,
        nullable=True,
        jdbc_type=int(JdbcType.VARCHAR),
        jdbc_type_name="VARCHAR",
        column_length=16,
    )


@pytest.mark.parametrize("generator", [MySQLDialectGenerator(), DMDialectGenerator()])
def test_primary_key_column_is_never_nullable(generator) -> None:
    clause = generator.column_definition_clause(nullable_pk_column())
    assert "NOT NULL" in clause
    assert "DEFAULT NULL" not in clause


@pytest.mark.parametrize("generator", [MySQLDialectGenerator(), DMDialectGenerator()])
def test_comments_never_break_lines(generator) -> None:
    column = ColumnMeta(table_name="t", column_name="c", column_comment="first\nsecond")
    statements = generator.generate_create_table_statements("app", "t", "line one\nline two", [column])

    assert statements
    for statement in statements:
        assert "\n" not in statement and "\r" not in statement
    assert "line one\tline two" in " ".join(statements)


def test_mysql_comment_escapes_backslash() -> None:
    generator = MySQLDialectGenerator()
    assert generator.table_comment_statements(None, "t", "path C:\\", []) == ["COMMENT='path C:\\\\'"]
    assert generator.table_comment_statements(None, "t", "it\\'s", []) == ["COMMENT='it\\\\\\'s'"]

    column = ColumnMeta(table_name="t", column_name="c", column_comment="dir\\")
    assert generator.column_definition_clause(column).endswith("COMMENT 'dir\\\\'")


@pytest.mark.parametrize(
    ("generator", "quoted"),
    [(MySQLDialectGenerator(), "`users`"), (DMDialectGenerator(), '"users"')],
)
def test_table_reference_without_schema(generator, quoted: str) -> None:
    assert generator.quote_table_reference(None, "users") == quoted
    assert generator.quote_table_reference("  ", "users") == quoted
    assert generator.quote_table_reference("app", "users").endswith("." + quoted)
