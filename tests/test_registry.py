from __future__ import annotations

import pytest

from dbmeta.ddl import DialectRegistry, DMDialectGenerator, MySQLDialectGenerator
from dbmeta.exceptions import DbMetaError, UnsupportedDialectError
from dbmeta.models.schema import DatabaseType


def test_resolve_registered_types() -> None:
    assert isinstance(DialectRegistry.resolve(DatabaseType.MYSQL), MySQLDialectGenerator)
    assert isinstance(DialectRegistry.resolve(DatabaseType.DM), DMDialectGenerator)


def test_resolve_by_name_ignores_case() -> None:
    assert isinstance(DialectRegistry.resolve("MySQL"), MySQLDialectGenerator)
    assert isinstance(DialectRegistry.resolve("dm"), DMDialectGenerator)


def test_resolve_returns_new_instances() -> None:
    assert DialectRegistry.resolve("mysql") is not DialectRegistry.resolve("mysql")


@pytest.mark.parametrize("db_type", [DatabaseType.ORACLE, "postgresql", "no-such-db"])
def test_resolve_unregistered_type_fails(db_type) -> None:
    with pytest.raises(UnsupportedDialectError) as exc_info:
        DialectRegistry.resolve(db_type)

    error = exc_info.value
    assert isinstance(error, DbMetaError)
    expected = db_type.value if isinstance(db_type, DatabaseType) else db_type
    assert error.db_type == expected
    assert error.message == f"Unsupported database type '{expected}'"
    assert error.details["supported"] == ["mysql", "dm"]


def test_supported_types() -> None:
    assert DialectRegistry.get_supported_types() == ["mysql", "dm"]
