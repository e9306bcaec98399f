from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from dbmeta.config import get_settings

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY,
        name VARCHAR(64) NOT NULL,
        amount NUMERIC(10, 2),
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX idx_users_name_amount ON users (name, amount)",
    "CREATE UNIQUE INDEX uq_users_name ON users (name)",
    """
    CREATE TABLE order_items (
        order_id INTEGER NOT NULL,
        line_no INTEGER NOT NULL,
        sku VARCHAR(32),
        PRIMARY KEY (order_id, line_no)
    )
    """,
    "CREATE VIEW active_users AS SELECT id, name FROM users",
]


@pytest.fixture
def sqlite_path(tmp_path: Path) -> Path:
    path = tmp_path / "catalog.db"
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as connection:
        for statement in SCHEMA_STATEMENTS:
            connection.execute(text(statement))
    engine.dispose()
    return path


@pytest.fixture
def sqlite_url(sqlite_path: Path) -> str:
    return f"sqlite:///{sqlite_path}"


@pytest.fixture
def sqlite_engine(sqlite_url: str) -> Engine:
    engine = create_engine(sqlite_url)
    yield engine
    engine.dispose()


@pytest.fixture
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Settings isolated from the caller's environment and .env file."""
    for key in (
        "DBMETA_DATABASE_URL",
        "DBMETA_DATABASE_TYPE",
        "DBMETA_DEFAULT_SCHEMA",
        "DBMETA_TARGET_DIALECT",
        "DBMETA_LOG_LEVEL",
        "DBMETA_LOG_FILE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
