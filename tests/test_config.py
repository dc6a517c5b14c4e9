"""
tests/test_config.py

Environment-backed settings.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from app.config import get_ledger_settings
from db.config import DatabaseSettings, get_database_settings, normalize_postgres_url


@pytest.fixture()
def fresh_ledger_settings() -> Iterator[None]:
    get_ledger_settings.cache_clear()
    yield
    get_ledger_settings.cache_clear()


def test_postgres_urls_use_psycopg() -> None:
    assert normalize_postgres_url("postgres://u:p@h/db") == "postgresql+psycopg://u:p@h/db"
    assert normalize_postgres_url("postgresql+psycopg://u:p@h/db") == "postgresql+psycopg://u:p@h/db"


def test_lock_timeout_becomes_connection_option() -> None:
    assert DatabaseSettings(url="postgresql+psycopg://h/db").connect_args == {
        "options": "-c lock_timeout=5000"
    }
    assert DatabaseSettings(url="postgresql+psycopg://h/db", lock_timeout_ms=0).connect_args == {}


def test_database_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://ledger@db/farm")
    monkeypatch.setenv("SQL_ECHO", "yes")
    monkeypatch.setenv("DB_LOCK_TIMEOUT_MS", "250")

    settings = get_database_settings()

    assert settings.url == "postgresql+psycopg://ledger@db/farm"
    assert settings.echo is True
    assert settings.lock_timeout_ms == 250


def test_ledger_settings_clamp_bad_values(
    monkeypatch: pytest.MonkeyPatch,
    fresh_ledger_settings: None,
) -> None:
    monkeypatch.setenv("BULK_REMOVAL_MAX_IDS", "0")
    monkeypatch.setenv("PURCHASE_VALUE_MULTIPLE", "fifty")

    settings = get_ledger_settings()

    assert settings.bulk_max_ids == 1
    assert settings.purchase_value_multiple == 50
