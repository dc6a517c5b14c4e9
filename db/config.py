"""
db/config.py

Database settings for the farm ledger, read from the process environment
and the project's `.env` / `.env.local` files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_CLOUD_ENVIRONMENTS = {"prod", "production", "staging", "cloud"}
_TRUTHY = {"1", "true", "yes", "on"}


def load_env_files() -> None:
    """
    Copy KEY=VALUE pairs from `.env` and `.env.local` into os.environ.
    Variables already set in the process win.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.is_file():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = (part.strip() for part in line.split("=", 1))
            if key:
                os.environ.setdefault(key, value.strip("\"'"))


def normalize_postgres_url(url: str) -> str:
    """Point postgres URLs at the psycopg 3 driver."""
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Connection settings for the ledger database.

    lock_timeout_ms bounds how long a stock adjustment waits for the row
    lock on a stock resource before the write fails.
    """

    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle: int = 1800
    lock_timeout_ms: int = 5000

    @property
    def connect_args(self) -> dict[str, str]:
        if self.lock_timeout_ms <= 0:
            return {}
        return {"options": f"-c lock_timeout={self.lock_timeout_ms}"}


def resolve_database_url() -> str:
    """
    First non-empty of DATABASE_URL, CLOUD_DATABASE_URL (only when
    ENVIRONMENT is cloud-like) and LOCAL_DATABASE_URL.
    """

    load_env_files()
    names = ["DATABASE_URL"]
    if os.getenv("ENVIRONMENT", "local").strip().lower() in _CLOUD_ENVIRONMENTS:
        names.append("CLOUD_DATABASE_URL")
    names.append("LOCAL_DATABASE_URL")

    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return normalize_postgres_url(value)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, or configure "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )


def get_database_settings() -> DatabaseSettings:
    url = resolve_database_url()
    return DatabaseSettings(
        url=url,
        echo=os.getenv("SQL_ECHO", "").strip().lower() in _TRUTHY,
        pool_size=_env_int("DB_POOL_SIZE", 5),
        max_overflow=_env_int("DB_MAX_OVERFLOW", 10),
        pool_recycle=_env_int("DB_POOL_RECYCLE", 1800),
        lock_timeout_ms=_env_int("DB_LOCK_TIMEOUT_MS", 5000),
    )
