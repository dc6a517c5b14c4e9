"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

_ALLOWED_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class AppSettings:
    """
    Process-wide application settings.
    """

    log_level: str = "INFO"


@dataclass(frozen=True)
class LedgerSettings:
    """
    Runtime settings for the stock ledger and aggregate services.
    """

    rounding_digits: int = 3
    bulk_max_ids: int = 100
    purchase_value_multiple: int = 50


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings. Unknown log levels fall back to INFO.
    """

    level = _get_str_env("LOG_LEVEL", "INFO").upper()
    if level not in _ALLOWED_LOG_LEVELS:
        level = "INFO"
    return AppSettings(log_level=level)


@lru_cache(maxsize=1)
def get_ledger_settings() -> LedgerSettings:
    """
    Return cached ledger settings from environment variables.
    """

    return LedgerSettings(
        rounding_digits=min(6, max(0, _get_int_env("LEDGER_ROUNDING_DIGITS", 3))),
        bulk_max_ids=max(1, _get_int_env("BULK_REMOVAL_MAX_IDS", 100)),
        purchase_value_multiple=max(1, _get_int_env("PURCHASE_VALUE_MULTIPLE", 50)),
    )
