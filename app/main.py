"""
app/main.py

FastAPI entry point for the farm ledger API.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

logger = logging.getLogger(__name__)

_DATABASE_URL_VARS = ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")

# name -> smallest accepted value
_INTEGER_SETTINGS = {
    "LEDGER_ROUNDING_DIGITS": 0,
    "BULK_REMOVAL_MAX_IDS": 1,
    "PURCHASE_VALUE_MULTIPLE": 1,
    "DB_LOCK_TIMEOUT_MS": 0,
}


def _validate_env() -> None:
    """
    Fail fast on configuration the ledger cannot run with.

    Every problem is collected and reported in one RuntimeError so an
    operator fixes them all in a single restart.
    """

    from db.config import load_env_files

    load_env_files()
    problems: list[str] = []

    if not any(os.getenv(name, "").strip() for name in _DATABASE_URL_VARS):
        problems.append("No database URL configured. Set one of " + ", ".join(_DATABASE_URL_VARS) + ".")

    for name, minimum in _INTEGER_SETTINGS.items():
        raw = os.getenv(name)
        if raw is None:
            continue
        try:
            value = int(raw.strip())
        except ValueError:
            problems.append(f"{name}='{raw}' is not an integer.")
            continue
        if value < minimum:
            problems.append(f"{name}={value} must be >= {minimum}.")

    if problems:
        raise RuntimeError(
            "Startup validation failed:\n" + "\n".join(f"  - {problem}" for problem in problems)
        )


def _configure_logging() -> None:
    from app.config import get_app_settings

    logging.basicConfig(
        level=getattr(logging, get_app_settings().log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _verify_database() -> None:
    """
    Check connectivity and that the migrated schema carries every ledger
    table. Never migrates; a missing table aborts startup.
    """

    from sqlalchemy import inspect, text
    from sqlalchemy.exc import SQLAlchemyError

    import db.models  # noqa: F401 (registers every table on Base.metadata)
    from db.base import Base
    from db.session import get_engine

    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
            inspector = inspect(connection)
            present = set(inspector.get_table_names())
            stock_columns = (
                {column["name"] for column in inspector.get_columns("stock_resources")}
                if "stock_resources" in present
                else set()
            )
    except SQLAlchemyError as exc:
        raise RuntimeError("Database unavailable.") from exc

    missing = sorted(set(Base.metadata.tables) - present)
    if missing:
        logger.critical(
            "Ledger schema incomplete, missing tables: %s. Run 'alembic upgrade head'.",
            ", ".join(missing),
        )
        raise RuntimeError(f"Missing tables: {', '.join(missing)}. Run migrations and restart.")
    if "quantity" not in stock_columns:
        raise RuntimeError("stock_resources has no quantity column. Run migrations and restart.")


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _verify_database()
    logger.info("Database reachable and ledger schema present")
    yield


def create_app() -> FastAPI:
    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Farm Ledger API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import (
        catalog_router,
        consumption_router,
        harvest_router,
        processed_harvest_router,
        purchase_router,
        sale_router,
    )

    for router in (
        catalog_router,
        processed_harvest_router,
        harvest_router,
        sale_router,
        purchase_router,
        consumption_router,
    ):
        application.include_router(router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
