"""
Aggregate repository: live lookups of aggregates and their detail lines.

Soft-deleted rows are invisible to every lookup here. Writes happen
through the reconciler on the same session; the caller owns the
transaction.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session


class AggregateRepository:
    def __init__(self, session: Session, aggregate_model: type) -> None:
        self._session = session
        self._aggregate_model = aggregate_model

    def get_live(self, aggregate_id: uuid.UUID) -> Any | None:
        """Live aggregate by id; its ``details`` are selectin-loaded."""
        stmt = select(self._aggregate_model).where(
            self._aggregate_model.id == aggregate_id,
            self._aggregate_model.deleted_at.is_(None),
        )
        return self._session.scalars(stmt).one_or_none()


def get_live_line(session: Session, detail_model: type, line_id: uuid.UUID) -> Any | None:
    stmt = select(detail_model).where(
        detail_model.id == line_id,
        detail_model.deleted_at.is_(None),
    )
    return session.scalars(stmt).one_or_none()
