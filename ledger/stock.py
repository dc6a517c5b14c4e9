"""
ledger/stock.py

Guarded read-then-write adjustments of StockResource rows.

The ledger never opens or commits a transaction: every call runs inside
the session handed to it, so it observes earlier uncommitted adjustments
of the same logical operation and commits or rolls back with the detail
line change that caused it.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.catalog import StockResource
from ledger.errors import InsufficientStock, StockResourceNotFound

logger = logging.getLogger(__name__)


class StockDirection(str, Enum):
    INCREMENT = "increment"
    DECREMENT = "decrement"

    def reverse(self) -> "StockDirection":
        if self is StockDirection.INCREMENT:
            return StockDirection.DECREMENT
        return StockDirection.INCREMENT


class StockLedger:
    """
    Per-resource quantity store expressed in canonical units.

    ``adjust`` is the only write path for ``stock_resources.quantity``.
    The row is read with ``SELECT ... FOR UPDATE`` so concurrent writers on
    PostgreSQL serialise on the resource; dialects without row locks
    (SQLite) simply ignore the clause.
    """

    def __init__(self, precision: int = 3) -> None:
        self._precision = precision

    def _load(self, session: Session, resource_id: uuid.UUID, *, for_update: bool) -> StockResource:
        stmt = select(StockResource).where(
            StockResource.id == resource_id,
            StockResource.deleted_at.is_(None),
        )
        if for_update:
            stmt = stmt.with_for_update()
        resource = session.scalars(stmt).one_or_none()
        if resource is None:
            raise StockResourceNotFound(resource_id)
        return resource

    def adjust(
        self,
        resource_id: uuid.UUID,
        amount: float,
        direction: StockDirection,
        session: Session,
    ) -> float:
        """
        Apply ``amount`` (canonical units, non-negative) to one resource.

        Returns the new quantity. A decrement that would leave the resource
        below zero raises InsufficientStock and writes nothing.
        """

        if amount < 0:
            raise ValueError(f"Stock adjustments take a non-negative amount, got {amount}.")

        resource = self._load(session, resource_id, for_update=True)
        current = round(resource.quantity, self._precision)
        amount = round(amount, self._precision)

        if direction is StockDirection.DECREMENT:
            if amount > current:
                logger.warning(
                    "Insufficient stock for %s: requested=%s available=%s",
                    resource_id,
                    amount,
                    current,
                )
                raise InsufficientStock(resource_id, amount, current)
            new_quantity = round(current - amount, self._precision)
        else:
            new_quantity = round(current + amount, self._precision)

        resource.quantity = new_quantity
        session.flush()

        logger.debug(
            "Stock %s %s by %s -> %s",
            resource_id,
            direction.value,
            amount,
            new_quantity,
        )
        return new_quantity

    def unit_family(self, resource_id: uuid.UUID, session: Session) -> str:
        return self._load(session, resource_id, for_update=False).unit_family

    def is_available(self, resource_id: uuid.UUID, session: Session) -> bool:
        """True when the resource exists and has not been retired."""
        stmt = select(StockResource.id).where(
            StockResource.id == resource_id,
            StockResource.deleted_at.is_(None),
        )
        return session.scalars(stmt).first() is not None
