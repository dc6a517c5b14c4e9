"""
app/services/aggregate_service.py

Shared service orchestration for aggregates with detail lines.

Each public write validates the payload first (nothing touches the ledger
on a validation failure), then runs the reconciler inside one
``transaction_scope``. Bulk removal gives every id its own transaction.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.repositories.aggregate_repository import AggregateRepository
from db.repositories.errors import PersistenceError
from db.session import transaction_scope
from ledger.bulk import BulkOutcome, BulkRemovalOrchestrator
from ledger.errors import NotFound, RuleViolation, ValidationError
from ledger.reconciler import AggregatePolicy, AggregateReconciler
from ledger.stock import StockLedger
from ledger.totals import TotalsRuleSet, TotalsValidator
from ledger.units import UnitConverter

logger = logging.getLogger(__name__)


class AggregateService:
    """
    get / create / update / remove / remove_bulk for one aggregate domain.
    """

    entity_name = "Aggregate"

    def __init__(
        self,
        *,
        policy: AggregatePolicy,
        rules: TotalsRuleSet,
        converter: UnitConverter | None = None,
        bulk_max_ids: int = 100,
    ) -> None:
        self._policy = policy
        self._rules = rules
        self._converter = converter or UnitConverter()
        self._validator = TotalsValidator(self._converter)
        self._reconciler = AggregateReconciler(
            policy,
            converter=self._converter,
            ledger=StockLedger(precision=self._converter.precision),
        )
        self._bulk = BulkRemovalOrchestrator(policy.name)
        self._bulk_max_ids = max(1, bulk_max_ids)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, db: Session, record_id: uuid.UUID) -> Any:
        aggregate = self._repository(db).get_live(record_id)
        if aggregate is None:
            logger.warning("%s %s not found", self.entity_name, record_id)
            raise NotFound(self.entity_name, record_id)
        return aggregate

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, db: Session, payload: BaseModel) -> Any:
        self._validator.check(payload, self._rules)
        data, details = self._split(payload)

        with self._write(db, f"create {self._policy.name}"):
            aggregate = self._reconciler.create(db, data, details)

        logger.info(
            "Created %s %s with %d detail lines",
            self._policy.name,
            aggregate.id,
            len(details),
        )
        return aggregate

    def update(self, db: Session, record_id: uuid.UUID, payload: BaseModel) -> Any:
        self._validator.check(payload, self._rules)
        data, details = self._split(payload)

        with self._write(db, f"update {self._policy.name} {record_id}"):
            aggregate = self.get(db, record_id)
            self._reconciler.update(db, aggregate, data, details)

        logger.info(
            "Updated %s %s, %d live detail lines",
            self._policy.name,
            record_id,
            len(aggregate.live_details),
        )
        return aggregate

    def remove(self, db: Session, record_id: uuid.UUID) -> None:
        with self._write(db, f"remove {self._policy.name} {record_id}"):
            aggregate = self.get(db, record_id)
            self._reconciler.delete(db, aggregate)

        logger.info("Removed %s %s", self._policy.name, record_id)

    def remove_bulk(self, db: Session, record_ids: Sequence[uuid.UUID]) -> BulkOutcome:
        if len(record_ids) > self._bulk_max_ids:
            raise ValidationError(
                [
                    RuleViolation(
                        code="too_many_ids",
                        message=f"At most {self._bulk_max_ids} ids can be removed at once.",
                        field="record_ids",
                        context={"received": len(record_ids), "limit": self._bulk_max_ids},
                    )
                ]
            )
        return self._bulk.remove_all(record_ids, lambda record_id: self.remove(db, record_id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _repository(self, db: Session) -> AggregateRepository:
        return AggregateRepository(db, self._policy.aggregate_model)

    @staticmethod
    def _split(payload: BaseModel) -> tuple[dict[str, Any], list[dict[str, Any]]]:
        data = payload.model_dump()
        details = data.pop("details", None) or []
        return data, details

    @contextmanager
    def _write(self, db: Session, operation: str) -> Iterator[None]:
        try:
            with transaction_scope(db, operation=operation):
                yield
        except SQLAlchemyError as exc:
            logger.error("Persistence failure during %s: %s", operation, exc)
            raise PersistenceError(operation) from exc
