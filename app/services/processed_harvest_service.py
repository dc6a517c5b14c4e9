"""
app/services/processed_harvest_service.py

Processed harvests: parts of a harvest taken out of the crop's unprocessed
stock.

A harvest can never be processed beyond its own amount. While it has live
processed records its detail lines are locked, so neither the harvest nor
its line quantities can change underneath them.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_ledger_settings
from app.schemas.harvest import HarvestProcessedInput
from db.models.harvest import Harvest, HarvestProcessed
from db.repositories.aggregate_repository import AggregateRepository
from db.repositories.errors import PersistenceError
from db.repositories.processed_harvest_repository import ProcessedHarvestRepository
from db.session import transaction_scope
from ledger.errors import IncompatibleUnitFamily, NotFound, RuleViolation, ValidationError
from ledger.processing import check_processing_capacity, harvest_processed_reference
from ledger.stock import StockDirection, StockLedger
from ledger.units import CANONICAL_UNITS, UnitConverter, UnitFamily

logger = logging.getLogger(__name__)


class ProcessedHarvestService:
    entity_name = "Harvest processed"

    def __init__(self, converter: UnitConverter | None = None) -> None:
        self._converter = converter or UnitConverter()
        self._ledger = StockLedger(precision=self._converter.precision)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, db: Session, record_id: uuid.UUID) -> HarvestProcessed:
        record = ProcessedHarvestRepository(db).get_live(record_id)
        if record is None:
            logger.warning("%s %s not found", self.entity_name, record_id)
            raise NotFound(self.entity_name, record_id)
        return record

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, db: Session, payload: HarvestProcessedInput) -> HarvestProcessed:
        repository = ProcessedHarvestRepository(db)

        with self._write(db, f"create harvest_processed for harvest {payload.harvest_id}"):
            harvest = self._live_harvest(db, payload.harvest_id)
            amount = self._canonical_amount(db, harvest.crop_id, payload.unit_of_measure, payload.amount)
            remaining = check_processing_capacity(
                harvest.id,
                harvest.amount,
                self._canonical_amounts(repository.list_live_for_harvest(harvest.id)),
                amount,
                precision=self._converter.precision,
            )
            record = repository.add(
                HarvestProcessed(
                    id=uuid.uuid4(),
                    date=payload.date,
                    harvest_id=harvest.id,
                    crop_id=harvest.crop_id,
                    amount=payload.amount,
                    unit_of_measure=payload.unit_of_measure,
                )
            )
            self._ledger.adjust(harvest.crop_id, amount, StockDirection.DECREMENT, db)
            self._lock_lines(harvest)
            db.flush()

        logger.info(
            "Created harvest_processed %s for harvest %s, %s remaining",
            record.id,
            harvest.id,
            remaining,
        )
        return record

    def update(self, db: Session, record_id: uuid.UUID, payload: HarvestProcessedInput) -> HarvestProcessed:
        repository = ProcessedHarvestRepository(db)

        with self._write(db, f"update harvest_processed {record_id}"):
            record = self.get(db, record_id)
            if payload.harvest_id != record.harvest_id:
                raise ValidationError(
                    [
                        RuleViolation(
                            code="immutable_field",
                            message="The harvest of a processed record cannot change.",
                            field="harvest_id",
                            context={"current": str(record.harvest_id), "received": str(payload.harvest_id)},
                        )
                    ]
                )
            harvest = self._live_harvest(db, record.harvest_id)
            new_amount = self._canonical_amount(db, record.crop_id, payload.unit_of_measure, payload.amount)
            check_processing_capacity(
                harvest.id,
                harvest.amount,
                self._canonical_amounts(repository.list_live_for_harvest(harvest.id, exclude_id=record.id)),
                new_amount,
                precision=self._converter.precision,
            )

            old_amount = self._converter.to_canonical(record.unit_of_measure, record.amount)
            self._ledger.adjust(record.crop_id, old_amount, StockDirection.INCREMENT, db)
            self._ledger.adjust(record.crop_id, new_amount, StockDirection.DECREMENT, db)

            record.date = payload.date
            record.amount = payload.amount
            record.unit_of_measure = payload.unit_of_measure
            db.flush()

        logger.info("Updated harvest_processed %s: %s -> %s", record_id, old_amount, new_amount)
        return record

    def remove(self, db: Session, record_id: uuid.UUID) -> None:
        repository = ProcessedHarvestRepository(db)

        with self._write(db, f"remove harvest_processed {record_id}"):
            record = self.get(db, record_id)
            if self._ledger.is_available(record.crop_id, db):
                amount = self._converter.to_canonical(record.unit_of_measure, record.amount)
                self._ledger.adjust(record.crop_id, amount, StockDirection.INCREMENT, db)
            else:
                logger.warning(
                    "Skipping ledger effect of harvest_processed %s: crop %s is retired",
                    record.id,
                    record.crop_id,
                )
            record.soft_delete()
            db.flush()

            if not repository.list_live_for_harvest(record.harvest_id):
                harvest = db.get(Harvest, record.harvest_id)
                if harvest is not None:
                    self._release_lines(harvest)
                    db.flush()

        logger.info("Removed harvest_processed %s", record_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _live_harvest(db: Session, harvest_id: uuid.UUID) -> Harvest:
        harvest = AggregateRepository(db, Harvest).get_live(harvest_id)
        if harvest is None:
            logger.warning("Harvest %s not found for processing", harvest_id)
            raise NotFound("Harvest", harvest_id)
        return harvest

    def _canonical_amount(self, db: Session, crop_id: uuid.UUID, unit: str, amount: float) -> float:
        crop_family = self._ledger.unit_family(crop_id, db)
        unit_family = self._converter.unit_family(unit)
        if unit_family.value != crop_family:
            logger.warning(
                "Unit %s (%s) does not match stock family %s of crop %s",
                unit,
                unit_family.value,
                crop_family,
                crop_id,
            )
            raise IncompatibleUnitFamily(
                unit,
                CANONICAL_UNITS[UnitFamily(crop_family)],
                unit_family.value,
                crop_family,
            )
        return self._converter.to_canonical(unit, amount)

    def _canonical_amounts(self, records: list[HarvestProcessed]) -> list[float]:
        return [self._converter.to_canonical(record.unit_of_measure, record.amount) for record in records]

    @staticmethod
    def _lock_lines(harvest: Harvest) -> None:
        reference = harvest_processed_reference(harvest.id)
        for line in harvest.live_details:
            if line.locked_by is None:
                line.locked_by = reference

    @staticmethod
    def _release_lines(harvest: Harvest) -> None:
        # Lines pinned by other downstream records keep their lock.
        reference = harvest_processed_reference(harvest.id)
        for line in harvest.live_details:
            if line.locked_by == reference:
                line.locked_by = None
        logger.info("Released lines of harvest %s", harvest.id)

    @contextmanager
    def _write(self, db: Session, operation: str) -> Iterator[None]:
        try:
            with transaction_scope(db, operation=operation):
                yield
        except SQLAlchemyError as exc:
            logger.error("Persistence failure during %s: %s", operation, exc)
            raise PersistenceError(operation) from exc


@lru_cache(maxsize=1)
def get_processed_harvest_service() -> ProcessedHarvestService:
    settings = get_ledger_settings()
    return ProcessedHarvestService(UnitConverter(precision=settings.rounding_digits))
