"""
app/services/catalog_service.py

Crops, supplies and counterparties, plus read access to the stock ledger.

Creating a crop or supply also opens its stock row at quantity 0 in the
same transaction; retiring one soft-deletes both.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_ledger_settings
from db.models.catalog import Crop, StockKind, Supply
from db.models.party import Client, Employee, Supplier
from db.repositories.catalog_repository import CatalogRepository
from db.repositories.errors import PersistenceError
from db.session import transaction_scope
from ledger.errors import NotFound, RuleViolation, ValidationError
from ledger.units import CANONICAL_UNITS, UnitConverter, UnitFamily

logger = logging.getLogger(__name__)

_KIND_LABELS = {StockKind.CROP: "Crop", StockKind.SUPPLY: "Supply"}


class CatalogService:
    def __init__(self, converter: UnitConverter | None = None) -> None:
        self._converter = converter or UnitConverter()

    # ------------------------------------------------------------------
    # Stock-bearing entities
    # ------------------------------------------------------------------

    def create_crop(
        self,
        db: Session,
        *,
        name: str,
        description: str | None = None,
        unit_family: str = UnitFamily.MASS.value,
    ) -> Crop:
        family = UnitFamily(unit_family)
        repository = CatalogRepository(db)
        with self._write(db, f"create crop {name!r}"):
            self._ensure_unique_name(repository, Crop, name)
            crop = repository.create_crop(name=name, description=description, unit_family=family.value)
        logger.info("Created crop %s (%s) with %s stock", crop.id, name, family.value)
        return crop

    def create_supply(
        self,
        db: Session,
        *,
        name: str,
        unit_of_measure: str,
        brand: str | None = None,
    ) -> Supply:
        family = self._converter.unit_family(unit_of_measure)
        repository = CatalogRepository(db)
        with self._write(db, f"create supply {name!r}"):
            self._ensure_unique_name(repository, Supply, name)
            supply = repository.create_supply(
                name=name,
                brand=brand,
                unit_of_measure=unit_of_measure,
                unit_family=family.value,
            )
        logger.info("Created supply %s (%s) with %s stock", supply.id, name, family.value)
        return supply

    def retire(self, db: Session, kind: str, resource_id: uuid.UUID) -> None:
        repository = CatalogRepository(db)
        with self._write(db, f"retire {kind} {resource_id}"):
            if not repository.retire_resource(kind, resource_id):
                raise NotFound(_KIND_LABELS[kind], resource_id)
        logger.info("Retired %s %s and its stock", kind, resource_id)

    # ------------------------------------------------------------------
    # Counterparties
    # ------------------------------------------------------------------

    def create_employee(self, db: Session, *, name: str, email: str | None = None) -> Employee:
        return self._create_party(db, Employee, name=name, email=email)

    def create_client(self, db: Session, *, name: str, email: str | None = None) -> Client:
        return self._create_party(db, Client, name=name, email=email)

    def create_supplier(self, db: Session, *, name: str, company_name: str | None = None) -> Supplier:
        return self._create_party(db, Supplier, name=name, company_name=company_name)

    def _create_party(self, db: Session, model: type, **values: Any) -> Any:
        with self._write(db, f"create {model.__tablename__}"):
            party = CatalogRepository(db).create_party(model, **values)
        logger.info("Created %s %s", model.__name__.lower(), party.id)
        return party

    # ------------------------------------------------------------------
    # Stock and units
    # ------------------------------------------------------------------

    def list_stock(self, db: Session, kind: str, *, unit: str | None = None) -> list[dict[str, Any]]:
        """
        Live stock of one kind. With ``unit`` only rows of that unit's family
        are listed, each quantity also expressed in that unit.
        """

        if kind not in _KIND_LABELS:
            raise ValidationError(
                [
                    RuleViolation(
                        code="invalid_kind",
                        message=f"Unknown stock kind: {kind}.",
                        field="kind",
                        context={"allowed": sorted(_KIND_LABELS)},
                    )
                ]
            )
        family = self._converter.unit_family(unit) if unit is not None else None

        items: list[dict[str, Any]] = []
        for resource, name in CatalogRepository(db).list_stock(kind):
            if family is not None and resource.unit_family != family.value:
                continue
            canonical = CANONICAL_UNITS[UnitFamily(resource.unit_family)]
            target = unit or canonical
            items.append(
                {
                    "id": resource.id,
                    "name": name,
                    "kind": resource.kind,
                    "unit_family": resource.unit_family,
                    "quantity": resource.quantity,
                    "canonical_unit": canonical,
                    "amount": self._converter.convert(canonical, target, resource.quantity),
                    "unit": target,
                }
            )
        return items

    def units(self) -> dict[str, Any]:
        return {
            "units": self._converter.available_units(),
            "canonical": {family.value: unit for family, unit in CANONICAL_UNITS.items()},
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _ensure_unique_name(repository: CatalogRepository, model: type, name: str) -> None:
        if repository.name_exists(model, name):
            raise ValidationError(
                [
                    RuleViolation(
                        code="name_taken",
                        message=f"A {model.__name__.lower()} named {name!r} already exists.",
                        field="name",
                    )
                ]
            )

    @contextmanager
    def _write(self, db: Session, operation: str) -> Iterator[None]:
        try:
            with transaction_scope(db, operation=operation):
                yield
        except SQLAlchemyError as exc:
            logger.error("Persistence failure during %s: %s", operation, exc)
            raise PersistenceError(operation) from exc


@lru_cache(maxsize=1)
def get_catalog_service() -> CatalogService:
    settings = get_ledger_settings()
    return CatalogService(converter=UnitConverter(precision=settings.rounding_digits))
