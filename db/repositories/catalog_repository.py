"""
Catalog repository: crops, supplies, counterparties and stock rows.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.catalog import Crop, StockKind, StockResource, Supply

_RESOURCE_MODELS: dict[str, type] = {
    StockKind.CROP: Crop,
    StockKind.SUPPLY: Supply,
}


class CatalogRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_live(self, model: type, entity_id: uuid.UUID) -> Any | None:
        stmt = select(model).where(model.id == entity_id, model.deleted_at.is_(None))
        return self._session.scalars(stmt).one_or_none()

    def name_exists(self, model: type, name: str) -> bool:
        stmt = select(model.id).where(model.name == name)
        return self._session.scalars(stmt).first() is not None

    def create_crop(self, *, name: str, description: str | None, unit_family: str) -> Crop:
        crop = Crop(id=uuid.uuid4(), name=name, description=description, unit_family=unit_family)
        self._session.add(crop)
        self._session.add(
            StockResource(id=crop.id, kind=StockKind.CROP, unit_family=unit_family, quantity=0.0)
        )
        self._session.flush()
        return crop

    def create_supply(
        self,
        *,
        name: str,
        brand: str | None,
        unit_of_measure: str,
        unit_family: str,
    ) -> Supply:
        supply = Supply(id=uuid.uuid4(), name=name, brand=brand, unit_of_measure=unit_of_measure)
        self._session.add(supply)
        self._session.add(
            StockResource(id=supply.id, kind=StockKind.SUPPLY, unit_family=unit_family, quantity=0.0)
        )
        self._session.flush()
        return supply

    def create_party(self, model: type, **values: Any) -> Any:
        party = model(id=uuid.uuid4(), **values)
        self._session.add(party)
        self._session.flush()
        return party

    def retire_resource(self, kind: str, resource_id: uuid.UUID) -> bool:
        """
        Soft-delete a crop or supply together with its stock row.
        Returns False when no live record exists.
        """

        entity = self.get_live(_RESOURCE_MODELS[kind], resource_id)
        if entity is None:
            return False
        entity.soft_delete()
        stock = self._session.get(StockResource, resource_id)
        if stock is not None and stock.deleted_at is None:
            stock.soft_delete(entity.deleted_at)
        self._session.flush()
        return True

    def list_stock(self, kind: str) -> list[tuple[StockResource, str]]:
        """Live stock rows of one kind with the name of the tracked entity."""
        model = _RESOURCE_MODELS[kind]
        stmt = (
            select(StockResource, model.name)
            .join(model, model.id == StockResource.id)
            .where(
                StockResource.kind == kind,
                StockResource.deleted_at.is_(None),
            )
            .order_by(model.name)
        )
        return [(row[0], row[1]) for row in self._session.execute(stmt).all()]
