"""
tests/test_stock_ledger.py

Guarded stock adjustments against SQLite.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.orm import Session

from app.services.catalog_service import CatalogService
from db.models.catalog import StockResource
from ledger.errors import InsufficientStock, StockResourceNotFound
from ledger.stock import StockDirection, StockLedger

from conftest import Catalog, seed_stock, stock_of


@pytest.fixture()
def ledger() -> StockLedger:
    return StockLedger()


class TestAdjust:
    def test_increment_and_decrement(self, db: Session, catalog: Catalog, ledger: StockLedger) -> None:
        assert ledger.adjust(catalog.crop, 500, StockDirection.INCREMENT, db) == 500
        assert ledger.adjust(catalog.crop, 120.5, StockDirection.DECREMENT, db) == 379.5
        db.commit()

        assert stock_of(db, catalog.crop) == 379.5

    def test_decrement_to_exactly_zero(self, db: Session, catalog: Catalog, ledger: StockLedger) -> None:
        seed_stock(db, catalog.crop, 250)

        assert ledger.adjust(catalog.crop, 250, StockDirection.DECREMENT, db) == 0
        db.commit()

        assert stock_of(db, catalog.crop) == 0

    def test_decrement_below_zero_fails_and_leaves_quantity(
        self,
        db: Session,
        catalog: Catalog,
        ledger: StockLedger,
    ) -> None:
        seed_stock(db, catalog.crop, 250)

        with pytest.raises(InsufficientStock) as exc_info:
            ledger.adjust(catalog.crop, 251, StockDirection.DECREMENT, db)

        assert exc_info.value.requested == 251
        assert exc_info.value.available == 250
        db.rollback()
        assert stock_of(db, catalog.crop) == 250

    def test_observes_uncommitted_adjustments_in_same_transaction(
        self,
        db: Session,
        catalog: Catalog,
        ledger: StockLedger,
    ) -> None:
        ledger.adjust(catalog.fertiliser, 1000, StockDirection.INCREMENT, db)

        with pytest.raises(InsufficientStock):
            ledger.adjust(catalog.fertiliser, 1000.001, StockDirection.DECREMENT, db)
        assert db.get(StockResource, catalog.fertiliser).quantity == 1000

    def test_unknown_resource(self, db: Session, catalog: Catalog, ledger: StockLedger) -> None:
        with pytest.raises(StockResourceNotFound):
            ledger.adjust(uuid.uuid4(), 1, StockDirection.INCREMENT, db)

    def test_retired_resource_rejects_adjustments(
        self,
        db: Session,
        catalog: Catalog,
        ledger: StockLedger,
    ) -> None:
        CatalogService().retire(db, "supply", catalog.pesticide)

        assert not ledger.is_available(catalog.pesticide, db)
        with pytest.raises(StockResourceNotFound):
            ledger.adjust(catalog.pesticide, 1, StockDirection.INCREMENT, db)

    def test_negative_amount_is_a_caller_error(self, db: Session, catalog: Catalog, ledger: StockLedger) -> None:
        with pytest.raises(ValueError):
            ledger.adjust(catalog.crop, -1, StockDirection.INCREMENT, db)


def test_direction_reverse() -> None:
    assert StockDirection.INCREMENT.reverse() is StockDirection.DECREMENT
    assert StockDirection.DECREMENT.reverse() is StockDirection.INCREMENT


def test_unit_family_follows_catalog(db: Session, catalog: Catalog, ledger: StockLedger) -> None:
    assert ledger.unit_family(catalog.crop, db) == "mass"
    assert ledger.unit_family(catalog.volume_crop, db) == "volume"
    assert ledger.unit_family(catalog.pesticide, db) == "volume"
