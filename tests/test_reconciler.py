"""
tests/test_reconciler.py

Aggregate lifecycle against the stock ledger on SQLite.

Coverage
--------
- create applies every line, all-or-nothing
- unit family mismatch between line and stock
- update ordering: deletes, updates, creates; no-op lines untouched
- locked lines cannot be deleted or have stock fields changed
- delete reverts live lines, skipping retired resources
- exact rollback of the stock on any failure
"""

from __future__ import annotations

import datetime
import uuid
from typing import Any

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.services.catalog_service import CatalogService
from db.models.harvest import Harvest, HarvestDetail
from db.models.sale import Sale
from db.session import transaction_scope
from ledger.domains import CONSUMPTION_POLICY, HARVEST_POLICY, PURCHASE_POLICY, SALE_POLICY
from ledger.errors import (
    IncompatibleUnitFamily,
    InsufficientStock,
    LinkedRecordConflict,
    ValidationError,
)
from ledger.reconciler import AggregatePolicy, AggregateReconciler
from ledger.stock import StockDirection

from conftest import Catalog, seed_stock, stock_of

TODAY = datetime.date(2026, 10, 19)


def _line(employee_id: uuid.UUID, amount: float, unit: str = "GRAMOS", value_pay: int = 1000, **extra: Any) -> dict:
    return {
        "id": extra.pop("id", None),
        "employee_id": employee_id,
        "amount": amount,
        "unit_of_measure": unit,
        "value_pay": value_pay,
        **extra,
    }


def _harvest_data(crop_id: uuid.UUID, amount: float = 0, value_pay: int = 0) -> dict:
    return {
        "date": TODAY,
        "crop_id": crop_id,
        "amount": amount,
        "value_pay": value_pay,
        "observation": None,
    }


def _create_harvest(db: Session, catalog: Catalog, amounts: list[float]) -> Harvest:
    details = [_line(catalog.employees[index], amount) for index, amount in enumerate(amounts)]
    with transaction_scope(db, operation="create harvest"):
        return AggregateReconciler(HARVEST_POLICY).create(
            db,
            _harvest_data(catalog.crop, sum(amounts), 1000 * len(amounts)),
            details,
        )


def _submitted(harvest: Harvest) -> list[dict]:
    return [
        _line(line.employee_id, line.amount, line.unit_of_measure, line.value_pay, id=line.id)
        for line in harvest.live_details
    ]


def _count(db: Session, model: type) -> int:
    return db.scalar(select(func.count()).select_from(model).where(model.deleted_at.is_(None)))


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreate:
    def test_harvest_lines_feed_crop_stock(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100, 100])

        assert stock_of(db, catalog.crop) == 200
        assert harvest.amount == 200
        assert len(harvest.live_details) == 2

    def test_lines_in_other_units_are_normalised(self, db: Session, catalog: Catalog) -> None:
        details = [
            _line(catalog.employees[0], 2, "KILOGRAMOS"),
            _line(catalog.employees[1], 1, "LIBRAS"),
        ]
        with transaction_scope(db, operation="create harvest"):
            harvest = AggregateReconciler(HARVEST_POLICY).create(
                db, _harvest_data(catalog.crop, 2453.592, 2000), details
            )

        assert stock_of(db, catalog.crop) == 2453.592
        assert harvest.amount == 2453.592
        assert {line.unit_of_measure for line in harvest.details} == {"KILOGRAMOS", "LIBRAS"}

    def test_mass_unit_against_volume_stock(self, db: Session, catalog: Catalog) -> None:
        details = [_line(catalog.employees[0], 100, "LIBRAS")]

        with pytest.raises(IncompatibleUnitFamily):
            with transaction_scope(db, operation="create harvest"):
                AggregateReconciler(HARVEST_POLICY).create(
                    db, _harvest_data(catalog.volume_crop, 45359.2, 1000), details
                )

        assert stock_of(db, catalog.volume_crop) == 0
        assert _count(db, Harvest) == 0

    def test_any_failing_line_rolls_back_every_adjustment(self, db: Session, catalog: Catalog) -> None:
        seed_stock(db, catalog.crop, 150)
        details = [
            {"id": None, "crop_id": catalog.crop, "client_id": catalog.client,
             "amount": 100, "unit_of_measure": "GRAMOS", "value_pay": 10},
            {"id": None, "crop_id": catalog.other_crop, "client_id": catalog.client,
             "amount": 100, "unit_of_measure": "GRAMOS", "value_pay": 10},
        ]

        with pytest.raises(InsufficientStock):
            with transaction_scope(db, operation="create sale"):
                AggregateReconciler(SALE_POLICY).create(
                    db, {"date": TODAY, "amount": 200, "value_pay": 20}, details
                )

        assert stock_of(db, catalog.crop) == 150
        assert stock_of(db, catalog.other_crop) == 0
        assert _count(db, Sale) == 0

    def test_supplied_id_already_in_use(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100])
        taken = harvest.details[0].id

        with pytest.raises(ValidationError) as exc_info:
            with transaction_scope(db, operation="create harvest"):
                AggregateReconciler(HARVEST_POLICY).create(
                    db,
                    _harvest_data(catalog.crop, 10, 1000),
                    [_line(catalog.employees[1], 10, id=taken)],
                )

        assert exc_info.value.violations[0].code == "detail_id_taken"
        assert stock_of(db, catalog.crop) == 100


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


class TestUpdate:
    def test_delete_update_and_create_in_one_call(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100, 100])
        kept, dropped = harvest.live_details
        submitted = [
            _line(kept.employee_id, 150, id=kept.id),
            _line(catalog.employees[2], 0.05, "KILOGRAMOS"),
        ]

        with transaction_scope(db, operation="update harvest"):
            AggregateReconciler(HARVEST_POLICY).update(
                db, harvest, _harvest_data(catalog.crop, 200, 2000), submitted
            )

        assert stock_of(db, catalog.crop) == 200
        assert harvest.amount == 200
        assert dropped.deleted_at is not None
        assert {line.id for line in harvest.live_details} >= {kept.id}
        assert len(harvest.live_details) == 2
        assert db.get(HarvestDetail, kept.id).amount == 150

    def test_unchanged_lines_do_not_touch_stock(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100])
        sold = {"id": None, "crop_id": catalog.crop, "client_id": catalog.client,
                "amount": 100, "unit_of_measure": "GRAMOS", "value_pay": 10}
        with transaction_scope(db, operation="create sale"):
            AggregateReconciler(SALE_POLICY).create(db, {"date": TODAY, "amount": 100, "value_pay": 10}, [sold])

        # Reverting the old line would need 100 g that are no longer there.
        submitted = _submitted(harvest)
        submitted[0]["employee_id"] = catalog.employees[1]
        with transaction_scope(db, operation="update harvest"):
            AggregateReconciler(HARVEST_POLICY).update(
                db, harvest, {**_harvest_data(catalog.crop, 100, 1000), "observation": "re-weighed"}, submitted
            )

        assert stock_of(db, catalog.crop) == 0
        assert harvest.observation == "re-weighed"
        assert harvest.live_details[0].employee_id == catalog.employees[1]

    def test_changing_the_harvested_crop_moves_stock(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100, 50])

        with transaction_scope(db, operation="update harvest"):
            AggregateReconciler(HARVEST_POLICY).update(
                db, harvest, _harvest_data(catalog.other_crop, 150, 2000), _submitted(harvest)
            )

        assert stock_of(db, catalog.crop) == 0
        assert stock_of(db, catalog.other_crop) == 150

    def test_locked_line_cannot_change_amount(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100])
        line = harvest.details[0]
        line.locked_by = "payment:42"
        db.commit()
        submitted = _submitted(harvest)
        submitted[0]["amount"] = 120

        with pytest.raises(LinkedRecordConflict) as exc_info:
            with transaction_scope(db, operation="update harvest"):
                AggregateReconciler(HARVEST_POLICY).update(
                    db, harvest, _harvest_data(catalog.crop, 120, 1000), submitted
                )

        assert exc_info.value.line_id == line.id
        assert exc_info.value.locked_by == "payment:42"
        assert stock_of(db, catalog.crop) == 100
        assert db.get(HarvestDetail, line.id).amount == 100

    def test_locked_line_cannot_be_dropped(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100, 100])
        locked, other = harvest.details
        locked.locked_by = "payment:7"
        db.commit()
        submitted = [_line(other.employee_id, 100, id=other.id), _line(catalog.employees[2], 100)]

        with pytest.raises(LinkedRecordConflict):
            with transaction_scope(db, operation="update harvest"):
                AggregateReconciler(HARVEST_POLICY).update(
                    db, harvest, _harvest_data(catalog.crop, 200, 2000), submitted
                )

        assert stock_of(db, catalog.crop) == 200
        assert db.get(HarvestDetail, locked.id).deleted_at is None

    def test_locked_line_may_change_counterparty(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100])
        harvest.details[0].locked_by = "payment:1"
        db.commit()
        submitted = _submitted(harvest)
        submitted[0]["employee_id"] = catalog.employees[2]

        with transaction_scope(db, operation="update harvest"):
            AggregateReconciler(HARVEST_POLICY).update(
                db, harvest, _harvest_data(catalog.crop, 100, 1000), submitted
            )

        assert harvest.details[0].employee_id == catalog.employees[2]

    def test_failure_after_partial_reconciliation_rolls_back(self, db: Session, catalog: Catalog) -> None:
        seed_stock(db, catalog.crop, 300)
        line = {"id": None, "crop_id": catalog.crop, "client_id": catalog.client,
                "amount": 100, "unit_of_measure": "GRAMOS", "value_pay": 10}
        with transaction_scope(db, operation="create sale"):
            sale = AggregateReconciler(SALE_POLICY).create(
                db, {"date": TODAY, "amount": 100, "value_pay": 10}, [line]
            )
        assert stock_of(db, catalog.crop) == 200

        existing = sale.details[0]
        submitted = [
            {**line, "id": existing.id, "amount": 50},
            {**line, "crop_id": catalog.other_crop},
        ]
        with pytest.raises(InsufficientStock):
            with transaction_scope(db, operation="update sale"):
                AggregateReconciler(SALE_POLICY).update(
                    db, sale, {"date": TODAY, "amount": 150, "value_pay": 20}, submitted
                )

        assert stock_of(db, catalog.crop) == 200
        assert stock_of(db, catalog.other_crop) == 0
        assert len(db.get(Sale, sale.id).live_details) == 1


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class TestDelete:
    def test_reverts_every_live_line(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100, 60])

        with transaction_scope(db, operation="remove harvest"):
            AggregateReconciler(HARVEST_POLICY).delete(db, harvest)

        assert stock_of(db, catalog.crop) == 0
        assert harvest.deleted_at is not None
        assert all(line.deleted_at is not None for line in harvest.details)

    def test_locked_line_blocks_removal(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100])
        harvest.details[0].locked_by = "processed:3"
        db.commit()

        with pytest.raises(LinkedRecordConflict):
            with transaction_scope(db, operation="remove harvest"):
                AggregateReconciler(HARVEST_POLICY).delete(db, harvest)

        assert stock_of(db, catalog.crop) == 100
        assert db.get(Harvest, harvest.id).deleted_at is None

    def test_retired_resource_is_skipped(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100])
        CatalogService().retire(db, "crop", catalog.crop)

        with transaction_scope(db, operation="remove harvest"):
            AggregateReconciler(HARVEST_POLICY).delete(db, harvest)

        assert db.get(Harvest, harvest.id).deleted_at is not None

    def test_consumed_stock_blocks_removal(self, db: Session, catalog: Catalog) -> None:
        harvest = _create_harvest(db, catalog, [100])
        line = {"id": None, "crop_id": catalog.crop, "client_id": catalog.client,
                "amount": 80, "unit_of_measure": "GRAMOS", "value_pay": 10}
        with transaction_scope(db, operation="create sale"):
            AggregateReconciler(SALE_POLICY).create(db, {"date": TODAY, "amount": 80, "value_pay": 10}, [line])

        with pytest.raises(InsufficientStock):
            with transaction_scope(db, operation="remove harvest"):
                AggregateReconciler(HARVEST_POLICY).delete(db, harvest)

        assert stock_of(db, catalog.crop) == 20


# ---------------------------------------------------------------------------
# Supplies
# ---------------------------------------------------------------------------


def test_purchase_then_consumption_moves_supply_inventory(db: Session, catalog: Catalog) -> None:
    purchase_line = {"id": None, "supply_id": catalog.pesticide, "supplier_id": catalog.supplier,
                     "amount": 2, "unit_of_measure": "LITROS", "value_pay": 100}
    with transaction_scope(db, operation="create purchase"):
        AggregateReconciler(PURCHASE_POLICY).create(db, {"date": TODAY, "value_pay": 100}, [purchase_line])

    consumption_line = {"id": None, "supply_id": catalog.pesticide, "crop_id": catalog.crop,
                        "amount": 500, "unit_of_measure": "MILILITROS"}
    with transaction_scope(db, operation="create consumption"):
        consumption = AggregateReconciler(CONSUMPTION_POLICY).create(
            db, {"date": TODAY, "observation": "spraying"}, [consumption_line]
        )

    assert stock_of(db, catalog.pesticide) == 1500
    assert consumption.observation == "spraying"


def test_policy_requires_exactly_one_resource_source() -> None:
    with pytest.raises(ValueError):
        AggregatePolicy(
            name="broken",
            aggregate_model=Harvest,
            detail_model=HarvestDetail,
            effect=StockDirection.INCREMENT,
            aggregate_fields=("date",),
            detail_fields=("amount",),
        )
