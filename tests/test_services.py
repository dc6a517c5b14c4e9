"""
tests/test_services.py

Domain services on SQLite: validation before any ledger effect, get,
bulk removal outcomes, persistence error wrapping, detail locks and the
catalog.
"""

from __future__ import annotations

import datetime
import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.schemas.harvest import HarvestInput
from app.schemas.purchase import PurchaseInput
from app.schemas.sale import SaleInput
from app.services.catalog_service import CatalogService
from app.services.detail_lock_service import DetailLockService
from app.services.harvest_service import HarvestService
from app.services.purchase_service import PurchaseService
from app.services.sale_service import SaleService
from db.repositories.errors import PersistenceError
from ledger.bulk import BulkStatus
from ledger.domains import HARVEST_POLICY, HARVEST_RULES, PURCHASE_POLICY, SALE_POLICY, SALE_RULES, purchase_rules
from ledger.errors import IncompatibleUnitFamily, LinkedRecordConflict, NotFound, ValidationError

from conftest import Catalog, seed_stock, stock_of

TODAY = datetime.date(2026, 10, 19)


@pytest.fixture()
def harvests() -> HarvestService:
    return HarvestService(policy=HARVEST_POLICY, rules=HARVEST_RULES, bulk_max_ids=5)


@pytest.fixture()
def sales() -> SaleService:
    return SaleService(policy=SALE_POLICY, rules=SALE_RULES)


def _harvest_input(catalog: Catalog, amounts: list[float], *, declared: float | None = None) -> HarvestInput:
    return HarvestInput(
        date=TODAY,
        crop_id=catalog.crop,
        amount=declared if declared is not None else sum(amounts),
        value_pay=500 * len(amounts),
        details=[
            {
                "employee_id": catalog.employees[index],
                "amount": amount,
                "unit_of_measure": "GRAMOS",
                "value_pay": 500,
            }
            for index, amount in enumerate(amounts)
        ],
    )


# ---------------------------------------------------------------------------
# Aggregate services
# ---------------------------------------------------------------------------


class TestHarvestService:
    def test_create_and_get(self, db: Session, catalog: Catalog, harvests: HarvestService) -> None:
        created = harvests.create(db, _harvest_input(catalog, [100, 100]))

        fetched = harvests.get(db, created.id)

        assert fetched.id == created.id
        assert stock_of(db, catalog.crop) == 200

    def test_totals_mismatch_never_touches_ledger(
        self,
        db: Session,
        catalog: Catalog,
        harvests: HarvestService,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            harvests.create(db, _harvest_input(catalog, [100, 50], declared=200))

        assert "must match amount" in exc_info.value.message
        assert stock_of(db, catalog.crop) == 0

    def test_removed_harvest_is_not_found(self, db: Session, catalog: Catalog, harvests: HarvestService) -> None:
        created = harvests.create(db, _harvest_input(catalog, [100]))
        harvests.remove(db, created.id)

        with pytest.raises(NotFound):
            harvests.get(db, created.id)
        with pytest.raises(NotFound):
            harvests.remove(db, created.id)
        assert stock_of(db, catalog.crop) == 0

    def test_update_unknown_id(self, db: Session, catalog: Catalog, harvests: HarvestService) -> None:
        with pytest.raises(NotFound):
            harvests.update(db, uuid.uuid4(), _harvest_input(catalog, [100]))

    def test_update_keeps_line_ids(self, db: Session, catalog: Catalog, harvests: HarvestService) -> None:
        created = harvests.create(db, _harvest_input(catalog, [100]))
        line_id = created.live_details[0].id
        payload = _harvest_input(catalog, [250])
        payload.details[0].id = line_id

        updated = harvests.update(db, created.id, payload)

        assert [line.id for line in updated.live_details] == [line_id]
        assert stock_of(db, catalog.crop) == 250

    def test_bulk_removal_reports_locked_records(
        self,
        db: Session,
        catalog: Catalog,
        harvests: HarvestService,
    ) -> None:
        a, b, c = (harvests.create(db, _harvest_input(catalog, [100])) for _ in range(3))
        locks = DetailLockService()
        locks.lock(db, "harvest", a.live_details[0].id, "payment:1")
        locks.lock(db, "harvest", b.live_details[0].id, "payment:2")

        outcome = harvests.remove_bulk(db, [a.id, b.id, c.id])

        assert outcome.success == [c.id]
        assert [failure.id for failure in outcome.failed] == [a.id, b.id]
        assert all("linked to other records" in failure.error for failure in outcome.failed)
        assert outcome.status is BulkStatus.PARTIAL
        assert stock_of(db, catalog.crop) == 200

    def test_bulk_removal_limit(self, db: Session, catalog: Catalog, harvests: HarvestService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            harvests.remove_bulk(db, [uuid.uuid4() for _ in range(6)])

        assert exc_info.value.violations[0].code == "too_many_ids"

    def test_database_errors_become_persistence_errors(
        self,
        db: Session,
        catalog: Catalog,
        harvests: HarvestService,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def broken_create(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(harvests._reconciler, "create", broken_create)

        with pytest.raises(PersistenceError) as exc_info:
            harvests.create(db, _harvest_input(catalog, [100]))

        assert isinstance(exc_info.value.__cause__, OperationalError)


    def test_volume_crop_harvest_in_litres(self, db: Session, catalog: Catalog, harvests: HarvestService) -> None:
        payload = HarvestInput(
            date=TODAY,
            crop_id=catalog.volume_crop,
            amount=2000,
            value_pay=100,
            details=[
                {"employee_id": catalog.employees[0], "amount": 2,
                 "unit_of_measure": "LITROS", "value_pay": 100},
            ],
        )

        harvest = harvests.create(db, payload)

        assert harvest.amount == 2000
        assert stock_of(db, catalog.volume_crop) == 2000

    def test_volume_crop_rejects_mass_lines(self, db: Session, catalog: Catalog, harvests: HarvestService) -> None:
        payload = HarvestInput(
            date=TODAY,
            crop_id=catalog.volume_crop,
            amount=500,
            value_pay=100,
            details=[
                {"employee_id": catalog.employees[0], "amount": 500,
                 "unit_of_measure": "GRAMOS", "value_pay": 100},
            ],
        )

        with pytest.raises(IncompatibleUnitFamily):
            harvests.create(db, payload)
        assert stock_of(db, catalog.volume_crop) == 0


class TestSaleService:
    def test_sale_draws_on_crop_stock(self, db: Session, catalog: Catalog, sales: SaleService) -> None:
        seed_stock(db, catalog.crop, 1000)
        payload = SaleInput(
            date=TODAY,
            amount=1000,
            value_pay=300,
            details=[
                {"crop_id": catalog.crop, "client_id": catalog.client, "amount": 1,
                 "unit_of_measure": "KILOGRAMOS", "value_pay": 300},
            ],
        )

        sale = sales.create(db, payload)

        assert sale.amount == 1000
        assert stock_of(db, catalog.crop) == 0

    def test_sale_of_volume_crop(self, db: Session, catalog: Catalog, sales: SaleService) -> None:
        seed_stock(db, catalog.volume_crop, 2000)
        payload = SaleInput(
            date=TODAY,
            amount=500,
            value_pay=80,
            details=[
                {"crop_id": catalog.volume_crop, "client_id": catalog.client, "amount": 0.5,
                 "unit_of_measure": "LITROS", "value_pay": 80},
            ],
        )

        sale = sales.create(db, payload)

        assert sale.amount == 500
        assert stock_of(db, catalog.volume_crop) == 1500

    def test_sale_cannot_mix_unit_families(self, db: Session, catalog: Catalog, sales: SaleService) -> None:
        seed_stock(db, catalog.crop, 1000)
        seed_stock(db, catalog.volume_crop, 1000)
        payload = SaleInput(
            date=TODAY,
            amount=1500,
            value_pay=160,
            details=[
                {"crop_id": catalog.crop, "client_id": catalog.client, "amount": 1000,
                 "unit_of_measure": "GRAMOS", "value_pay": 80},
                {"crop_id": catalog.volume_crop, "client_id": catalog.client, "amount": 500,
                 "unit_of_measure": "MILILITROS", "value_pay": 80},
            ],
        )

        with pytest.raises(ValidationError) as exc_info:
            sales.create(db, payload)

        assert [violation.code for violation in exc_info.value.violations] == ["incompatible_unit"]
        assert stock_of(db, catalog.crop) == 1000
        assert stock_of(db, catalog.volume_crop) == 1000


class TestPurchaseService:
    def test_value_must_be_multiple_of_configured_amount(self, db: Session, catalog: Catalog) -> None:
        service = PurchaseService(policy=PURCHASE_POLICY, rules=purchase_rules(50))
        payload = PurchaseInput(
            date=TODAY,
            value_pay=120,
            details=[
                {"supply_id": catalog.fertiliser, "supplier_id": catalog.supplier, "amount": 3,
                 "unit_of_measure": "KILOGRAMOS", "value_pay": 120},
            ],
        )

        with pytest.raises(ValidationError):
            service.create(db, payload)

        payload.value_pay = 150
        payload.details[0].value_pay = 150
        service.create(db, payload)
        assert stock_of(db, catalog.fertiliser) == 3000


# ---------------------------------------------------------------------------
# Detail locks
# ---------------------------------------------------------------------------


class TestDetailLocks:
    def test_lock_and_release(self, db: Session, catalog: Catalog, harvests: HarvestService) -> None:
        line_id = harvests.create(db, _harvest_input(catalog, [100])).live_details[0].id
        locks = DetailLockService()

        assert locks.lock(db, "harvest", line_id, "payment:9").locked_by == "payment:9"
        assert locks.lock(db, "harvest", line_id, "payment:9").is_locked
        with pytest.raises(LinkedRecordConflict):
            locks.lock(db, "harvest", line_id, "payment:10")

        assert not locks.release(db, "harvest", line_id).is_locked

    def test_unknown_line(self, db: Session, catalog: Catalog) -> None:
        with pytest.raises(NotFound):
            DetailLockService().lock(db, "sale", uuid.uuid4(), "payment:1")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestCatalogService:
    def test_stock_listing_in_requested_unit(self, db: Session, catalog: Catalog) -> None:
        seed_stock(db, catalog.crop, 2500)

        items = {item["name"]: item for item in CatalogService().list_stock(db, "crop", unit="KILOGRAMOS")}

        assert items["Maize"]["quantity"] == 2500
        assert items["Maize"]["amount"] == 2.5
        assert items["Maize"]["canonical_unit"] == "GRAMOS"
        assert "Sugarcane juice" not in items

    def test_stock_listing_defaults_to_canonical_unit(self, db: Session, catalog: Catalog) -> None:
        items = CatalogService().list_stock(db, "supply")

        assert {item["unit"] for item in items} == {"GRAMOS", "MILILITROS"}

    def test_unknown_kind(self, db: Session, catalog: Catalog) -> None:
        with pytest.raises(ValidationError):
            CatalogService().list_stock(db, "livestock")

    def test_duplicate_crop_name(self, db: Session, catalog: Catalog) -> None:
        with pytest.raises(ValidationError) as exc_info:
            CatalogService().create_crop(db, name="Maize")

        assert exc_info.value.violations[0].code == "name_taken"

    def test_supply_with_unknown_unit(self, db: Session) -> None:
        with pytest.raises(ValidationError):
            CatalogService().create_supply(db, name="Mystery", unit_of_measure="BUSHELS")

    def test_retire_twice(self, db: Session, catalog: Catalog) -> None:
        service = CatalogService()
        service.retire(db, "crop", catalog.other_crop)

        with pytest.raises(NotFound):
            service.retire(db, "crop", catalog.other_crop)
        assert "Coffee" not in {item["name"] for item in service.list_stock(db, "crop")}
