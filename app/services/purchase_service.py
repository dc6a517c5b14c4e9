"""
app/services/purchase_service.py

Supplies purchase writes: every detail line adds to a supply's inventory.
The purchase total must be a multiple of PURCHASE_VALUE_MULTIPLE.
"""

from __future__ import annotations

from functools import lru_cache

from app.config import get_ledger_settings
from app.services.aggregate_service import AggregateService
from ledger.domains import PURCHASE_POLICY, purchase_rules
from ledger.units import UnitConverter


class PurchaseService(AggregateService):
    entity_name = "Supplies purchase"


@lru_cache(maxsize=1)
def get_purchase_service() -> PurchaseService:
    settings = get_ledger_settings()
    return PurchaseService(
        policy=PURCHASE_POLICY,
        rules=purchase_rules(settings.purchase_value_multiple),
        converter=UnitConverter(precision=settings.rounding_digits),
        bulk_max_ids=settings.bulk_max_ids,
    )
