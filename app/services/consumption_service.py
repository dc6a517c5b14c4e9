"""
app/services/consumption_service.py

Supplies consumption writes: every detail line draws on a supply's inventory.
"""

from __future__ import annotations

from functools import lru_cache

from app.config import get_ledger_settings
from app.services.aggregate_service import AggregateService
from ledger.domains import CONSUMPTION_POLICY, CONSUMPTION_RULES
from ledger.units import UnitConverter


class ConsumptionService(AggregateService):
    entity_name = "Supplies consumption"


@lru_cache(maxsize=1)
def get_consumption_service() -> ConsumptionService:
    settings = get_ledger_settings()
    return ConsumptionService(
        policy=CONSUMPTION_POLICY,
        rules=CONSUMPTION_RULES,
        converter=UnitConverter(precision=settings.rounding_digits),
        bulk_max_ids=settings.bulk_max_ids,
    )
