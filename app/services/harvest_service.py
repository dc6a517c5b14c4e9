"""
app/services/harvest_service.py

Harvest writes: every detail line adds to the harvested crop's stock.
"""

from __future__ import annotations

from functools import lru_cache

from app.config import get_ledger_settings
from app.services.aggregate_service import AggregateService
from ledger.domains import HARVEST_POLICY, HARVEST_RULES
from ledger.units import UnitConverter


class HarvestService(AggregateService):
    entity_name = "Harvest"


@lru_cache(maxsize=1)
def get_harvest_service() -> HarvestService:
    """
    Build and cache the harvest service with env-driven settings.
    """
    settings = get_ledger_settings()
    return HarvestService(
        policy=HARVEST_POLICY,
        rules=HARVEST_RULES,
        converter=UnitConverter(precision=settings.rounding_digits),
        bulk_max_ids=settings.bulk_max_ids,
    )
