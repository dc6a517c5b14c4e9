"""
app/services/sale_service.py

Sale writes: every detail line draws on the stock of the crop it sells.
"""

from __future__ import annotations

from functools import lru_cache

from app.config import get_ledger_settings
from app.services.aggregate_service import AggregateService
from ledger.domains import SALE_POLICY, SALE_RULES
from ledger.units import UnitConverter


class SaleService(AggregateService):
    entity_name = "Sale"


@lru_cache(maxsize=1)
def get_sale_service() -> SaleService:
    settings = get_ledger_settings()
    return SaleService(
        policy=SALE_POLICY,
        rules=SALE_RULES,
        converter=UnitConverter(precision=settings.rounding_digits),
        bulk_max_ids=settings.bulk_max_ids,
    )
