"""
app/services/detail_lock_service.py

Lock and release of detail lines by downstream records (payments,
processed harvests). A locked line cannot be deleted and its stock
fields cannot change until it is released.
"""

from __future__ import annotations

import logging
import uuid
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from db.models.consumption import SuppliesConsumptionDetail
from db.models.harvest import HarvestDetail
from db.models.purchase import SuppliesPurchaseDetail
from db.models.sale import SaleDetail
from db.repositories.aggregate_repository import get_live_line
from db.session import transaction_scope
from ledger.errors import LinkedRecordConflict, NotFound

logger = logging.getLogger(__name__)

DETAIL_MODELS: dict[str, type] = {
    "harvest": HarvestDetail,
    "sale": SaleDetail,
    "purchase": SuppliesPurchaseDetail,
    "consumption": SuppliesConsumptionDetail,
}


class DetailLockService:
    def lock(self, db: Session, domain: str, line_id: uuid.UUID, locked_by: str) -> Any:
        """
        Pin ``line_id`` to the downstream reference ``locked_by``.

        Re-locking with the same reference is a no-op; a line already held
        by another reference raises LinkedRecordConflict.
        """

        with transaction_scope(db, operation=f"lock {domain} line {line_id}"):
            line = self._get_line(db, domain, line_id)
            if line.locked_by not in (None, locked_by):
                raise LinkedRecordConflict(line.id, locked_by=line.locked_by, action="lock")
            line.locked_by = locked_by
        logger.info("Locked %s line %s by %s", domain, line_id, locked_by)
        return line

    def release(self, db: Session, domain: str, line_id: uuid.UUID) -> Any:
        with transaction_scope(db, operation=f"release {domain} line {line_id}"):
            line = self._get_line(db, domain, line_id)
            line.locked_by = None
        logger.info("Released %s line %s", domain, line_id)
        return line

    @staticmethod
    def _get_line(db: Session, domain: str, line_id: uuid.UUID) -> Any:
        model = DETAIL_MODELS.get(domain)
        if model is None:
            raise ValueError(f"Unknown detail domain: {domain}")
        line = get_live_line(db, model, line_id)
        if line is None:
            raise NotFound(f"{domain.capitalize()} detail", line_id)
        return line


@lru_cache(maxsize=1)
def get_detail_lock_service() -> DetailLockService:
    return DetailLockService()
