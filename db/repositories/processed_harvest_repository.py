"""
Processed harvest repository: live lookups of processed-harvest records.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.harvest import HarvestProcessed


class ProcessedHarvestRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_live(self, record_id: uuid.UUID) -> HarvestProcessed | None:
        stmt = select(HarvestProcessed).where(
            HarvestProcessed.id == record_id,
            HarvestProcessed.deleted_at.is_(None),
        )
        return self._session.scalars(stmt).one_or_none()

    def list_live_for_harvest(
        self,
        harvest_id: uuid.UUID,
        *,
        exclude_id: uuid.UUID | None = None,
    ) -> list[HarvestProcessed]:
        """Live records of one harvest, oldest first."""
        stmt = select(HarvestProcessed).where(
            HarvestProcessed.harvest_id == harvest_id,
            HarvestProcessed.deleted_at.is_(None),
        )
        if exclude_id is not None:
            stmt = stmt.where(HarvestProcessed.id != exclude_id)
        return list(self._session.scalars(stmt.order_by(HarvestProcessed.created_at)).all())

    def add(self, record: HarvestProcessed) -> HarvestProcessed:
        self._session.add(record)
        self._session.flush()
        return record
