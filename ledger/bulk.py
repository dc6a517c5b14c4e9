"""
ledger/bulk.py

Per-item isolated batch removal.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class BulkStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


@dataclass(frozen=True)
class BulkFailure:
    id: uuid.UUID
    error: str


@dataclass
class BulkOutcome:
    success: list[uuid.UUID] = field(default_factory=list)
    failed: list[BulkFailure] = field(default_factory=list)

    @property
    def status(self) -> BulkStatus:
        if not self.failed:
            return BulkStatus.SUCCESS
        if self.success:
            return BulkStatus.PARTIAL
        return BulkStatus.FAILURE

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": [str(record_id) for record_id in self.success],
            "failed": [{"id": str(item.id), "error": item.error} for item in self.failed],
        }


class BulkRemovalOrchestrator:
    """
    Apply a single-record removal to many ids, one transaction per id.

    ``remove_one`` owns its own transaction; a failure is recorded and the
    next id is attempted. This is the only place where ledger errors are
    turned into data instead of propagated.
    """

    def __init__(self, entity_name: str = "record") -> None:
        self._entity_name = entity_name

    def remove_all(
        self,
        ids: Iterable[uuid.UUID],
        remove_one: Callable[[uuid.UUID], Any],
    ) -> BulkOutcome:
        outcome = BulkOutcome()
        for record_id in ids:
            try:
                remove_one(record_id)
            except Exception as exc:
                message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
                logger.warning("Bulk removal of %s %s failed: %s", self._entity_name, record_id, message)
                outcome.failed.append(BulkFailure(id=record_id, error=message))
            else:
                outcome.success.append(record_id)

        logger.info(
            "Bulk removal of %s finished: %d succeeded, %d failed",
            self._entity_name,
            len(outcome.success),
            len(outcome.failed),
        )
        return outcome
