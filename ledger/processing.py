"""
ledger/processing.py

Capacity of a harvest for processed records.

All amounts are in the canonical unit of the crop's family, the unit a
harvest stores its own amount in.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from ledger.errors import ProcessingLimitExceeded

logger = logging.getLogger(__name__)


def harvest_processed_reference(harvest_id: uuid.UUID) -> str:
    """locked_by value set on the lines of a harvest that has been processed."""
    return f"harvest_processed:{harvest_id}"


def check_processing_capacity(
    harvest_id: uuid.UUID,
    harvest_amount: float,
    processed: Iterable[float],
    requested: float,
    *,
    precision: int = 3,
) -> float:
    """
    Return what remains of the harvest once ``requested`` is processed.

    ``processed`` holds the other live records of the harvest; on update
    the record being edited must be left out of it. Raises
    ProcessingLimitExceeded naming the quantity still available.
    """

    already = round(sum(processed), precision)
    available = round(harvest_amount - already, precision)
    requested = round(requested, precision)

    if requested > available:
        logger.warning(
            "Processing limit of harvest %s exceeded: requested=%s available=%s",
            harvest_id,
            requested,
            available,
        )
        raise ProcessingLimitExceeded(harvest_id, max(available, 0.0))
    return round(available - requested, precision)
