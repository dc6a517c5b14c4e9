"""
ledger/differ.py

Set partition of detail-line ids for aggregate updates.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReconciliationPlan:
    """
    Three pairwise-disjoint id sets covering ``new ∪ old``.

    ``new_line_count`` counts the lines submitted without an id; they are
    creates too but have no identity until the caller assigns one.
    """

    to_create: frozenset[uuid.UUID] = field(default_factory=frozenset)
    to_update: frozenset[uuid.UUID] = field(default_factory=frozenset)
    to_delete: frozenset[uuid.UUID] = field(default_factory=frozenset)
    new_line_count: int = 0

    def summary(self) -> dict[str, int]:
        return {
            "create": len(self.to_create) + self.new_line_count,
            "update": len(self.to_update),
            "delete": len(self.to_delete),
        }


def diff(new_ids: Iterable[uuid.UUID | None], old_ids: Iterable[uuid.UUID]) -> ReconciliationPlan:
    """
    Partition detail ids into create, update and delete sets.

    An id only in ``new_ids`` (or a ``None`` entry) is a create, an id in
    both is an update, and an id only in ``old_ids`` is a delete.
    Duplicate ids in ``new_ids`` are rejected instead of deduplicated.
    """

    seen: set[uuid.UUID] = set()
    unassigned = 0
    for line_id in new_ids:
        if line_id is None:
            unassigned += 1
            continue
        if line_id in seen:
            raise ValueError(f"Duplicate detail id in submitted lines: {line_id}")
        seen.add(line_id)

    old = set(old_ids)
    return ReconciliationPlan(
        to_create=frozenset(seen - old),
        to_update=frozenset(seen & old),
        to_delete=frozenset(old - seen),
        new_line_count=unassigned,
    )
