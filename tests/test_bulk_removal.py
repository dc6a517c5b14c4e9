"""
tests/test_bulk_removal.py

Per-item isolation of the bulk removal orchestrator. Pure, no database.
"""

from __future__ import annotations

import uuid

from ledger.bulk import BulkRemovalOrchestrator, BulkStatus
from ledger.errors import LinkedRecordConflict, NotFound


def test_all_succeed() -> None:
    ids = [uuid.uuid4() for _ in range(3)]
    removed: list[uuid.UUID] = []

    outcome = BulkRemovalOrchestrator("harvest").remove_all(ids, removed.append)

    assert outcome.success == ids
    assert outcome.failed == []
    assert outcome.status is BulkStatus.SUCCESS
    assert removed == ids


def test_failures_are_isolated_and_iteration_continues() -> None:
    a, b, c = (uuid.uuid4() for _ in range(3))
    attempted: list[uuid.UUID] = []

    def remove_one(record_id: uuid.UUID) -> None:
        attempted.append(record_id)
        if record_id in (a, b):
            raise LinkedRecordConflict(uuid.uuid4(), action="delete")

    outcome = BulkRemovalOrchestrator("harvest").remove_all([a, b, c], remove_one)

    assert attempted == [a, b, c]
    assert outcome.success == [c]
    assert [failure.id for failure in outcome.failed] == [a, b]
    assert "linked to other records" in outcome.failed[0].error
    assert outcome.status is BulkStatus.PARTIAL


def test_total_failure() -> None:
    ids = [uuid.uuid4(), uuid.uuid4()]

    def remove_one(record_id: uuid.UUID) -> None:
        raise NotFound("Sale", record_id)

    outcome = BulkRemovalOrchestrator("sale").remove_all(ids, remove_one)

    assert outcome.success == []
    assert outcome.status is BulkStatus.FAILURE
    assert outcome.failed[1].error == f"Sale with id {ids[1]} not found."


def test_plain_exceptions_are_recorded_by_message() -> None:
    record_id = uuid.uuid4()

    def remove_one(_: uuid.UUID) -> None:
        raise RuntimeError("connection reset")

    outcome = BulkRemovalOrchestrator().remove_all([record_id], remove_one)

    assert outcome.to_dict() == {
        "success": [],
        "failed": [{"id": str(record_id), "error": "connection reset"}],
    }
