"""
ledger/errors.py

Error taxonomy of the stock ledger and aggregate reconciliation engine.

Every error raised while a transaction is open aborts that transaction;
only the bulk removal orchestrator turns errors into data.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Sequence


class LedgerError(Exception):
    """Base exception for ledger and reconciliation failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class RuleViolation:
    """
    One failed validation rule.
    """

    code: str
    message: str
    field: str | None = None
    context: dict[str, Any] | None = None


class ValidationError(LedgerError):
    """
    Raised when an aggregate payload breaks one or more declared rules.
    Carries every violation, not only the first.
    """

    def __init__(self, violations: Sequence[RuleViolation], *, message: str | None = None) -> None:
        self.violations = tuple(violations)
        summary = "; ".join(violation.message for violation in self.violations)
        super().__init__(message or f"Validation failed: {summary}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": violation.code,
                    "message": violation.message,
                    "field": violation.field,
                    "context": violation.context,
                }
                for violation in self.violations
            ],
        }


class IncompatibleUnitFamily(LedgerError):
    """Raised when a quantity would be converted between mass and volume."""

    def __init__(self, from_unit: str, to_unit: str, from_family: str, to_family: str) -> None:
        super().__init__(
            f"Cannot convert {from_unit} ({from_family}) to {to_unit} ({to_family})."
        )
        self.from_unit = from_unit
        self.to_unit = to_unit
        self.from_family = from_family
        self.to_family = to_family


class InsufficientStock(LedgerError):
    """Raised when a decrement would drive a stock resource below zero."""

    def __init__(self, resource_id: uuid.UUID, requested: float, available: float) -> None:
        super().__init__(
            f"Insufficient stock for resource {resource_id}: "
            f"requested {requested}, available {available}."
        )
        self.resource_id = resource_id
        self.requested = requested
        self.available = available


class LinkedRecordConflict(LedgerError):
    """Raised when a locked detail line would be deleted or mutated."""

    def __init__(self, line_id: uuid.UUID, *, locked_by: str | None = None, action: str = "modify") -> None:
        reference = f" by {locked_by}" if locked_by else ""
        super().__init__(
            f"You cannot {action} the record with id {line_id}, "
            f"it is linked to other records{reference}."
        )
        self.line_id = line_id
        self.locked_by = locked_by
        self.action = action


class NotFound(LedgerError):
    """Raised when a record does not exist or is soft-deleted."""

    def __init__(self, entity: str, entity_id: uuid.UUID | str) -> None:
        super().__init__(f"{entity} with id {entity_id} not found.")
        self.entity = entity
        self.entity_id = entity_id


class StockResourceNotFound(NotFound):
    """Raised when a ledger adjustment targets a missing or retired resource."""

    def __init__(self, resource_id: uuid.UUID) -> None:
        super().__init__("Stock resource", resource_id)
        self.resource_id = resource_id


class ProcessingLimitExceeded(LedgerError):
    """Raised when processed records would take more than a harvest yielded."""

    def __init__(self, harvest_id: uuid.UUID, available: float) -> None:
        super().__init__(
            f"You cannot add more processed harvest records, it exceeds the amount "
            f"of harvest {harvest_id}, only {available} available."
        )
        self.harvest_id = harvest_id
        self.available = available
