"""
ledger/reconciler.py

Create / update / delete lifecycle of an aggregate and its detail lines,
kept consistent with the stock ledger.

The reconciler works on a caller-owned session and never commits. The
owning service wraps each call in ``db.session.transaction_scope`` so that
any exception raised here rolls back every ledger adjustment and line
change made earlier in the same call.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from db.base import utcnow
from ledger.differ import diff
from ledger.errors import IncompatibleUnitFamily, LinkedRecordConflict, RuleViolation, ValidationError
from ledger.stock import StockDirection, StockLedger
from ledger.units import CANONICAL_UNITS, UnitConverter, UnitFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatePolicy:
    """
    Per-domain description of how an aggregate's lines touch the ledger.

    Exactly one of ``line_resource_field`` (each line names its resource)
    or ``aggregate_resource_field`` (every line feeds the aggregate's
    resource) must be set. ``effect`` is what a live line does to its
    resource; reverting a line applies the opposite direction.
    """

    name: str
    aggregate_model: type
    detail_model: type
    effect: StockDirection
    aggregate_fields: tuple[str, ...]
    detail_fields: tuple[str, ...]
    line_resource_field: str | None = None
    aggregate_resource_field: str | None = None
    canonical_total_field: str | None = None
    protected_fields: tuple[str, ...] = ("amount", "unit_of_measure", "value_pay")

    def __post_init__(self) -> None:
        if (self.line_resource_field is None) == (self.aggregate_resource_field is None):
            raise ValueError(
                f"{self.name}: set exactly one of line_resource_field or aggregate_resource_field."
            )


class AggregateReconciler:
    def __init__(
        self,
        policy: AggregatePolicy,
        *,
        converter: UnitConverter | None = None,
        ledger: StockLedger | None = None,
    ) -> None:
        self.policy = policy
        self._converter = converter or UnitConverter()
        self._ledger = ledger or StockLedger(precision=self._converter.precision)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(
        self,
        session: Session,
        data: Mapping[str, Any],
        details: Sequence[Mapping[str, Any]],
    ) -> Any:
        """
        Apply every line to the ledger, then persist the aggregate and lines.
        Any failure leaves the session dirty; the caller rolls back.
        """

        scope = {name: data.get(name) for name in self.policy.aggregate_fields}
        for line_data in details:
            self._apply(session, line_data, scope)

        aggregate = self.policy.aggregate_model(
            **scope,
            details=[self._build_line(session, line_data) for line_data in details],
        )
        self._store_canonical_total(aggregate)
        session.add(aggregate)
        session.flush()
        return aggregate

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(
        self,
        session: Session,
        aggregate: Any,
        data: Mapping[str, Any],
        details: Sequence[Mapping[str, Any]],
    ) -> Any:
        """
        Reconcile the persisted live lines with the submitted ones.

        Order: lock checks for every affected line, then deletes, updates
        and creates. Updated lines whose stock-relevant fields did not
        change produce no ledger adjustment.
        """

        old_lines = {line.id: line for line in aggregate.live_details}
        plan = diff((line_data.get("id") for line_data in details), old_lines.keys())
        logger.info(
            "Reconciling %s %s: %s",
            self.policy.name,
            aggregate.id,
            plan.summary(),
        )

        old_scope = self._aggregate_values(aggregate)
        new_scope = {
            **old_scope,
            **{name: data[name] for name in self.policy.aggregate_fields if name in data},
        }
        submitted = {
            line_data["id"]: line_data for line_data in details if line_data.get("id") is not None
        }

        deleted = [line for line_id, line in old_lines.items() if line_id in plan.to_delete]
        updated = [
            (old_lines[line_id], line_data)
            for line_id, line_data in submitted.items()
            if line_id in plan.to_update
        ]
        created = [
            line_data
            for line_data in details
            if line_data.get("id") is None or line_data["id"] in plan.to_create
        ]

        for line in deleted:
            self._ensure_unlocked(line, action="delete")
        changed: dict[uuid.UUID, bool] = {}
        for line, line_data in updated:
            changed[line.id] = self._stock_changed(line, line_data, old_scope, new_scope)
            if changed[line.id]:
                self._ensure_unlocked(line, action="modify")

        now = utcnow()
        for line in deleted:
            self._revert(session, line, old_scope)
            line.soft_delete(now)

        for line, line_data in updated:
            if changed[line.id]:
                self._revert(session, line, old_scope)
                self._apply(session, line_data, new_scope)
            for name in self.policy.detail_fields:
                if name in line_data:
                    setattr(line, name, line_data[name])

        for line_data in created:
            self._apply(session, line_data, new_scope)
            aggregate.details.append(self._build_line(session, line_data))

        for name in self.policy.aggregate_fields:
            if name in data:
                setattr(aggregate, name, data[name])
        self._store_canonical_total(aggregate)
        session.flush()
        return aggregate

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, session: Session, aggregate: Any) -> None:
        """
        Revert every live line and soft-delete the aggregate with its lines.
        Lines pointing at a retired resource are removed without a ledger
        effect.
        """

        live = aggregate.live_details
        for line in live:
            self._ensure_unlocked(line, action="delete")

        scope = self._aggregate_values(aggregate)
        now = utcnow()
        for line in live:
            self._revert(session, line, scope)
            line.soft_delete(now)
        aggregate.soft_delete(now)
        session.flush()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _aggregate_values(self, aggregate: Any) -> dict[str, Any]:
        return {name: getattr(aggregate, name) for name in self.policy.aggregate_fields}

    def _resource_id(self, line: Any, scope: Mapping[str, Any]) -> uuid.UUID:
        if self.policy.line_resource_field is not None:
            if isinstance(line, Mapping):
                return line[self.policy.line_resource_field]
            return getattr(line, self.policy.line_resource_field)
        return scope[self.policy.aggregate_resource_field]

    def _canonical_amount(self, session: Session, resource_id: uuid.UUID, unit: str, amount: float) -> float:
        resource_family = self._ledger.unit_family(resource_id, session)
        line_family = self._converter.unit_family(unit)
        if line_family.value != resource_family:
            logger.warning(
                "Unit %s (%s) does not match stock family %s of resource %s",
                unit,
                line_family.value,
                resource_family,
                resource_id,
            )
            raise IncompatibleUnitFamily(
                unit,
                CANONICAL_UNITS[UnitFamily(resource_family)],
                line_family.value,
                resource_family,
            )
        return self._converter.to_canonical(unit, amount)

    def _apply(self, session: Session, line_data: Mapping[str, Any], scope: Mapping[str, Any]) -> None:
        resource_id = self._resource_id(line_data, scope)
        amount = self._canonical_amount(
            session, resource_id, line_data["unit_of_measure"], line_data["amount"]
        )
        self._ledger.adjust(resource_id, amount, self.policy.effect, session)

    def _revert(self, session: Session, line: Any, scope: Mapping[str, Any]) -> None:
        resource_id = self._resource_id(line, scope)
        if not self._ledger.is_available(resource_id, session):
            logger.warning(
                "Skipping ledger effect of %s line %s: resource %s is retired",
                self.policy.name,
                line.id,
                resource_id,
            )
            return
        amount = self._canonical_amount(session, resource_id, line.unit_of_measure, line.amount)
        self._ledger.adjust(resource_id, amount, self.policy.effect.reverse(), session)

    def _ensure_unlocked(self, line: Any, *, action: str) -> None:
        if line.is_locked:
            logger.warning(
                "Refusing to %s locked %s line %s (locked by %s)",
                action,
                self.policy.name,
                line.id,
                line.locked_by,
            )
            raise LinkedRecordConflict(line.id, locked_by=line.locked_by, action=action)

    def _stock_changed(
        self,
        line: Any,
        line_data: Mapping[str, Any],
        old_scope: Mapping[str, Any],
        new_scope: Mapping[str, Any],
    ) -> bool:
        if self._resource_id(line, old_scope) != self._resource_id(line_data, new_scope):
            return True
        for name in self.policy.protected_fields:
            if name not in self.policy.detail_fields or name not in line_data:
                continue
            old_value, new_value = getattr(line, name), line_data[name]
            if isinstance(old_value, float) or isinstance(new_value, float):
                if self._converter.round(old_value) != self._converter.round(new_value):
                    return True
            elif old_value != new_value:
                return True
        return False

    def _build_line(self, session: Session, line_data: Mapping[str, Any]) -> Any:
        line_id = line_data.get("id") or uuid.uuid4()
        if session.get(self.policy.detail_model, line_id) is not None:
            raise ValidationError(
                [
                    RuleViolation(
                        code="detail_id_taken",
                        message=f"Detail id {line_id} is already in use.",
                        field="details.id",
                        context={"id": str(line_id)},
                    )
                ]
            )
        values = {name: line_data[name] for name in self.policy.detail_fields if name in line_data}
        return self.policy.detail_model(id=line_id, **values)

    def _store_canonical_total(self, aggregate: Any) -> None:
        field_name = self.policy.canonical_total_field
        if field_name is None:
            return
        total = sum(
            self._converter.to_canonical(line.unit_of_measure, line.amount)
            for line in aggregate.details
            if line.deleted_at is None
        )
        setattr(aggregate, field_name, self._converter.round(total))
