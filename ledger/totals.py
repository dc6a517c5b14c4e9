"""
ledger/totals.py

Declarative cross-field validation of aggregate totals.

Each aggregate type declares its rules as data (a TotalsRuleSet); the
validator runs them generically and reports every violation at once.
Payloads may be mappings or attribute objects (pydantic models, ORM rows).
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from ledger.errors import IncompatibleUnitFamily, RuleViolation, ValidationError
from ledger.units import UnitConverter

logger = logging.getLogger(__name__)


def _read(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SumMatchRule:
    """The aggregate's ``total_field`` equals the plain sum of ``detail_field``."""

    total_field: str
    detail_field: str


@dataclass(frozen=True)
class ConvertedSumRule:
    """
    The aggregate's ``total_field`` equals the sum of ``detail_field`` after
    converting every line from its ``unit_field`` into ``target_unit``.

    Without a ``target_unit`` the sum is taken in the canonical unit of the
    first line's family, so every line must share that family.
    """

    total_field: str
    detail_field: str = "amount"
    unit_field: str = "unit_of_measure"
    target_unit: str | None = None


@dataclass(frozen=True)
class UniqueRefRule:
    """``detail_field`` must not repeat across the detail lines."""

    detail_field: str
    label: str | None = None


@dataclass(frozen=True)
class MultipleOfRule:
    """The aggregate's ``total_field`` must be a multiple of ``multiple``."""

    total_field: str
    multiple: int


TotalsRule = Union[SumMatchRule, ConvertedSumRule, UniqueRefRule, MultipleOfRule]


@dataclass(frozen=True)
class TotalsRuleSet:
    rules: tuple[TotalsRule, ...] = ()
    details_field: str = "details"
    require_details: bool = True
    unique_detail_ids: bool = True


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class TotalsValidator:
    def __init__(self, converter: UnitConverter | None = None) -> None:
        self._converter = converter or UnitConverter()

    def validate(self, aggregate: Any, rule_set: TotalsRuleSet) -> tuple[RuleViolation, ...]:
        details: Sequence[Any] = _read(aggregate, rule_set.details_field) or []
        violations: list[RuleViolation] = []

        if rule_set.require_details and not details:
            violations.append(
                RuleViolation(
                    code="details_empty",
                    message=f"{rule_set.details_field} must contain at least one line.",
                    field=rule_set.details_field,
                )
            )

        if rule_set.unique_detail_ids:
            violations.extend(self._check_unique(details, "id", "detail id", rule_set.details_field))

        for rule in rule_set.rules:
            if isinstance(rule, SumMatchRule):
                violations.extend(self._check_sum(aggregate, details, rule))
            elif isinstance(rule, ConvertedSumRule):
                violations.extend(self._check_converted_sum(aggregate, details, rule))
            elif isinstance(rule, UniqueRefRule):
                violations.extend(
                    self._check_unique(
                        details,
                        rule.detail_field,
                        rule.label or rule.detail_field,
                        rule_set.details_field,
                    )
                )
            elif isinstance(rule, MultipleOfRule):
                violations.extend(self._check_multiple(aggregate, rule))
            else:
                raise TypeError(f"Unsupported totals rule: {rule!r}")

        return tuple(violations)

    def check(self, aggregate: Any, rule_set: TotalsRuleSet) -> None:
        """Raise ValidationError carrying every violation, if any."""
        violations = self.validate(aggregate, rule_set)
        if violations:
            logger.warning(
                "Totals validation rejected payload: %s",
                ", ".join(violation.code for violation in violations),
            )
            raise ValidationError(violations)

    # ── Rule implementations ──────────────────────────────────────────────────

    def _check_sum(self, aggregate: Any, details: Sequence[Any], rule: SumMatchRule) -> list[RuleViolation]:
        declared = _read(aggregate, rule.total_field)
        values = [_read(line, rule.detail_field) for line in details]
        if declared is None or any(value is None for value in values):
            return [
                RuleViolation(
                    code="total_missing",
                    message=f"{rule.total_field} and every detail {rule.detail_field} are required.",
                    field=rule.total_field,
                )
            ]
        computed = sum(values)
        if computed != declared:
            return [
                RuleViolation(
                    code="totals_mismatch",
                    message=(
                        f"The sum of fields [{rule.detail_field}] in details "
                        f"({computed}) must match {rule.total_field} ({declared})."
                    ),
                    field=rule.total_field,
                    context={"declared": declared, "computed": computed},
                )
            ]
        return []

    def _check_converted_sum(
        self,
        aggregate: Any,
        details: Sequence[Any],
        rule: ConvertedSumRule,
    ) -> list[RuleViolation]:
        declared = _read(aggregate, rule.total_field)
        if declared is None:
            return [
                RuleViolation(
                    code="total_missing",
                    message=f"{rule.total_field} is required.",
                    field=rule.total_field,
                )
            ]

        violations: list[RuleViolation] = []
        target = rule.target_unit
        computed = 0.0
        for index, line in enumerate(details):
            unit = _read(line, rule.unit_field)
            amount = _read(line, rule.detail_field)
            if amount is None or not self._converter.is_valid_unit(unit):
                violations.append(
                    RuleViolation(
                        code="invalid_unit",
                        message=f"Line {index} has an invalid unit of measure: {unit}.",
                        field=f"details[{index}].{rule.unit_field}",
                        context={"unit": unit},
                    )
                )
                continue
            if target is None:
                target = self._converter.canonical_unit(unit)
            try:
                computed += self._converter.convert(unit, target, amount)
            except IncompatibleUnitFamily as exc:
                violations.append(
                    RuleViolation(
                        code="incompatible_unit",
                        message=f"Line {index}: {exc.message}",
                        field=f"details[{index}].{rule.unit_field}",
                        context={"unit": unit, "target_unit": target},
                    )
                )

        if violations:
            return violations

        computed = self._converter.round(computed)
        unit_label = target or "canonical units"
        if computed != self._converter.round(declared):
            violations.append(
                RuleViolation(
                    code="amount_mismatch",
                    message=(
                        f"The sum of {rule.detail_field} in details ({computed} {unit_label}) "
                        f"must match {rule.total_field} ({declared} {unit_label})."
                    ),
                    field=rule.total_field,
                    context={"declared": declared, "computed": computed, "unit": target},
                )
            )
        return violations

    def _check_unique(
        self,
        details: Sequence[Any],
        detail_field: str,
        label: str,
        details_field: str,
    ) -> list[RuleViolation]:
        counts = Counter(
            value for value in (_read(line, detail_field) for line in details) if value is not None
        )
        duplicates = sorted(str(value) for value, count in counts.items() if count > 1)
        if not duplicates:
            return []
        return [
            RuleViolation(
                code="duplicate_reference",
                message=f"Each {label} in {details_field} must be unique; repeated: {', '.join(duplicates)}.",
                field=f"{details_field}.{detail_field}",
                context={"duplicates": duplicates},
            )
        ]

    def _check_multiple(self, aggregate: Any, rule: MultipleOfRule) -> list[RuleViolation]:
        value = _read(aggregate, rule.total_field)
        if value is None or value % rule.multiple == 0:
            return []
        return [
            RuleViolation(
                code="not_multiple",
                message=f"{rule.total_field} must be a multiple of {rule.multiple}.",
                field=rule.total_field,
                context={"value": value, "multiple": rule.multiple},
            )
        ]


__all__ = [
    "ConvertedSumRule",
    "MultipleOfRule",
    "SumMatchRule",
    "TotalsRule",
    "TotalsRuleSet",
    "TotalsValidator",
    "UniqueRefRule",
]
