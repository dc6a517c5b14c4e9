"""
ledger/units.py

Unit conversion for stock quantities.

Every recognised unit belongs to exactly one family and converts to that
family's canonical unit by a fixed factor. All ledger and totals arithmetic
happens in canonical units; mass and volume never mix.
"""

from __future__ import annotations

import logging
from enum import Enum

from ledger.errors import IncompatibleUnitFamily, RuleViolation, ValidationError

logger = logging.getLogger(__name__)


class UnitFamily(str, Enum):
    MASS = "mass"
    VOLUME = "volume"


# Factors to the canonical unit of each family.
MASS_FACTORS: dict[str, float] = {
    "GRAMOS": 1.0,
    "KILOGRAMOS": 1000.0,
    "LIBRAS": 453.592,
    "ONZAS": 28.3495,
    "TONELADAS": 1_000_000.0,
}

VOLUME_FACTORS: dict[str, float] = {
    "MILILITROS": 1.0,
    "LITROS": 1000.0,
    "GALONES": 3785.41,
}

CANONICAL_UNITS: dict[UnitFamily, str] = {
    UnitFamily.MASS: "GRAMOS",
    UnitFamily.VOLUME: "MILILITROS",
}

_FAMILY_BY_UNIT: dict[str, UnitFamily] = {
    **{unit: UnitFamily.MASS for unit in MASS_FACTORS},
    **{unit: UnitFamily.VOLUME for unit in VOLUME_FACTORS},
}

_FACTORS: dict[str, float] = {**MASS_FACTORS, **VOLUME_FACTORS}


class UnitConverter:
    """
    Stateless converter between recognised units of the same family.

    Results are rounded to ``precision`` decimal places so repeated
    conversions of the same quantity compare equal.

    Usage::

        converter = UnitConverter()
        converter.to_canonical("KILOGRAMOS", 2)        # 2000.0
        converter.convert("GRAMOS", "LIBRAS", 453.592)  # 1.0
    """

    def __init__(self, precision: int = 3) -> None:
        self._precision = precision

    @property
    def precision(self) -> int:
        return self._precision

    def is_valid_unit(self, unit: str) -> bool:
        return unit in _FAMILY_BY_UNIT

    def unit_family(self, unit: str) -> UnitFamily:
        """
        Return the family of ``unit``.

        Raises
        ------
        ValidationError
            If the unit is not recognised.
        """
        family = _FAMILY_BY_UNIT.get(unit)
        if family is None:
            raise ValidationError(
                [
                    RuleViolation(
                        code="invalid_unit",
                        message=f"Invalid unit of measure: {unit}.",
                        field="unit_of_measure",
                        context={"unit": unit},
                    )
                ]
            )
        return family

    def canonical_unit(self, unit: str) -> str:
        return CANONICAL_UNITS[self.unit_family(unit)]

    def to_canonical(self, unit: str, amount: float) -> float:
        """Express ``amount`` of ``unit`` in its family's canonical unit."""
        self.unit_family(unit)
        return self.round(amount * _FACTORS[unit])

    def convert(self, from_unit: str, to_unit: str, amount: float) -> float:
        """
        Convert ``amount`` from ``from_unit`` to ``to_unit``.

        Raises
        ------
        IncompatibleUnitFamily
            If the two units belong to different families.
        """
        from_family = self.unit_family(from_unit)
        to_family = self.unit_family(to_unit)
        if from_family is not to_family:
            logger.warning(
                "Rejected conversion %s (%s) -> %s (%s)",
                from_unit,
                from_family.value,
                to_unit,
                to_family.value,
            )
            raise IncompatibleUnitFamily(from_unit, to_unit, from_family.value, to_family.value)
        if from_unit == to_unit:
            return self.round(amount)
        return self.round(amount * _FACTORS[from_unit] / _FACTORS[to_unit])

    def round(self, amount: float) -> float:
        return round(float(amount), self._precision)

    def available_units(self) -> dict[str, list[str]]:
        return {
            family.value: [unit for unit, owner in _FAMILY_BY_UNIT.items() if owner is family]
            for family in UnitFamily
        }
