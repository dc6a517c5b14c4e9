"""
app/schemas/catalog.py

Schemas for crops, supplies, counterparties, stock listings and units.
"""

from __future__ import annotations

import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CropCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    unit_family: Literal["mass", "volume"] = "mass"


class CropResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None = None
    unit_family: str


class SupplyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    brand: str | None = Field(default=None, max_length=100)
    unit_of_measure: str = Field(..., min_length=1, max_length=20)


class SupplyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    brand: str | None = None
    unit_of_measure: str


class EmployeeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: str | None = Field(default=None, max_length=150)


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: str | None = Field(default=None, max_length=150)


class SupplierCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    company_name: str | None = Field(default=None, max_length=150)


class PartyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class StockItemResponse(BaseModel):
    """
    One stock row. ``amount``/``unit`` are the quantity expressed in the
    requested unit, or the canonical unit when none was asked for.
    """

    id: uuid.UUID
    name: str
    kind: str
    unit_family: str
    quantity: float
    canonical_unit: str
    amount: float
    unit: str


class UnitCatalogResponse(BaseModel):
    units: dict[str, list[str]]
    canonical: dict[str, str]
