"""
app/schemas/purchase.py

Request and response schemas for supplies purchase endpoints.
"""

from __future__ import annotations

import datetime
import uuid

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PurchaseDetailInput(BaseModel):
    id: uuid.UUID | None = None
    supply_id: uuid.UUID
    supplier_id: uuid.UUID
    amount: float = Field(..., gt=0)
    unit_of_measure: str = Field(..., min_length=1, max_length=20)
    value_pay: int = Field(..., ge=0)


class PurchaseInput(BaseModel):
    date: datetime.date
    value_pay: int = Field(..., ge=0)
    details: list[PurchaseDetailInput] = Field(default_factory=list)


class PurchaseDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    supply_id: uuid.UUID
    supplier_id: uuid.UUID
    amount: float
    unit_of_measure: str
    value_pay: int
    locked_by: str | None = None


class PurchaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: datetime.date
    value_pay: int
    details: list[PurchaseDetailResponse] = Field(
        default_factory=list,
        validation_alias=AliasChoices("live_details", "details"),
    )
