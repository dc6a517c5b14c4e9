"""
app/schemas/sale.py

Request and response schemas for sale endpoints.
"""

from __future__ import annotations

import datetime
import uuid

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SaleDetailInput(BaseModel):
    id: uuid.UUID | None = None
    crop_id: uuid.UUID
    client_id: uuid.UUID
    amount: float = Field(..., gt=0)
    unit_of_measure: str = Field(..., min_length=1, max_length=20)
    value_pay: int = Field(..., ge=0)


class SaleInput(BaseModel):
    date: datetime.date
    amount: float = Field(..., gt=0, description="Declared total in the canonical unit of the crop family (GRAMOS or MILILITROS)")
    value_pay: int = Field(..., ge=0)
    details: list[SaleDetailInput] = Field(default_factory=list)


class SaleDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    crop_id: uuid.UUID
    client_id: uuid.UUID
    amount: float
    unit_of_measure: str
    value_pay: int
    locked_by: str | None = None


class SaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: datetime.date
    amount: float
    value_pay: int
    details: list[SaleDetailResponse] = Field(
        default_factory=list,
        validation_alias=AliasChoices("live_details", "details"),
    )
