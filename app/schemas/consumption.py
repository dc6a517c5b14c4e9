"""
app/schemas/consumption.py

Request and response schemas for supplies consumption endpoints.
"""

from __future__ import annotations

import datetime
import uuid

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ConsumptionDetailInput(BaseModel):
    id: uuid.UUID | None = None
    supply_id: uuid.UUID
    crop_id: uuid.UUID
    amount: float = Field(..., gt=0)
    unit_of_measure: str = Field(..., min_length=1, max_length=20)


class ConsumptionInput(BaseModel):
    date: datetime.date
    observation: str | None = None
    details: list[ConsumptionDetailInput] = Field(default_factory=list)


class ConsumptionDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    supply_id: uuid.UUID
    crop_id: uuid.UUID
    amount: float
    unit_of_measure: str
    locked_by: str | None = None


class ConsumptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: datetime.date
    observation: str | None = None
    details: list[ConsumptionDetailResponse] = Field(
        default_factory=list,
        validation_alias=AliasChoices("live_details", "details"),
    )
