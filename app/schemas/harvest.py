"""
app/schemas/harvest.py

Request and response schemas for harvest endpoints.
"""

from __future__ import annotations

import datetime
import uuid

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class HarvestDetailInput(BaseModel):
    """
    One employee's share of a harvest. ``id`` is only sent when updating an
    existing line.
    """

    id: uuid.UUID | None = None
    employee_id: uuid.UUID
    amount: float = Field(..., gt=0)
    unit_of_measure: str = Field(..., min_length=1, max_length=20)
    value_pay: int = Field(..., ge=0)


class HarvestInput(BaseModel):
    date: datetime.date
    crop_id: uuid.UUID
    amount: float = Field(..., gt=0, description="Declared total in the canonical unit of the crop family (GRAMOS or MILILITROS)")
    value_pay: int = Field(..., ge=0)
    observation: str | None = None
    details: list[HarvestDetailInput] = Field(default_factory=list)


class HarvestDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    amount: float
    unit_of_measure: str
    value_pay: int
    locked_by: str | None = None


class HarvestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: datetime.date
    crop_id: uuid.UUID
    amount: float
    value_pay: int
    observation: str | None = None
    details: list[HarvestDetailResponse] = Field(
        default_factory=list,
        validation_alias=AliasChoices("live_details", "details"),
    )


class HarvestProcessedInput(BaseModel):
    """
    A processed part of a harvest. ``unit_of_measure`` must belong to the
    crop's unit family.
    """

    date: datetime.date
    harvest_id: uuid.UUID
    amount: float = Field(..., gt=0)
    unit_of_measure: str = Field(..., min_length=1, max_length=20)


class HarvestProcessedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: datetime.date
    harvest_id: uuid.UUID
    crop_id: uuid.UUID
    amount: float
    unit_of_measure: str
