"""
app/schemas/common.py

Schemas shared by every aggregate router.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field


class BulkRemoveRequest(BaseModel):
    """
    Body of ``DELETE /<aggregate>/remove/bulk``.
    """

    record_ids: list[uuid.UUID] = Field(..., min_length=1)


class BulkFailureResponse(BaseModel):
    id: uuid.UUID
    error: str


class BulkOutcomeResponse(BaseModel):
    """
    Per-id result of a bulk removal. Always returned, whatever the status.
    """

    success: list[uuid.UUID] = Field(default_factory=list)
    failed: list[BulkFailureResponse] = Field(default_factory=list)
