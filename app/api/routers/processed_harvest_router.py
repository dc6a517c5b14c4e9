"""
app/api/routers/processed_harvest_router.py

Processed harvest endpoints. Every write moves the crop's unprocessed stock
and locks or releases the lines of the harvest it draws from.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.errors import HANDLED_ERRORS, to_http_exception
from app.schemas.harvest import HarvestProcessedInput, HarvestProcessedResponse
from app.services.processed_harvest_service import (
    ProcessedHarvestService,
    get_processed_harvest_service,
)
from db.session import get_db

router = APIRouter(prefix="/harvests/processed", tags=["harvests"])


@router.post("", response_model=HarvestProcessedResponse, status_code=status.HTTP_201_CREATED)
def create_harvest_processed(
    body: HarvestProcessedInput,
    db: Session = Depends(get_db),
    service: ProcessedHarvestService = Depends(get_processed_harvest_service),
) -> HarvestProcessedResponse:
    try:
        record = service.create(db, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return HarvestProcessedResponse.model_validate(record)


@router.get("/{record_id}", response_model=HarvestProcessedResponse)
def get_harvest_processed(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: ProcessedHarvestService = Depends(get_processed_harvest_service),
) -> HarvestProcessedResponse:
    try:
        record = service.get(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return HarvestProcessedResponse.model_validate(record)


@router.put("/{record_id}", response_model=HarvestProcessedResponse)
def update_harvest_processed(
    record_id: uuid.UUID,
    body: HarvestProcessedInput,
    db: Session = Depends(get_db),
    service: ProcessedHarvestService = Depends(get_processed_harvest_service),
) -> HarvestProcessedResponse:
    try:
        record = service.update(db, record_id, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return HarvestProcessedResponse.model_validate(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_harvest_processed(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: ProcessedHarvestService = Depends(get_processed_harvest_service),
) -> Response:
    try:
        service.remove(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
