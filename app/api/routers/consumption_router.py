"""
app/api/routers/consumption_router.py

Supplies consumption endpoints. Lines draw on supply inventory.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.errors import BULK_STATUS_CODES, HANDLED_ERRORS, to_http_exception
from app.schemas.common import BulkOutcomeResponse, BulkRemoveRequest
from app.schemas.consumption import ConsumptionInput, ConsumptionResponse
from app.services.consumption_service import ConsumptionService, get_consumption_service
from db.session import get_db

router = APIRouter(prefix="/consumptions", tags=["consumptions"])


@router.post("", response_model=ConsumptionResponse, status_code=status.HTTP_201_CREATED)
def create_consumption(
    body: ConsumptionInput,
    db: Session = Depends(get_db),
    service: ConsumptionService = Depends(get_consumption_service),
) -> ConsumptionResponse:
    try:
        consumption = service.create(db, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return ConsumptionResponse.model_validate(consumption)


@router.get("/{record_id}", response_model=ConsumptionResponse)
def get_consumption(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: ConsumptionService = Depends(get_consumption_service),
) -> ConsumptionResponse:
    try:
        consumption = service.get(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return ConsumptionResponse.model_validate(consumption)


@router.put("/{record_id}", response_model=ConsumptionResponse)
def update_consumption(
    record_id: uuid.UUID,
    body: ConsumptionInput,
    db: Session = Depends(get_db),
    service: ConsumptionService = Depends(get_consumption_service),
) -> ConsumptionResponse:
    try:
        consumption = service.update(db, record_id, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return ConsumptionResponse.model_validate(consumption)


@router.delete("/remove/bulk", response_model=BulkOutcomeResponse)
def remove_consumptions_bulk(
    body: BulkRemoveRequest,
    response: Response,
    db: Session = Depends(get_db),
    service: ConsumptionService = Depends(get_consumption_service),
) -> BulkOutcomeResponse:
    try:
        outcome = service.remove_bulk(db, body.record_ids)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    response.status_code = BULK_STATUS_CODES[outcome.status]
    return BulkOutcomeResponse.model_validate(outcome.to_dict())


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_consumption(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: ConsumptionService = Depends(get_consumption_service),
) -> Response:
    try:
        service.remove(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
