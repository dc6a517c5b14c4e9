"""
app/api/routers/harvest_router.py

Harvest endpoints. Every write moves the harvested crop's stock.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.errors import BULK_STATUS_CODES, HANDLED_ERRORS, to_http_exception
from app.schemas.common import BulkOutcomeResponse, BulkRemoveRequest
from app.schemas.harvest import HarvestInput, HarvestResponse
from app.services.harvest_service import HarvestService, get_harvest_service
from db.session import get_db

router = APIRouter(prefix="/harvests", tags=["harvests"])


@router.post("", response_model=HarvestResponse, status_code=status.HTTP_201_CREATED)
def create_harvest(
    body: HarvestInput,
    db: Session = Depends(get_db),
    service: HarvestService = Depends(get_harvest_service),
) -> HarvestResponse:
    try:
        harvest = service.create(db, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return HarvestResponse.model_validate(harvest)


@router.get("/{record_id}", response_model=HarvestResponse)
def get_harvest(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: HarvestService = Depends(get_harvest_service),
) -> HarvestResponse:
    try:
        harvest = service.get(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return HarvestResponse.model_validate(harvest)


@router.put("/{record_id}", response_model=HarvestResponse)
def update_harvest(
    record_id: uuid.UUID,
    body: HarvestInput,
    db: Session = Depends(get_db),
    service: HarvestService = Depends(get_harvest_service),
) -> HarvestResponse:
    """
    Replace the harvest and reconcile its lines. Lines sent with an
    existing id are updated, lines without one are created and persisted
    lines missing from the body are removed.
    """

    try:
        harvest = service.update(db, record_id, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return HarvestResponse.model_validate(harvest)


@router.delete("/remove/bulk", response_model=BulkOutcomeResponse)
def remove_harvests_bulk(
    body: BulkRemoveRequest,
    response: Response,
    db: Session = Depends(get_db),
    service: HarvestService = Depends(get_harvest_service),
) -> BulkOutcomeResponse:
    try:
        outcome = service.remove_bulk(db, body.record_ids)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    response.status_code = BULK_STATUS_CODES[outcome.status]
    return BulkOutcomeResponse.model_validate(outcome.to_dict())


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_harvest(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: HarvestService = Depends(get_harvest_service),
) -> Response:
    try:
        service.remove(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
