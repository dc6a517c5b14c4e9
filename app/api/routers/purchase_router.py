"""
app/api/routers/purchase_router.py

Supplies purchase endpoints.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.errors import BULK_STATUS_CODES, HANDLED_ERRORS, to_http_exception
from app.schemas.common import BulkOutcomeResponse, BulkRemoveRequest
from app.schemas.purchase import PurchaseInput, PurchaseResponse
from app.services.purchase_service import PurchaseService, get_purchase_service
from db.session import get_db

router = APIRouter(prefix="/purchases", tags=["purchases"])


@router.post("", response_model=PurchaseResponse, status_code=status.HTTP_201_CREATED)
def create_purchase(
    body: PurchaseInput,
    db: Session = Depends(get_db),
    service: PurchaseService = Depends(get_purchase_service),
) -> PurchaseResponse:
    try:
        purchase = service.create(db, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PurchaseResponse.model_validate(purchase)


@router.get("/{record_id}", response_model=PurchaseResponse)
def get_purchase(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: PurchaseService = Depends(get_purchase_service),
) -> PurchaseResponse:
    try:
        purchase = service.get(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PurchaseResponse.model_validate(purchase)


@router.put("/{record_id}", response_model=PurchaseResponse)
def update_purchase(
    record_id: uuid.UUID,
    body: PurchaseInput,
    db: Session = Depends(get_db),
    service: PurchaseService = Depends(get_purchase_service),
) -> PurchaseResponse:
    try:
        purchase = service.update(db, record_id, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PurchaseResponse.model_validate(purchase)


@router.delete("/remove/bulk", response_model=BulkOutcomeResponse)
def remove_purchases_bulk(
    body: BulkRemoveRequest,
    response: Response,
    db: Session = Depends(get_db),
    service: PurchaseService = Depends(get_purchase_service),
) -> BulkOutcomeResponse:
    try:
        outcome = service.remove_bulk(db, body.record_ids)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    response.status_code = BULK_STATUS_CODES[outcome.status]
    return BulkOutcomeResponse.model_validate(outcome.to_dict())


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_purchase(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: PurchaseService = Depends(get_purchase_service),
) -> Response:
    try:
        service.remove(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
