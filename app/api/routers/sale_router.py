"""
app/api/routers/sale_router.py

Sale endpoints. Every line draws on the stock of the crop it sells.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.errors import BULK_STATUS_CODES, HANDLED_ERRORS, to_http_exception
from app.schemas.common import BulkOutcomeResponse, BulkRemoveRequest
from app.schemas.sale import SaleInput, SaleResponse
from app.services.sale_service import SaleService, get_sale_service
from db.session import get_db

router = APIRouter(prefix="/sales", tags=["sales"])


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
def create_sale(
    body: SaleInput,
    db: Session = Depends(get_db),
    service: SaleService = Depends(get_sale_service),
) -> SaleResponse:
    try:
        sale = service.create(db, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return SaleResponse.model_validate(sale)


@router.get("/{record_id}", response_model=SaleResponse)
def get_sale(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: SaleService = Depends(get_sale_service),
) -> SaleResponse:
    try:
        sale = service.get(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return SaleResponse.model_validate(sale)


@router.put("/{record_id}", response_model=SaleResponse)
def update_sale(
    record_id: uuid.UUID,
    body: SaleInput,
    db: Session = Depends(get_db),
    service: SaleService = Depends(get_sale_service),
) -> SaleResponse:
    """Replace the sale; lines whose stock fields are unchanged leave stock untouched."""

    try:
        sale = service.update(db, record_id, body)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return SaleResponse.model_validate(sale)


@router.delete("/remove/bulk", response_model=BulkOutcomeResponse)
def remove_sales_bulk(
    body: BulkRemoveRequest,
    response: Response,
    db: Session = Depends(get_db),
    service: SaleService = Depends(get_sale_service),
) -> BulkOutcomeResponse:
    try:
        outcome = service.remove_bulk(db, body.record_ids)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    response.status_code = BULK_STATUS_CODES[outcome.status]
    return BulkOutcomeResponse.model_validate(outcome.to_dict())


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_sale(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: SaleService = Depends(get_sale_service),
) -> Response:
    try:
        service.remove(db, record_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
