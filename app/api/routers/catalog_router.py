"""
app/api/routers/catalog_router.py

Catalog endpoints: crops, supplies, counterparties, stock and units.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.errors import HANDLED_ERRORS, to_http_exception
from app.schemas.catalog import (
    ClientCreate,
    CropCreate,
    CropResponse,
    EmployeeCreate,
    PartyResponse,
    StockItemResponse,
    SupplierCreate,
    SupplyCreate,
    SupplyResponse,
    UnitCatalogResponse,
)
from app.services.catalog_service import CatalogService, get_catalog_service
from db.models.catalog import StockKind
from db.session import get_db

router = APIRouter(tags=["catalog"])


# ---------------------------------------------------------------------------
# Crops and supplies
# ---------------------------------------------------------------------------


@router.post("/crops", response_model=CropResponse, status_code=status.HTTP_201_CREATED)
def create_crop(
    body: CropCreate,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> CropResponse:
    try:
        crop = service.create_crop(
            db,
            name=body.name,
            description=body.description,
            unit_family=body.unit_family,
        )
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return CropResponse.model_validate(crop)


@router.delete("/crops/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
def retire_crop(
    crop_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    try:
        service.retire(db, StockKind.CROP, crop_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/supplies", response_model=SupplyResponse, status_code=status.HTTP_201_CREATED)
def create_supply(
    body: SupplyCreate,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> SupplyResponse:
    try:
        supply = service.create_supply(
            db,
            name=body.name,
            brand=body.brand,
            unit_of_measure=body.unit_of_measure,
        )
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return SupplyResponse.model_validate(supply)


@router.delete("/supplies/{supply_id}", status_code=status.HTTP_204_NO_CONTENT)
def retire_supply(
    supply_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    try:
        service.retire(db, StockKind.SUPPLY, supply_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Counterparties
# ---------------------------------------------------------------------------


@router.post("/employees", response_model=PartyResponse, status_code=status.HTTP_201_CREATED)
def create_employee(
    body: EmployeeCreate,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> PartyResponse:
    try:
        employee = service.create_employee(db, name=body.name, email=body.email)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PartyResponse.model_validate(employee)


@router.post("/clients", response_model=PartyResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    body: ClientCreate,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> PartyResponse:
    try:
        client = service.create_client(db, name=body.name, email=body.email)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PartyResponse.model_validate(client)


@router.post("/suppliers", response_model=PartyResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(
    body: SupplierCreate,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> PartyResponse:
    try:
        supplier = service.create_supplier(db, name=body.name, company_name=body.company_name)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PartyResponse.model_validate(supplier)


# ---------------------------------------------------------------------------
# Stock and units
# ---------------------------------------------------------------------------


@router.get("/stock/{kind}", response_model=list[StockItemResponse])
def list_stock(
    kind: str,
    unit: str | None = Query(default=None, description="Express quantities in this unit"),
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> list[StockItemResponse]:
    """
    Live stock rows of ``crop`` or ``supply`` kind.
    """

    try:
        items = service.list_stock(db, kind, unit=unit)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return [StockItemResponse(**item) for item in items]


@router.get("/units", response_model=UnitCatalogResponse)
def list_units(
    service: CatalogService = Depends(get_catalog_service),
) -> UnitCatalogResponse:
    return UnitCatalogResponse(**service.units())
