"""
app/schemas package marker.
"""

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
from app.schemas.common import BulkFailureResponse, BulkOutcomeResponse, BulkRemoveRequest
from app.schemas.consumption import ConsumptionInput, ConsumptionResponse
from app.schemas.harvest import (
    HarvestInput,
    HarvestProcessedInput,
    HarvestProcessedResponse,
    HarvestResponse,
)
from app.schemas.purchase import PurchaseInput, PurchaseResponse
from app.schemas.sale import SaleInput, SaleResponse

__all__ = [
    "BulkFailureResponse",
    "BulkOutcomeResponse",
    "BulkRemoveRequest",
    "ClientCreate",
    "ConsumptionInput",
    "ConsumptionResponse",
    "CropCreate",
    "CropResponse",
    "EmployeeCreate",
    "HarvestInput",
    "HarvestProcessedInput",
    "HarvestProcessedResponse",
    "HarvestResponse",
    "PartyResponse",
    "PurchaseInput",
    "PurchaseResponse",
    "SaleInput",
    "SaleResponse",
    "StockItemResponse",
    "SupplierCreate",
    "SupplyCreate",
    "SupplyResponse",
    "UnitCatalogResponse",
]
