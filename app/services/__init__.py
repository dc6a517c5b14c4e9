"""
app/services package marker.
"""

from app.services.aggregate_service import AggregateService
from app.services.catalog_service import CatalogService, get_catalog_service
from app.services.consumption_service import ConsumptionService, get_consumption_service
from app.services.detail_lock_service import DetailLockService, get_detail_lock_service
from app.services.harvest_service import HarvestService, get_harvest_service
from app.services.processed_harvest_service import ProcessedHarvestService, get_processed_harvest_service
from app.services.purchase_service import PurchaseService, get_purchase_service
from app.services.sale_service import SaleService, get_sale_service

__all__ = [
    "AggregateService",
    "CatalogService",
    "get_catalog_service",
    "ConsumptionService",
    "get_consumption_service",
    "DetailLockService",
    "get_detail_lock_service",
    "HarvestService",
    "get_harvest_service",
    "ProcessedHarvestService",
    "get_processed_harvest_service",
    "PurchaseService",
    "get_purchase_service",
    "SaleService",
    "get_sale_service",
]
