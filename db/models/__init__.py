"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.catalog import Crop, StockKind, StockResource, Supply
from db.models.consumption import SuppliesConsumption, SuppliesConsumptionDetail
from db.models.harvest import Harvest, HarvestDetail, HarvestProcessed
from db.models.party import Client, Employee, Supplier
from db.models.purchase import SuppliesPurchase, SuppliesPurchaseDetail
from db.models.sale import Sale, SaleDetail

__all__ = [
    "Client",
    "Crop",
    "Employee",
    "Harvest",
    "HarvestDetail",
    "HarvestProcessed",
    "Sale",
    "SaleDetail",
    "StockKind",
    "StockResource",
    "SuppliesConsumption",
    "SuppliesConsumptionDetail",
    "SuppliesPurchase",
    "SuppliesPurchaseDetail",
    "Supplier",
    "Supply",
]
