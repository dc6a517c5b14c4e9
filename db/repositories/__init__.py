"""
Repository layer exports.
"""

from db.repositories.aggregate_repository import AggregateRepository, get_live_line
from db.repositories.catalog_repository import CatalogRepository
from db.repositories.errors import PersistenceError
from db.repositories.processed_harvest_repository import ProcessedHarvestRepository

__all__ = [
    "AggregateRepository",
    "CatalogRepository",
    "get_live_line",
    "PersistenceError",
    "ProcessedHarvestRepository",
]
