"""
app/api/routers package marker.
"""

from app.api.routers.catalog_router import router as catalog_router
from app.api.routers.consumption_router import router as consumption_router
from app.api.routers.harvest_router import router as harvest_router
from app.api.routers.processed_harvest_router import router as processed_harvest_router
from app.api.routers.purchase_router import router as purchase_router
from app.api.routers.sale_router import router as sale_router

__all__ = [
    "catalog_router",
    "consumption_router",
    "harvest_router",
    "processed_harvest_router",
    "purchase_router",
    "sale_router",
]
