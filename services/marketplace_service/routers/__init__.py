"""Marketplace service routers package."""

from services.marketplace_service.routers.admin_products import (
    router as admin_products_router,
)
from services.marketplace_service.routers.admin_users import router as admin_users_router
from services.marketplace_service.routers.catalog import router as catalog_router
from services.marketplace_service.routers.categories import (
    router as categories_router,
)
from services.marketplace_service.routers.dashboard import router as dashboard_router
from services.marketplace_service.routers.orders import router as orders_router
from services.marketplace_service.routers.vendor_products import (
    router as vendor_products_router,
)
from services.marketplace_service.routers.vendors import router as vendors_router

__all__ = [
    "admin_products_router",
    "admin_users_router",
    "catalog_router",
    "categories_router",
    "dashboard_router",
    "orders_router",
    "vendor_products_router",
    "vendors_router",
]
