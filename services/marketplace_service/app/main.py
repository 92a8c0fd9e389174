"""FastAPI application for the Marketplace Service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.marketplace_service.routers import (
    admin_products_router,
    admin_users_router,
    catalog_router,
    categories_router,
    dashboard_router,
    orders_router,
    vendor_products_router,
    vendors_router,
)

API_PREFIX = "/api/v1"


def create_app() -> FastAPI:
    """Create and configure the Marketplace Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="AfriGos Marketplace Service",
        version="0.1.0",
        description=(
            "Multi-vendor marketplace - product approval, order fulfillment "
            "and admin dashboards."
        ),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "marketplace"}

    @app.get(f"{API_PREFIX}/health", tags=["system"])
    async def api_health_check() -> dict[str, str]:
        return {
            "status": "OK",
            "message": "AfriGos Admin API v1 is running",
            "timestamp": utc_now().isoformat(),
        }

    # Public catalog
    app.include_router(catalog_router, prefix=API_PREFIX)
    app.include_router(categories_router, prefix=API_PREFIX)

    # Vendor storefront management
    app.include_router(vendor_products_router, prefix=API_PREFIX)
    app.include_router(vendors_router, prefix=API_PREFIX)

    # Orders (admin or owning vendor)
    app.include_router(orders_router, prefix=API_PREFIX)

    # Admin moderation and dashboards
    app.include_router(admin_products_router, prefix=API_PREFIX)
    app.include_router(admin_users_router, prefix=API_PREFIX)
    app.include_router(dashboard_router, prefix=API_PREFIX)

    return app


app = create_app()
