"""Marketplace Service models package."""

from services.marketplace_service.models.catalog import Category, Product, VendorProfile
from services.marketplace_service.models.commerce import Order, OrderItem
from services.marketplace_service.models.core import (
    AdminUser,
    MarketplaceAuditLog,
    Notification,
)
from services.marketplace_service.models.enums import (
    TERMINAL_ORDER_STATUSES,
    VISIBLE_PRODUCT_STATUSES,
    AdminRole,
    AdminUserStatus,
    AuditEntityType,
    NotificationType,
    OrderStatus,
    PaymentStatus,
    ProductStatus,
    SourcingType,
)

__all__ = [
    "AdminRole",
    "AdminUser",
    "AdminUserStatus",
    "AuditEntityType",
    "Category",
    "MarketplaceAuditLog",
    "Notification",
    "NotificationType",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Product",
    "ProductStatus",
    "SourcingType",
    "TERMINAL_ORDER_STATUSES",
    "VISIBLE_PRODUCT_STATUSES",
    "VendorProfile",
]
