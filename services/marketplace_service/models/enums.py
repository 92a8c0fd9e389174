"""Enum definitions for marketplace service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class ProductStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


# Statuses under which customers can see and buy a product
VISIBLE_PRODUCT_STATUSES = (ProductStatus.APPROVED, ProductStatus.ACTIVE)


class SourcingType(str, enum.Enum):
    IN_HOUSE = "IN_HOUSE"
    OUTSOURCED = "OUTSOURCED"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_ORDER_STATUSES = (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class AdminRole(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MODERATOR = "moderator"
    SUPPORT = "support"


class AdminUserStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class NotificationType(str, enum.Enum):
    PRODUCT_APPROVED = "PRODUCT_APPROVED"
    PRODUCT_REJECTED = "PRODUCT_REJECTED"
    PRODUCT_CHANGES_REQUESTED = "PRODUCT_CHANGES_REQUESTED"
    ORDER_STATUS = "ORDER_STATUS"
    ORDER_REFUNDED = "ORDER_REFUNDED"
    VENDOR_VERIFICATION = "VENDOR_VERIFICATION"


class AuditEntityType(str, enum.Enum):
    PRODUCT = "product"
    ORDER = "order"
    ADMIN_USER = "admin_user"
    VENDOR = "vendor"
    CATEGORY = "category"
