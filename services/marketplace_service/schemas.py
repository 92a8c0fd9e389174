"""Pydantic schemas for marketplace service."""

import math
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Generic, Literal, Optional, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from services.marketplace_service.models import (
    VISIBLE_PRODUCT_STATUSES,
    AdminRole,
    AdminUserStatus,
    OrderStatus,
    PaymentStatus,
    ProductStatus,
    SourcingType,
)
from services.marketplace_service.services.transitions import (
    OrderAction,
    ProductAction,
    available_order_actions,
    available_product_actions,
)

T = TypeVar("T")

# ============================================================================
# ENVELOPE
# ============================================================================


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(
            page=page, limit=limit, total=total, pages=math.ceil(total / limit)
        )


class APIResponse(BaseModel, Generic[T]):
    """Envelope every endpoint responds with."""

    success: bool = True
    message: Optional[str] = None
    data: T
    pagination: Optional[Pagination] = None


# ============================================================================
# CATALOG SCHEMAS
# ============================================================================


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    commission_rate: Decimal
    is_active: bool = True


class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    commission_rate: Decimal = Field(Decimal("10.00"), ge=0, le=100)
    is_active: bool = True


class CategoryUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None

    @field_validator("name", "commission_rate", "is_active")
    @classmethod
    def refuse_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


# ============================================================================
# VENDOR SCHEMAS
# ============================================================================


class VendorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    business_name: str
    email: Optional[str] = None
    is_verified: bool = False


class VendorProfileUpsert(BaseModel):
    """Body of POST /vendors/profile; creates the profile or updates it."""

    model_config = ConfigDict(str_strip_whitespace=True)

    business_name: str = Field(..., min_length=1, max_length=255)
    business_type: Optional[str] = Field(None, max_length=100)
    contact_name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    website: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class VendorProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    business_name: str
    business_type: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    is_verified: bool
    verified_at: Optional[datetime] = None
    created_at: datetime


class VendorVerificationUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    is_verified: bool
    reason: Optional[str] = None


class ProductCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    compare_price: Optional[Decimal] = Field(None, ge=0)
    stock: int = Field(..., ge=0)
    sourcing: SourcingType
    category_id: uuid.UUID
    sku: Optional[str] = Field(None, max_length=100)
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    status: ProductStatus = ProductStatus.PENDING

    @field_validator("status")
    @classmethod
    def starts_as_draft_or_pending(cls, v: ProductStatus) -> ProductStatus:
        if v not in (ProductStatus.DRAFT, ProductStatus.PENDING):
            raise ValueError("New products must start as DRAFT or PENDING")
        return v


class ProductUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0)
    compare_price: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    sourcing: Optional[SourcingType] = None
    category_id: Optional[uuid.UUID] = None
    images: Optional[list[str]] = None
    tags: Optional[list[str]] = None

    @field_validator(
        "name",
        "description",
        "price",
        "stock",
        "sourcing",
        "category_id",
        "images",
        "tags",
    )
    @classmethod
    def refuse_null(cls, v):
        # Omit a field to leave it unchanged; null would blank a required column
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    vendor_id: uuid.UUID
    category_id: Optional[uuid.UUID] = None
    name: str
    description: str
    sku: str
    price: Decimal
    compare_price: Optional[Decimal] = None
    stock: int
    sourcing: SourcingType
    status: ProductStatus
    review_note: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    images: list[str] = []
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def is_visible(self) -> bool:
        return self.status in VISIBLE_PRODUCT_STATUSES

    @computed_field
    @property
    def available_actions(self) -> list[ProductAction]:
        return available_product_actions(self.status)


class ProductDetail(ProductResponse):
    """Product with vendor and category for the review screen."""

    vendor: Optional[VendorSummary] = None
    category: Optional[CategoryResponse] = None


class ProductReviewNote(BaseModel):
    note: Optional[str] = None


class ProductRejection(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    reason: str = Field(..., min_length=1, description="Shown to the vendor")


class ProductChangeRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    note: str = Field(..., min_length=1, description="What the vendor must change")


class ProductStatusUpdate(BaseModel):
    """Combined approve/reject body accepted by PUT /admin/products/{id}/status."""

    model_config = ConfigDict(str_strip_whitespace=True)

    status: Literal["APPROVED", "REJECTED"]
    reason: Optional[str] = None

    @model_validator(mode="after")
    def reason_required_for_rejection(self) -> "ProductStatusUpdate":
        if self.status == "REJECTED" and not self.reason:
            raise ValueError("A reason is required to reject a product")
        return self


class ProductStats(BaseModel):
    total_products: int
    pending_products: int
    approved_products: int
    rejected_products: int
    in_house_products: int
    outsourced_products: int
    recent_products: int


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: Optional[uuid.UUID] = None
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    customer_id: str
    customer_name: str
    customer_email: str
    vendor_id: uuid.UUID
    total_amount: Decimal
    status: OrderStatus
    payment_status: PaymentStatus
    shipping_address: Optional[dict] = None
    tracking_number: Optional[str] = None
    admin_notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    items: list[OrderItemResponse] = []
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def available_actions(self) -> list[OrderAction]:
        return available_order_actions(self.status, self.payment_status)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    admin_notes: Optional[str] = None
    tracking_number: Optional[str] = Field(None, max_length=100)


class ShipOrderRequest(BaseModel):
    tracking_number: Optional[str] = Field(None, max_length=100)


class CancelOrderRequest(BaseModel):
    reason: Optional[str] = None


class OrderStats(BaseModel):
    total: int
    by_status: dict[str, int]
    by_payment_status: dict[str, int]


# ============================================================================
# ADMIN USER SCHEMAS
# ============================================================================


class AdminUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: str
    name: str
    email: str
    role: AdminRole
    status: AdminUserStatus
    permissions: list[str] = []
    department: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: datetime


class AdminUserStatusUpdate(BaseModel):
    status: AdminUserStatus


# ============================================================================
# DASHBOARD SCHEMAS
# ============================================================================


class DashboardStats(BaseModel):
    total_revenue: Decimal
    active_vendors: int
    products_listed: int
    customer_orders: int


class FinancialSummary(BaseModel):
    gross_sales: Decimal
    platform_commission: Decimal
    vendor_payouts: Decimal
    refunded_amount: Decimal
    paid_orders: int
