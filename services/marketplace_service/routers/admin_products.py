"""Admin product router: moderation queue, review decisions and stats."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.datetime_utils import days_ago
from libs.db.session import get_async_db
from services.marketplace_service.models import Product, ProductStatus, SourcingType
from services.marketplace_service.routers._helpers import (
    PageParams,
    ilike_any,
    page_params,
    paginate,
)
from services.marketplace_service.schemas import (
    APIResponse,
    ProductChangeRequest,
    ProductDetail,
    ProductRejection,
    ProductReviewNote,
    ProductStats,
    ProductStatusUpdate,
)
from services.marketplace_service.services import product_approval
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(tags=["admin-products"])


# ============================================================================
# LISTING
# ============================================================================


@router.get("/admin/products", response_model=APIResponse[list[ProductDetail]])
async def list_all_products(
    status_filter: Optional[ProductStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    vendor_id: Optional[uuid.UUID] = None,
    category_id: Optional[uuid.UUID] = None,
    params: PageParams = Depends(page_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List products in every status; ``status=PENDING`` is the review queue."""
    query = select(Product).options(
        selectinload(Product.vendor), selectinload(Product.category)
    )

    if status_filter:
        query = query.where(Product.status == status_filter)
    if search and search.strip():
        query = query.where(ilike_any(search, Product.name, Product.description))
    if vendor_id:
        query = query.where(Product.vendor_id == vendor_id)
    if category_id:
        query = query.where(Product.category_id == category_id)

    query = query.order_by(Product.created_at.desc(), Product.id)
    products, pagination = await paginate(db, query, params)

    return APIResponse(
        data=[ProductDetail.model_validate(p) for p in products],
        pagination=pagination,
    )


@router.get("/admin/products/stats", response_model=APIResponse[ProductStats])
async def product_stats(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Counts for the product moderation dashboard."""

    async def count(*conditions) -> int:
        query = select(func.count(Product.id))
        if conditions:
            query = query.where(*conditions)
        return (await db.execute(query)).scalar() or 0

    stats = ProductStats(
        total_products=await count(),
        pending_products=await count(Product.status == ProductStatus.PENDING),
        approved_products=await count(Product.status == ProductStatus.APPROVED),
        rejected_products=await count(Product.status == ProductStatus.REJECTED),
        in_house_products=await count(Product.sourcing == SourcingType.IN_HOUSE),
        outsourced_products=await count(Product.sourcing == SourcingType.OUTSOURCED),
        recent_products=await count(Product.created_at >= days_ago(7)),
    )
    return APIResponse(data=stats)


@router.get("/admin/products/{product_id}", response_model=APIResponse[ProductDetail])
async def get_product_for_review(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    product = await product_approval.load_product(db, product_id)
    return APIResponse(data=ProductDetail.model_validate(product))


# ============================================================================
# REVIEW DECISIONS
# ============================================================================


@router.put(
    "/admin/products/{product_id}/status",
    response_model=APIResponse[ProductDetail],
)
async def update_product_status(
    product_id: uuid.UUID,
    body: ProductStatusUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Approve or reject in one call (``status`` APPROVED or REJECTED)."""
    if body.status == ProductStatus.REJECTED.value:
        product = await product_approval.reject_product(
            db, product_id=product_id, reviewer=current_user, reason=body.reason
        )
        message = "Product rejected successfully"
    else:
        product = await product_approval.approve_product(
            db, product_id=product_id, reviewer=current_user, note=body.reason
        )
        message = "Product approved successfully"
    return APIResponse(message=message, data=ProductDetail.model_validate(product))


@router.post(
    "/admin/products/{product_id}/approve",
    response_model=APIResponse[ProductDetail],
)
async def approve_product(
    product_id: uuid.UUID,
    body: Optional[ProductReviewNote] = None,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    product = await product_approval.approve_product(
        db,
        product_id=product_id,
        reviewer=current_user,
        note=body.note if body else None,
    )
    return APIResponse(
        message="Product approved successfully",
        data=ProductDetail.model_validate(product),
    )


@router.post(
    "/admin/products/{product_id}/reject",
    response_model=APIResponse[ProductDetail],
)
async def reject_product(
    product_id: uuid.UUID,
    body: ProductRejection,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    product = await product_approval.reject_product(
        db, product_id=product_id, reviewer=current_user, reason=body.reason
    )
    return APIResponse(
        message="Product rejected successfully",
        data=ProductDetail.model_validate(product),
    )


@router.post(
    "/admin/products/{product_id}/request-changes",
    response_model=APIResponse[ProductDetail],
)
async def request_changes(
    product_id: uuid.UUID,
    body: ProductChangeRequest,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    product = await product_approval.request_product_changes(
        db, product_id=product_id, reviewer=current_user, note=body.note
    )
    return APIResponse(
        message="Changes requested from vendor",
        data=ProductDetail.model_validate(product),
    )


@router.delete("/admin/products/{product_id}", response_model=APIResponse[None])
async def delete_product(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Permanently remove a product."""
    product = await product_approval.load_product(db, product_id)
    await product_approval.delete_product(
        db, product=product, performed_by=current_user.user_id
    )
    return APIResponse(message="Product deleted successfully", data=None)
