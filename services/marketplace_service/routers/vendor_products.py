"""Vendor product router: a seller's own listings and their lifecycle."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_vendor
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.marketplace_service.models import Product, ProductStatus
from services.marketplace_service.routers._helpers import (
    PageParams,
    ilike_any,
    page_params,
    paginate,
)
from services.marketplace_service.schemas import (
    APIResponse,
    ProductCreate,
    ProductDetail,
    ProductResponse,
    ProductUpdate,
)
from services.marketplace_service.services import product_approval
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["vendor-products"])


@router.get("/vendor/products", response_model=APIResponse[list[ProductResponse]])
async def list_my_products(
    status_filter: Optional[ProductStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    params: PageParams = Depends(page_params),
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    """List the current vendor's products in every status."""
    vendor = await product_approval.get_vendor_profile(db, current_user)
    query = select(Product).where(Product.vendor_id == vendor.id)

    if status_filter:
        query = query.where(Product.status == status_filter)
    if search and search.strip():
        query = query.where(ilike_any(search, Product.name, Product.sku))

    query = query.order_by(Product.created_at.desc(), Product.id)
    products, pagination = await paginate(db, query, params)

    return APIResponse(
        data=[ProductResponse.model_validate(p) for p in products],
        pagination=pagination,
    )


@router.post(
    "/vendor/products",
    response_model=APIResponse[ProductDetail],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    product_in: ProductCreate,
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a product; it waits for admin approval unless saved as a draft."""
    vendor = await product_approval.get_vendor_profile(db, current_user)
    product = await product_approval.submit_product(
        db, vendor=vendor, product_in=product_in
    )
    message = (
        "Product saved as draft"
        if product.status == ProductStatus.DRAFT
        else "Product submitted for approval"
    )
    return APIResponse(message=message, data=ProductDetail.model_validate(product))


@router.get(
    "/vendor/products/{product_id}", response_model=APIResponse[ProductDetail]
)
async def get_my_product(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    vendor = await product_approval.get_vendor_profile(db, current_user)
    product = await product_approval.load_vendor_product(db, product_id, vendor)
    return APIResponse(data=ProductDetail.model_validate(product))


@router.put(
    "/vendor/products/{product_id}", response_model=APIResponse[ProductDetail]
)
async def update_my_product(
    product_id: uuid.UUID,
    changes: ProductUpdate,
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    """Edit a draft or rejected product."""
    vendor = await product_approval.get_vendor_profile(db, current_user)
    product = await product_approval.load_vendor_product(db, product_id, vendor)
    product = await product_approval.update_product(
        db, product=product, changes=changes, performed_by=current_user.user_id
    )
    return APIResponse(
        message="Product updated", data=ProductDetail.model_validate(product)
    )


@router.delete("/vendor/products/{product_id}", response_model=APIResponse[None])
async def delete_my_product(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    vendor = await product_approval.get_vendor_profile(db, current_user)
    product = await product_approval.load_vendor_product(db, product_id, vendor)
    await product_approval.delete_product(
        db, product=product, performed_by=current_user.user_id
    )
    return APIResponse(message="Product deleted", data=None)


# ============================================================================
# LIFECYCLE
# ============================================================================


@router.post(
    "/vendor/products/{product_id}/submit",
    response_model=APIResponse[ProductDetail],
)
async def submit_for_review(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    """Send a draft to the admin review queue."""
    vendor = await product_approval.get_vendor_profile(db, current_user)
    product = await product_approval.load_vendor_product(db, product_id, vendor)
    product = await product_approval.resubmit_product(
        db, product=product, performed_by=current_user.user_id
    )
    return APIResponse(
        message="Product submitted for approval",
        data=ProductDetail.model_validate(product),
    )


@router.post(
    "/vendor/products/{product_id}/deactivate",
    response_model=APIResponse[ProductDetail],
)
async def deactivate_product(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    vendor = await product_approval.get_vendor_profile(db, current_user)
    product = await product_approval.load_vendor_product(db, product_id, vendor)
    product = await product_approval.set_product_visibility(
        db, product=product, visible=False, performed_by=current_user.user_id
    )
    return APIResponse(
        message="Product deactivated", data=ProductDetail.model_validate(product)
    )


@router.post(
    "/vendor/products/{product_id}/activate",
    response_model=APIResponse[ProductDetail],
)
async def activate_product(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    vendor = await product_approval.get_vendor_profile(db, current_user)
    product = await product_approval.load_vendor_product(db, product_id, vendor)
    product = await product_approval.set_product_visibility(
        db, product=product, visible=True, performed_by=current_user.user_id
    )
    return APIResponse(
        message="Product activated", data=ProductDetail.model_validate(product)
    )
