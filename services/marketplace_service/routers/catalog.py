"""Public catalog router: customer-visible products only."""

import uuid
from decimal import Decimal
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.db.session import get_async_db
from services.marketplace_service.models import VISIBLE_PRODUCT_STATUSES, Product
from services.marketplace_service.routers._helpers import (
    PageParams,
    ilike_any,
    page_params,
    paginate,
)
from services.marketplace_service.schemas import (
    APIResponse,
    ProductDetail,
    ProductResponse,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(tags=["catalog"])

SortOption = Literal["newest", "price-low", "price-high", "name"]

_SORT_ORDER = {
    "newest": Product.created_at.desc(),
    "price-low": Product.price.asc(),
    "price-high": Product.price.desc(),
    "name": Product.name.asc(),
}


# ============================================================================
# CATALOG - PRODUCTS
# ============================================================================


@router.get("/products", response_model=APIResponse[list[ProductResponse]])
async def list_products(
    search: Optional[str] = None,
    category_id: Optional[uuid.UUID] = None,
    vendor_id: Optional[uuid.UUID] = None,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    sort: SortOption = "newest",
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_db),
):
    """List approved, live products."""
    query = select(Product).where(Product.status.in_(VISIBLE_PRODUCT_STATUSES))

    if search and search.strip():
        query = query.where(ilike_any(search, Product.name, Product.description))
    if category_id:
        query = query.where(Product.category_id == category_id)
    if vendor_id:
        query = query.where(Product.vendor_id == vendor_id)
    if min_price is not None:
        query = query.where(Product.price >= min_price)
    if max_price is not None:
        query = query.where(Product.price <= max_price)

    query = query.order_by(_SORT_ORDER[sort], Product.id)
    products, pagination = await paginate(db, query, params)

    return APIResponse(
        data=[ProductResponse.model_validate(p) for p in products],
        pagination=pagination,
    )


@router.get("/products/{product_id}", response_model=APIResponse[ProductDetail])
async def get_product(
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Get a live product with its vendor and category."""
    query = (
        select(Product)
        .where(
            Product.id == product_id,
            Product.status.in_(VISIBLE_PRODUCT_STATUSES),
        )
        .options(selectinload(Product.vendor), selectinload(Product.category))
    )
    result = await db.execute(query)
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    return APIResponse(data=ProductDetail.model_validate(product))
