"""Categories router: public listing and admin category management."""

import re
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.marketplace_service.models import AuditEntityType, Category, Product
from services.marketplace_service.routers._helpers import (
    PageParams,
    ilike_any,
    page_params,
    paginate,
)
from services.marketplace_service.schemas import (
    APIResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
)
from services.marketplace_service.services.audit import log_audit
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["categories"])


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


async def _ensure_name_free(
    db: AsyncSession, name: str, exclude_id: Optional[uuid.UUID] = None
) -> None:
    query = select(Category.id).where(
        (func.lower(Category.name) == name.lower()) | (Category.slug == slugify(name))
    )
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    if (await db.execute(query.limit(1))).scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=400, detail="Category with this name already exists"
        )


async def _get_category(db: AsyncSession, category_id: uuid.UUID) -> Category:
    category = await db.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/categories", response_model=APIResponse[list[CategoryResponse]])
async def list_categories(
    search: Optional[str] = None,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_db),
):
    """Active categories vendors can list products under."""
    query = select(Category).where(Category.is_active.is_(True))
    if search and search.strip():
        query = query.where(ilike_any(search, Category.name, Category.description))

    categories, pagination = await paginate(
        db, query.order_by(Category.name), params
    )
    return APIResponse(
        data=[CategoryResponse.model_validate(c) for c in categories],
        pagination=pagination,
    )


@router.get("/admin/categories", response_model=APIResponse[list[CategoryResponse]])
async def list_all_categories(
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    params: PageParams = Depends(page_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    query = select(Category)
    if search and search.strip():
        query = query.where(ilike_any(search, Category.name, Category.description))
    if is_active is not None:
        query = query.where(Category.is_active.is_(is_active))

    categories, pagination = await paginate(
        db, query.order_by(Category.name), params
    )
    return APIResponse(
        data=[CategoryResponse.model_validate(c) for c in categories],
        pagination=pagination,
    )


@router.post(
    "/admin/categories",
    response_model=APIResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    body: CategoryCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await _ensure_name_free(db, body.name)

    category = Category(slug=slugify(body.name), **body.model_dump())
    db.add(category)
    await db.flush()

    await log_audit(
        db,
        AuditEntityType.CATEGORY,
        category.id,
        "created",
        current_user.user_id,
        new_value={
            "name": category.name,
            "commission_rate": str(category.commission_rate),
        },
    )
    await db.commit()
    await db.refresh(category)

    logger.info("Category %s created by %s", category.slug, current_user.user_id)
    return APIResponse(
        message="Category created successfully",
        data=CategoryResponse.model_validate(category),
    )


@router.put(
    "/admin/categories/{category_id}", response_model=APIResponse[CategoryResponse]
)
async def update_category(
    category_id: uuid.UUID,
    body: CategoryUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = await _get_category(db, category_id)
    changes = body.model_dump(exclude_unset=True)

    if "name" in changes:
        await _ensure_name_free(db, changes["name"], exclude_id=category.id)
        changes["slug"] = slugify(changes["name"])

    old_value = jsonable_encoder(
        {field: getattr(category, field) for field in changes}
    )
    for field, value in changes.items():
        setattr(category, field, value)

    await log_audit(
        db,
        AuditEntityType.CATEGORY,
        category.id,
        "updated",
        current_user.user_id,
        old_value=old_value,
        new_value=jsonable_encoder(changes),
    )
    await db.commit()
    await db.refresh(category)

    logger.info("Category %s updated by %s", category.slug, current_user.user_id)
    return APIResponse(
        message="Category updated successfully",
        data=CategoryResponse.model_validate(category),
    )


@router.delete("/admin/categories/{category_id}", response_model=APIResponse[None])
async def delete_category(
    category_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = await _get_category(db, category_id)

    product_count = (
        await db.execute(
            select(func.count(Product.id)).where(Product.category_id == category.id)
        )
    ).scalar() or 0
    if product_count:
        raise HTTPException(
            status_code=400, detail="Cannot delete category with existing products"
        )

    await log_audit(
        db,
        AuditEntityType.CATEGORY,
        category.id,
        "deleted",
        current_user.user_id,
        old_value={"name": category.name},
    )
    await db.delete(category)
    await db.commit()

    logger.info("Category %s deleted by %s", category.slug, current_user.user_id)
    return APIResponse(message="Category deleted successfully", data=None)
