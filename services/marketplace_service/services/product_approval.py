"""Product approval workflow: vendor submission and admin review.

Every status change goes through ``next_product_status`` so a review attempted
on a product that is no longer PENDING is refused with 409 instead of silently
overwriting a decision another admin already made.
"""

import secrets
import time
import uuid
from typing import Optional

from fastapi import HTTPException, status
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.marketplace_service.models import (
    AuditEntityType,
    Category,
    NotificationType,
    Product,
    ProductStatus,
    VendorProfile,
)
from services.marketplace_service.schemas import ProductCreate, ProductUpdate
from services.marketplace_service.services.audit import log_audit, notify
from services.marketplace_service.services.transitions import (
    ProductAction,
    TransitionError,
    next_product_status,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def load_product(db: AsyncSession, product_id: uuid.UUID) -> Product:
    """Fetch a product with vendor and category loaded, or 404."""
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.vendor), selectinload(Product.category))
        .execution_options(populate_existing=True)
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


async def get_vendor_profile(db: AsyncSession, user: AuthUser) -> VendorProfile:
    result = await db.execute(
        select(VendorProfile).where(VendorProfile.user_id == user.user_id)
    )
    vendor = result.scalar_one_or_none()
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor profile not found")
    return vendor


async def load_vendor_product(
    db: AsyncSession, product_id: uuid.UUID, vendor: VendorProfile
) -> Product:
    """Fetch a product owned by ``vendor``; other vendors' products read as missing."""
    product = await load_product(db, product_id)
    if product.vendor_id != vendor.id:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


async def _ensure_category(db: AsyncSession, category_id: uuid.UUID) -> Category:
    category = await db.get(Category, category_id)
    if not category or not category.is_active:
        raise HTTPException(status_code=400, detail="Invalid category selected")
    return category


async def _unique_sku(db: AsyncSession, requested: Optional[str]) -> str:
    candidate = requested or f"PROD-{int(time.time() * 1000)}"
    while True:
        existing = await db.execute(select(Product.id).where(Product.sku == candidate))
        if existing.scalar_one_or_none() is None:
            return candidate
        candidate = f"PROD-{int(time.time() * 1000)}-{secrets.token_hex(2).upper()}"


def _advance(product: Product, action: ProductAction) -> ProductStatus:
    try:
        return next_product_status(product.status, action)
    except TransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


# ---------------------------------------------------------------------------
# Vendor side
# ---------------------------------------------------------------------------


async def submit_product(
    db: AsyncSession,
    *,
    vendor: VendorProfile,
    product_in: ProductCreate,
) -> Product:
    """Create a vendor product as DRAFT or PENDING (awaiting admin approval)."""
    await _ensure_category(db, product_in.category_id)

    data = product_in.model_dump()
    data["sku"] = await _unique_sku(db, product_in.sku)
    product = Product(vendor_id=vendor.id, **data)
    db.add(product)
    await db.flush()

    await log_audit(
        db,
        AuditEntityType.PRODUCT,
        product.id,
        "created",
        vendor.user_id,
        new_value={"name": product.name, "status": product.status.value},
    )
    await db.commit()

    logger.info(
        "Vendor %s submitted product %s as %s",
        vendor.id,
        product.id,
        product.status.value,
    )
    return await load_product(db, product.id)


async def update_product(
    db: AsyncSession,
    *,
    product: Product,
    changes: ProductUpdate,
    performed_by: str,
) -> Product:
    """Apply vendor edits; allowed on DRAFT and REJECTED listings only."""
    old_status = product.status
    new_status = _advance(product, ProductAction.EDIT)

    update_data = changes.model_dump(exclude_unset=True)
    if update_data.get("category_id"):
        await _ensure_category(db, update_data["category_id"])

    for field, value in update_data.items():
        setattr(product, field, value)
    product.status = new_status

    await log_audit(
        db,
        AuditEntityType.PRODUCT,
        product.id,
        "updated",
        performed_by,
        old_value={"status": old_status.value},
        new_value={
            "status": new_status.value,
            "fields": sorted(update_data.keys()),
        },
    )
    await db.commit()
    return await load_product(db, product.id)


async def resubmit_product(
    db: AsyncSession, *, product: Product, performed_by: str
) -> Product:
    """Send a draft back to the review queue."""
    product.status = _advance(product, ProductAction.SUBMIT)
    await log_audit(
        db,
        AuditEntityType.PRODUCT,
        product.id,
        "submitted",
        performed_by,
        old_value={"status": ProductStatus.DRAFT.value},
        new_value={"status": product.status.value},
    )
    await db.commit()
    return await load_product(db, product.id)


async def set_product_visibility(
    db: AsyncSession, *, product: Product, visible: bool, performed_by: str
) -> Product:
    """Vendor toggle on approved listings (APPROVED/ACTIVE <-> INACTIVE)."""
    old_status = product.status
    action = ProductAction.ACTIVATE if visible else ProductAction.DEACTIVATE
    product.status = _advance(product, action)
    await log_audit(
        db,
        AuditEntityType.PRODUCT,
        product.id,
        action.value,
        performed_by,
        old_value={"status": old_status.value},
        new_value={"status": product.status.value},
    )
    await db.commit()
    return await load_product(db, product.id)


async def delete_product(
    db: AsyncSession, *, product: Product, performed_by: str
) -> None:
    """Irreversibly delete a product."""
    await log_audit(
        db,
        AuditEntityType.PRODUCT,
        product.id,
        "deleted",
        performed_by,
        old_value={"name": product.name, "status": product.status.value},
    )
    await db.delete(product)
    await db.commit()
    logger.info("Product %s deleted by %s", product.id, performed_by)


# ---------------------------------------------------------------------------
# Admin review
# ---------------------------------------------------------------------------


async def _review(
    db: AsyncSession,
    *,
    product_id: uuid.UUID,
    action: ProductAction,
    reviewer: AuthUser,
    note: Optional[str],
    notification_type: NotificationType,
    title: str,
    message: str,
) -> Product:
    product = await load_product(db, product_id)
    old_status = product.status
    product.status = _advance(product, action)
    product.review_note = note
    product.reviewed_by = reviewer.user_id
    product.reviewed_at = utc_now()

    await log_audit(
        db,
        AuditEntityType.PRODUCT,
        product.id,
        action.value,
        reviewer.user_id,
        old_value={"status": old_status.value},
        new_value={"status": product.status.value},
        notes=note,
    )
    notify(
        db,
        user_id=product.vendor.user_id,
        notification_type=notification_type,
        title=title,
        message=message.format(name=product.name, note=note),
    )
    await db.commit()

    logger.info(
        "Product %s %s by %s (%s -> %s)",
        product.id,
        action.value,
        reviewer.user_id,
        old_status.value,
        product.status.value,
    )
    return await load_product(db, product.id)


async def approve_product(
    db: AsyncSession,
    *,
    product_id: uuid.UUID,
    reviewer: AuthUser,
    note: Optional[str] = None,
) -> Product:
    """PENDING -> APPROVED; the product becomes visible to customers."""
    return await _review(
        db,
        product_id=product_id,
        action=ProductAction.APPROVE,
        reviewer=reviewer,
        note=note or None,
        notification_type=NotificationType.PRODUCT_APPROVED,
        title="Product approved",
        message='Your product "{name}" has been approved and is now live.',
    )


async def reject_product(
    db: AsyncSession,
    *,
    product_id: uuid.UUID,
    reviewer: AuthUser,
    reason: str,
) -> Product:
    """PENDING -> REJECTED with a mandatory reason stored on the product."""
    reason = (reason or "").strip()
    if not reason:
        raise HTTPException(
            status_code=422, detail="A reason is required to reject a product"
        )
    return await _review(
        db,
        product_id=product_id,
        action=ProductAction.REJECT,
        reviewer=reviewer,
        note=reason,
        notification_type=NotificationType.PRODUCT_REJECTED,
        title="Product rejected",
        message='Your product "{name}" has been rejected. Reason: {note}',
    )


async def request_product_changes(
    db: AsyncSession,
    *,
    product_id: uuid.UUID,
    reviewer: AuthUser,
    note: str,
) -> Product:
    """PENDING -> DRAFT with the reviewer's change request attached."""
    note = (note or "").strip()
    if not note:
        raise HTTPException(
            status_code=422, detail="Describe the changes the vendor must make"
        )
    return await _review(
        db,
        product_id=product_id,
        action=ProductAction.REQUEST_CHANGES,
        reviewer=reviewer,
        note=note,
        notification_type=NotificationType.PRODUCT_CHANGES_REQUESTED,
        title="Changes requested",
        message='Changes were requested for your product "{name}": {note}',
    )
