"""Unit tests for the product approval workflow.

Tests call product_approval functions directly with the db_session fixture.
"""

import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from services.marketplace_service.models import (
    MarketplaceAuditLog,
    Notification,
    NotificationType,
    Product,
    ProductStatus,
    SourcingType,
)
from services.marketplace_service.schemas import ProductCreate, ProductUpdate
from services.marketplace_service.services.product_approval import (
    approve_product,
    delete_product,
    reject_product,
    request_product_changes,
    resubmit_product,
    set_product_visibility,
    submit_product,
    update_product,
)
from sqlalchemy import select
from tests.factories import ProductFactory

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _make_product(db, vendor, category, **overrides):
    product = ProductFactory.create(
        vendor_id=vendor.id, category_id=category.id, **overrides
    )
    db.add(product)
    await db.commit()
    return product


def _product_in(category, **overrides):
    data = {
        "name": "Shea Butter Hair Care Set",
        "description": "Natural hair care made with pure shea butter.",
        "price": Decimal("24.50"),
        "stock": 10,
        "sourcing": SourcingType.OUTSOURCED,
        "category_id": category.id,
    }
    data.update(overrides)
    return ProductCreate(**data)


# ---------------------------------------------------------------------------
# submit_product
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_submit_product_defaults_to_pending(db_session, vendor, category):
    product = await submit_product(
        db_session, vendor=vendor, product_in=_product_in(category)
    )

    assert product.status == ProductStatus.PENDING
    assert product.sku.startswith("PROD-")
    assert product.vendor.id == vendor.id
    assert product.category.id == category.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_submit_product_replaces_colliding_sku(db_session, vendor, category):
    await _make_product(db_session, vendor, category, sku="KENTE-01")

    product = await submit_product(
        db_session, vendor=vendor, product_in=_product_in(category, sku="KENTE-01")
    )

    assert product.sku != "KENTE-01"
    assert product.sku.startswith("PROD-")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_submit_product_unknown_category(db_session, vendor, category):
    await db_session.delete(category)
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await submit_product(
            db_session, vendor=vendor, product_in=_product_in(category)
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Invalid category selected"


@pytest.mark.unit
def test_product_create_refuses_live_status():
    with pytest.raises(ValueError):
        _product_in(SimpleNamespace(id=uuid.uuid4()), status=ProductStatus.APPROVED)


# ---------------------------------------------------------------------------
# Admin review
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_approve_pending_product(db_session, vendor, category, admin_user):
    product = await _make_product(db_session, vendor, category)

    approved = await approve_product(
        db_session, product_id=product.id, reviewer=admin_user, note="Looks great"
    )

    assert approved.status == ProductStatus.APPROVED
    assert approved.is_visible
    assert approved.review_note == "Looks great"
    assert approved.reviewed_by == admin_user.user_id
    assert approved.reviewed_at is not None

    notification = (
        await db_session.execute(
            select(Notification).where(Notification.user_id == vendor.user_id)
        )
    ).scalar_one()
    assert notification.type == NotificationType.PRODUCT_APPROVED


@pytest.mark.asyncio
@pytest.mark.unit
async def test_reject_with_missing_certification(
    db_session, vendor, category, admin_user
):
    product = await _make_product(db_session, vendor, category)

    rejected = await reject_product(
        db_session,
        product_id=product.id,
        reviewer=admin_user,
        reason="Missing certification",
    )

    assert rejected.status == ProductStatus.REJECTED
    assert rejected.review_note == "Missing certification"

    audit = (
        await db_session.execute(
            select(MarketplaceAuditLog).where(
                MarketplaceAuditLog.entity_id == product.id
            )
        )
    ).scalar_one()
    assert audit.action == "reject"
    assert audit.old_value == {"status": "PENDING"}
    assert audit.new_value == {"status": "REJECTED"}


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize("reason", ["", "   ", "\n\t"])
async def test_reject_requires_reason(
    db_session, vendor, category, admin_user, reason
):
    product = await _make_product(db_session, vendor, category)

    with pytest.raises(HTTPException) as exc_info:
        await reject_product(
            db_session, product_id=product.id, reviewer=admin_user, reason=reason
        )

    assert exc_info.value.status_code == 422
    await db_session.refresh(product)
    assert product.status == ProductStatus.PENDING


@pytest.mark.asyncio
@pytest.mark.unit
async def test_request_changes_returns_product_to_draft(
    db_session, vendor, category, admin_user
):
    product = await _make_product(db_session, vendor, category)

    updated = await request_product_changes(
        db_session,
        product_id=product.id,
        reviewer=admin_user,
        note="Add ingredient list",
    )

    assert updated.status == ProductStatus.DRAFT
    assert updated.review_note == "Add ingredient list"


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "status",
    [ProductStatus.APPROVED, ProductStatus.REJECTED, ProductStatus.DRAFT],
)
async def test_review_refused_when_not_pending(
    db_session, vendor, category, admin_user, status
):
    product = await _make_product(db_session, vendor, category, status=status)

    with pytest.raises(HTTPException) as exc_info:
        await approve_product(db_session, product_id=product.id, reviewer=admin_user)

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == f"Cannot approve product in status {status.value}"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_review_missing_product(db_session, admin_user):
    with pytest.raises(HTTPException) as exc_info:
        await approve_product(db_session, product_id=uuid.uuid4(), reviewer=admin_user)

    assert exc_info.value.status_code == 404


# ---------------------------------------------------------------------------
# Vendor lifecycle
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_edit_rejected_product_then_resubmit(db_session, vendor, category):
    product = await _make_product(
        db_session, vendor, category, status=ProductStatus.REJECTED
    )

    edited = await update_product(
        db_session,
        product=product,
        changes=ProductUpdate(description="Now with certification attached."),
        performed_by=vendor.user_id,
    )
    assert edited.status == ProductStatus.DRAFT
    assert edited.description == "Now with certification attached."

    resubmitted = await resubmit_product(
        db_session, product=edited, performed_by=vendor.user_id
    )
    assert resubmitted.status == ProductStatus.PENDING


@pytest.mark.asyncio
@pytest.mark.unit
async def test_edit_pending_product_refused(db_session, vendor, category):
    product = await _make_product(db_session, vendor, category)

    with pytest.raises(HTTPException) as exc_info:
        await update_product(
            db_session,
            product=product,
            changes=ProductUpdate(name="Renamed"),
            performed_by=vendor.user_id,
        )

    assert exc_info.value.status_code == 409
    await db_session.refresh(product)
    assert product.name != "Renamed"


@pytest.mark.unit
@pytest.mark.parametrize("field", ["name", "stock", "sourcing", "category_id", "tags"])
def test_product_update_refuses_null(field):
    with pytest.raises(ValidationError, match="Field cannot be null"):
        ProductUpdate(**{field: None})


@pytest.mark.unit
def test_product_update_leaves_omitted_fields_unset():
    changes = ProductUpdate(compare_price=None, stock=3)

    assert changes.model_dump(exclude_unset=True) == {"compare_price": None, "stock": 3}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_deactivate_and_activate(db_session, vendor, category):
    product = await _make_product(
        db_session, vendor, category, status=ProductStatus.APPROVED
    )

    hidden = await set_product_visibility(
        db_session, product=product, visible=False, performed_by=vendor.user_id
    )
    assert hidden.status == ProductStatus.INACTIVE
    assert not hidden.is_visible

    shown = await set_product_visibility(
        db_session, product=hidden, visible=True, performed_by=vendor.user_id
    )
    assert shown.status == ProductStatus.ACTIVE
    assert shown.is_visible


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_product(db_session, vendor, category):
    product = await _make_product(db_session, vendor, category)
    product_id = product.id

    await delete_product(db_session, product=product, performed_by=vendor.user_id)

    assert await db_session.get(Product, product_id) is None
