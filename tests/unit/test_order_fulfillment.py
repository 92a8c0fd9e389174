"""Unit tests for order fulfillment operations."""

import pytest
from fastapi import HTTPException
from libs.auth.models import AuthUser
from services.marketplace_service.models import (
    MarketplaceAuditLog,
    Notification,
    NotificationType,
    OrderStatus,
    PaymentStatus,
)
from services.marketplace_service.services.order_fulfillment import (
    cancel_order,
    ensure_order_access,
    get_order,
    mark_delivered,
    mark_shipped,
    process_refund,
    start_processing,
    update_order_status,
)
from sqlalchemy import func, select
from tests.factories import OrderFactory, OrderItemFactory

ACTOR = "admin-user-1"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _make_order(db, vendor, **overrides):
    order = OrderFactory.create(
        vendor_id=vendor.id, items=[OrderItemFactory.create()], **overrides
    )
    db.add(order)
    await db.commit()
    return await get_order(db, order.id)


# ---------------------------------------------------------------------------
# Forward moves
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_happy_path_to_delivered(db_session, vendor):
    order = await _make_order(db_session, vendor)

    order = await start_processing(db_session, order=order, performed_by=ACTOR)
    assert order.status == OrderStatus.PROCESSING

    order = await mark_shipped(
        db_session, order=order, performed_by=ACTOR, tracking_number="RM123456789GB"
    )
    assert order.status == OrderStatus.SHIPPED
    assert order.tracking_number == "RM123456789GB"
    assert order.shipped_at is not None

    order = await mark_delivered(db_session, order=order, performed_by=ACTOR)
    assert order.status == OrderStatus.DELIVERED
    assert order.delivered_at is not None

    audit_count = (
        await db_session.execute(
            select(func.count(MarketplaceAuditLog.id)).where(
                MarketplaceAuditLog.entity_id == order.id
            )
        )
    ).scalar()
    assert audit_count == 3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_shipped_requires_processing(db_session, vendor):
    order = await _make_order(db_session, vendor)

    with pytest.raises(HTTPException) as exc_info:
        await mark_shipped(db_session, order=order, performed_by=ACTOR)

    assert exc_info.value.status_code == 409
    assert order.status == OrderStatus.PENDING


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_status_rejects_skipping_steps(db_session, vendor):
    order = await _make_order(db_session, vendor)

    with pytest.raises(HTTPException) as exc_info:
        await update_order_status(
            db_session,
            order=order,
            new_status=OrderStatus.DELIVERED,
            performed_by=ACTOR,
        )

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Cannot move order from pending to delivered"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_status_stores_notes_and_notifies_vendor(db_session, vendor):
    order = await _make_order(db_session, vendor, status=OrderStatus.PROCESSING)

    order = await update_order_status(
        db_session,
        order=order,
        new_status=OrderStatus.SHIPPED,
        performed_by=ACTOR,
        admin_notes="Sent with Royal Mail",
        tracking_number="RM1",
    )

    assert order.admin_notes == "Sent with Royal Mail"
    assert order.tracking_number == "RM1"
    notification = (
        await db_session.execute(
            select(Notification).where(Notification.user_id == vendor.user_id)
        )
    ).scalar_one()
    assert notification.type == NotificationType.ORDER_STATUS


# ---------------------------------------------------------------------------
# Cancel
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "status", [OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.SHIPPED]
)
async def test_cancel_from_open_status(db_session, vendor, status):
    order = await _make_order(db_session, vendor, status=status)

    order = await cancel_order(
        db_session, order=order, performed_by=ACTOR, reason="Customer request"
    )

    assert order.status == OrderStatus.CANCELLED
    assert order.cancellation_reason == "Customer request"
    assert order.cancelled_at is not None


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
async def test_cancel_refused_for_terminal_orders(db_session, vendor, status):
    order = await _make_order(db_session, vendor, status=status)

    with pytest.raises(HTTPException) as exc_info:
        await cancel_order(db_session, order=order, performed_by=ACTOR)

    assert exc_info.value.status_code == 409


# ---------------------------------------------------------------------------
# Refund
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_refund_changes_payment_status_only(db_session, vendor):
    order = await _make_order(db_session, vendor, status=OrderStatus.PROCESSING)

    order = await process_refund(db_session, order=order, performed_by=ACTOR)

    assert order.payment_status == PaymentStatus.REFUNDED
    assert order.status == OrderStatus.PROCESSING
    assert order.refunded_at is not None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_refund_requires_paid_order(db_session, vendor):
    order = await _make_order(
        db_session, vendor, payment_status=PaymentStatus.PENDING
    )

    with pytest.raises(HTTPException) as exc_info:
        await process_refund(db_session, order=order, performed_by=ACTOR)

    assert exc_info.value.status_code == 409
    assert "payment status pending" in exc_info.value.detail


@pytest.mark.asyncio
@pytest.mark.unit
async def test_refund_refused_after_delivery(db_session, vendor):
    order = await _make_order(db_session, vendor, status=OrderStatus.DELIVERED)

    with pytest.raises(HTTPException) as exc_info:
        await process_refund(db_session, order=order, performed_by=ACTOR)

    assert exc_info.value.status_code == 409
    assert order.payment_status == PaymentStatus.PAID


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_vendor_cannot_reach_other_vendors_order(
    db_session, vendor, other_vendor
):
    order = await _make_order(db_session, other_vendor)
    intruder = AuthUser(user_id=vendor.user_id, role="vendor")

    with pytest.raises(HTTPException) as exc_info:
        await ensure_order_access(db_session, order, intruder)

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
@pytest.mark.unit
async def test_owner_and_admin_can_reach_order(db_session, vendor, admin_user):
    order = await _make_order(db_session, vendor)

    await ensure_order_access(
        db_session, order, AuthUser(user_id=vendor.user_id, role="vendor")
    )
    await ensure_order_access(db_session, order, admin_user)
