"""Order fulfillment: status changes, cancellation and refunds."""

import uuid
from typing import Optional

from fastapi import HTTPException, status
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.marketplace_service.models import (
    AuditEntityType,
    NotificationType,
    Order,
    OrderStatus,
    PaymentStatus,
    VendorProfile,
)
from services.marketplace_service.services.audit import log_audit, notify
from services.marketplace_service.services.transitions import (
    OrderAction,
    TransitionError,
    can_cancel,
    can_refund,
    check_order_transition,
    forward_target,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

# Timestamp column stamped when an order enters each status
_STATUS_TIMESTAMPS = {
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


async def get_order(db: AsyncSession, order_id: uuid.UUID) -> Order:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.items), selectinload(Order.vendor))
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


async def ensure_order_access(
    db: AsyncSession, order: Order, user: AuthUser
) -> None:
    """Admins reach every order; vendors only the ones placed with them."""
    if user.is_admin:
        return
    if user.is_vendor:
        result = await db.execute(
            select(VendorProfile.id).where(VendorProfile.user_id == user.user_id)
        )
        if result.scalar_one_or_none() == order.vendor_id:
            return
    raise HTTPException(status_code=403, detail="You do not have access to this order")


def _conflict(e: TransitionError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


async def _apply_status(
    db: AsyncSession,
    order: Order,
    new_status: OrderStatus,
    *,
    performed_by: str,
    action: str,
    admin_notes: Optional[str] = None,
    tracking_number: Optional[str] = None,
) -> Order:
    old_status = order.status
    order.status = new_status
    if new_status in _STATUS_TIMESTAMPS:
        setattr(order, _STATUS_TIMESTAMPS[new_status], utc_now())
    if tracking_number:
        order.tracking_number = tracking_number
    if admin_notes:
        order.admin_notes = admin_notes

    await log_audit(
        db,
        AuditEntityType.ORDER,
        order.id,
        action,
        performed_by,
        old_value={"status": old_status.value},
        new_value={"status": new_status.value},
        notes=admin_notes,
    )
    notify(
        db,
        user_id=order.vendor.user_id,
        notification_type=NotificationType.ORDER_STATUS,
        title=f"Order {order.order_number} {new_status.value}",
        message=(
            f"Order {order.order_number} moved from "
            f"{old_status.value} to {new_status.value}."
        ),
    )
    await db.commit()

    logger.info(
        "Order %s %s by %s (%s -> %s)",
        order.order_number,
        action,
        performed_by,
        old_status.value,
        new_status.value,
    )
    return await get_order(db, order.id)


async def update_order_status(
    db: AsyncSession,
    *,
    order: Order,
    new_status: OrderStatus,
    performed_by: str,
    admin_notes: Optional[str] = None,
    tracking_number: Optional[str] = None,
) -> Order:
    """Move an order to ``new_status`` if the transition table allows it."""
    try:
        check_order_transition(order.status, new_status)
    except TransitionError as e:
        raise _conflict(e)
    return await _apply_status(
        db,
        order,
        new_status,
        performed_by=performed_by,
        action="status_updated",
        admin_notes=admin_notes,
        tracking_number=tracking_number,
    )


async def _forward(
    db: AsyncSession,
    order: Order,
    action: OrderAction,
    performed_by: str,
    tracking_number: Optional[str] = None,
) -> Order:
    try:
        target = forward_target(action, order.status)
    except TransitionError as e:
        raise _conflict(e)
    return await _apply_status(
        db,
        order,
        target,
        performed_by=performed_by,
        action=action.value,
        tracking_number=tracking_number,
    )


async def start_processing(
    db: AsyncSession, *, order: Order, performed_by: str
) -> Order:
    return await _forward(db, order, OrderAction.START_PROCESSING, performed_by)


async def mark_shipped(
    db: AsyncSession,
    *,
    order: Order,
    performed_by: str,
    tracking_number: Optional[str] = None,
) -> Order:
    return await _forward(
        db, order, OrderAction.MARK_SHIPPED, performed_by, tracking_number
    )


async def mark_delivered(
    db: AsyncSession, *, order: Order, performed_by: str
) -> Order:
    return await _forward(db, order, OrderAction.MARK_DELIVERED, performed_by)


async def cancel_order(
    db: AsyncSession,
    *,
    order: Order,
    performed_by: str,
    reason: Optional[str] = None,
) -> Order:
    """Cancel from any non-terminal status."""
    if not can_cancel(order.status):
        raise _conflict(TransitionError(OrderAction.CANCEL.value, order.status, "order"))
    order.cancellation_reason = (reason or "").strip() or None
    return await _apply_status(
        db,
        order,
        OrderStatus.CANCELLED,
        performed_by=performed_by,
        action=OrderAction.CANCEL.value,
        admin_notes=order.cancellation_reason,
    )


async def process_refund(
    db: AsyncSession, *, order: Order, performed_by: str
) -> Order:
    """Mark a paid order's payment as refunded; the order status is untouched."""
    if not can_refund(order.status, order.payment_status):
        if order.payment_status != PaymentStatus.PAID:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    "Cannot refund order with payment status "
                    f"{order.payment_status.value}"
                ),
            )
        raise _conflict(
            TransitionError(OrderAction.PROCESS_REFUND.value, order.status, "order")
        )

    old_payment = order.payment_status
    order.payment_status = PaymentStatus.REFUNDED
    order.refunded_at = utc_now()

    await log_audit(
        db,
        AuditEntityType.ORDER,
        order.id,
        OrderAction.PROCESS_REFUND.value,
        performed_by,
        old_value={"payment_status": old_payment.value},
        new_value={"payment_status": PaymentStatus.REFUNDED.value},
    )
    notify(
        db,
        user_id=order.vendor.user_id,
        notification_type=NotificationType.ORDER_REFUNDED,
        title=f"Order {order.order_number} refunded",
        message=(
            f"A refund of {order.total_amount} was issued for order "
            f"{order.order_number}."
        ),
    )
    await db.commit()

    logger.info(
        "Refund processed for order %s by %s (amount=%s)",
        order.order_number,
        performed_by,
        order.total_amount,
    )
    return await get_order(db, order.id)
