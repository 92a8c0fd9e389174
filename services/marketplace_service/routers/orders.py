"""Order router: scoped order lists and fulfillment actions.

Admins see and act on every order. Vendors see and act on the orders placed
with their storefront; refunds are admin-only.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_admin, require_admin_or_vendor
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.marketplace_service.models import (
    Order,
    OrderStatus,
    PaymentStatus,
    VendorProfile,
)
from services.marketplace_service.routers._helpers import (
    PageParams,
    ilike_any,
    page_params,
    paginate,
)
from services.marketplace_service.schemas import (
    APIResponse,
    CancelOrderRequest,
    OrderResponse,
    OrderStatusUpdate,
    ShipOrderRequest,
)
from services.marketplace_service.services import order_fulfillment
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(tags=["orders"])


async def _accessible_order(
    db: AsyncSession, order_id: uuid.UUID, user: AuthUser
) -> Order:
    order = await order_fulfillment.get_order(db, order_id)
    await order_fulfillment.ensure_order_access(db, order, user)
    return order


# ============================================================================
# LISTING
# ============================================================================


@router.get("/orders", response_model=APIResponse[list[OrderResponse]])
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = None,
    search: Optional[str] = None,
    params: PageParams = Depends(page_params),
    current_user: AuthUser = Depends(require_admin_or_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    """List orders; vendors only see their own."""
    query = select(Order).options(selectinload(Order.items))

    if not current_user.is_admin:
        query = query.join(VendorProfile, Order.vendor_id == VendorProfile.id).where(
            VendorProfile.user_id == current_user.user_id
        )
    if status_filter:
        query = query.where(Order.status == status_filter)
    if payment_status:
        query = query.where(Order.payment_status == payment_status)
    if search and search.strip():
        query = query.where(
            ilike_any(
                search, Order.order_number, Order.customer_name, Order.customer_email
            )
        )

    query = query.order_by(Order.created_at.desc(), Order.id)
    orders, pagination = await paginate(db, query, params)

    return APIResponse(
        data=[OrderResponse.model_validate(o) for o in orders],
        pagination=pagination,
    )


@router.get("/orders/{order_id}", response_model=APIResponse[OrderResponse])
async def get_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin_or_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _accessible_order(db, order_id, current_user)
    return APIResponse(data=OrderResponse.model_validate(order))


# ============================================================================
# FULFILLMENT
# ============================================================================


@router.patch("/orders/{order_id}/status", response_model=APIResponse[OrderResponse])
async def update_order_status(
    order_id: uuid.UUID,
    body: OrderStatusUpdate,
    current_user: AuthUser = Depends(require_admin_or_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    """Move an order along its lifecycle; illegal moves answer 409."""
    order = await _accessible_order(db, order_id, current_user)
    if body.status == OrderStatus.CANCELLED:
        order = await order_fulfillment.cancel_order(
            db,
            order=order,
            performed_by=current_user.user_id,
            reason=body.admin_notes,
        )
    else:
        order = await order_fulfillment.update_order_status(
            db,
            order=order,
            new_status=body.status,
            performed_by=current_user.user_id,
            admin_notes=body.admin_notes,
            tracking_number=body.tracking_number,
        )
    return APIResponse(
        message=f"Order status updated to {order.status.value}",
        data=OrderResponse.model_validate(order),
    )


@router.post("/orders/{order_id}/process", response_model=APIResponse[OrderResponse])
async def start_processing(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin_or_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _accessible_order(db, order_id, current_user)
    order = await order_fulfillment.start_processing(
        db, order=order, performed_by=current_user.user_id
    )
    return APIResponse(
        message="Order is being processed", data=OrderResponse.model_validate(order)
    )


@router.post("/orders/{order_id}/ship", response_model=APIResponse[OrderResponse])
async def ship_order(
    order_id: uuid.UUID,
    body: Optional[ShipOrderRequest] = None,
    current_user: AuthUser = Depends(require_admin_or_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _accessible_order(db, order_id, current_user)
    order = await order_fulfillment.mark_shipped(
        db,
        order=order,
        performed_by=current_user.user_id,
        tracking_number=body.tracking_number if body else None,
    )
    return APIResponse(
        message="Order marked as shipped", data=OrderResponse.model_validate(order)
    )


@router.post("/orders/{order_id}/deliver", response_model=APIResponse[OrderResponse])
async def deliver_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin_or_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _accessible_order(db, order_id, current_user)
    order = await order_fulfillment.mark_delivered(
        db, order=order, performed_by=current_user.user_id
    )
    return APIResponse(
        message="Order marked as delivered", data=OrderResponse.model_validate(order)
    )


@router.post("/orders/{order_id}/cancel", response_model=APIResponse[OrderResponse])
async def cancel_order(
    order_id: uuid.UUID,
    body: Optional[CancelOrderRequest] = None,
    current_user: AuthUser = Depends(require_admin_or_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _accessible_order(db, order_id, current_user)
    order = await order_fulfillment.cancel_order(
        db,
        order=order,
        performed_by=current_user.user_id,
        reason=body.reason if body else None,
    )
    return APIResponse(
        message="Order cancelled", data=OrderResponse.model_validate(order)
    )


@router.post("/orders/{order_id}/refund", response_model=APIResponse[OrderResponse])
async def refund_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Refund a paid order. Admin only."""
    order = await order_fulfillment.get_order(db, order_id)
    order = await order_fulfillment.process_refund(
        db, order=order, performed_by=current_user.user_id
    )
    return APIResponse(
        message="Refund processed", data=OrderResponse.model_validate(order)
    )
