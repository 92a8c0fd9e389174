"""Admin dashboard router: headline stats, order stats and financial summary."""

from decimal import Decimal

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.marketplace_service.models import (
    VISIBLE_PRODUCT_STATUSES,
    Category,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Product,
    VendorProfile,
)
from services.marketplace_service.schemas import (
    APIResponse,
    DashboardStats,
    FinancialSummary,
    OrderStats,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-dashboard"])

# Applied to line items whose product or category no longer exists
DEFAULT_COMMISSION_RATE = Decimal("10.00")
CENTS = Decimal("0.01")


async def _order_totals(db: AsyncSession, payment_status: PaymentStatus) -> list[Decimal]:
    result = await db.execute(
        select(Order.total_amount).where(Order.payment_status == payment_status)
    )
    return [Decimal(amount) for amount in result.scalars().all()]


@router.get("/admin/dashboard/stats", response_model=APIResponse[DashboardStats])
async def dashboard_stats(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Headline numbers for the admin overview."""
    paid_totals = await _order_totals(db, PaymentStatus.PAID)

    active_vendors = (
        await db.execute(
            select(func.count(VendorProfile.id)).where(
                VendorProfile.is_verified.is_(True)
            )
        )
    ).scalar() or 0
    products_listed = (
        await db.execute(
            select(func.count(Product.id)).where(
                Product.status.in_(VISIBLE_PRODUCT_STATUSES)
            )
        )
    ).scalar() or 0
    customer_orders = (await db.execute(select(func.count(Order.id)))).scalar() or 0

    return APIResponse(
        data=DashboardStats(
            total_revenue=sum(paid_totals, Decimal("0")).quantize(CENTS),
            active_vendors=active_vendors,
            products_listed=products_listed,
            customer_orders=customer_orders,
        )
    )


@router.get("/admin/orders/stats", response_model=APIResponse[OrderStats])
async def order_stats(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Order counts per fulfillment status and per payment status."""
    by_status = {s.value: 0 for s in OrderStatus}
    result = await db.execute(
        select(Order.status, func.count(Order.id)).group_by(Order.status)
    )
    for order_status, count in result.all():
        by_status[order_status.value] = count

    by_payment = {s.value: 0 for s in PaymentStatus}
    result = await db.execute(
        select(Order.payment_status, func.count(Order.id)).group_by(
            Order.payment_status
        )
    )
    for payment_status, count in result.all():
        by_payment[payment_status.value] = count

    return APIResponse(
        data=OrderStats(
            total=sum(by_status.values()),
            by_status=by_status,
            by_payment_status=by_payment,
        )
    )


@router.get("/admin/financial/summary", response_model=APIResponse[FinancialSummary])
async def financial_summary(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Gross sales, platform commission and vendor payouts over paid orders."""
    paid_totals = await _order_totals(db, PaymentStatus.PAID)
    refunded_totals = await _order_totals(db, PaymentStatus.REFUNDED)

    # Commission is charged per line at the rate of the product's category
    lines = await db.execute(
        select(OrderItem.line_total, Category.commission_rate)
        .join(Order, OrderItem.order_id == Order.id)
        .outerjoin(Product, OrderItem.product_id == Product.id)
        .outerjoin(Category, Product.category_id == Category.id)
        .where(Order.payment_status == PaymentStatus.PAID)
    )
    commission = Decimal("0")
    for line_total, rate in lines.all():
        rate = DEFAULT_COMMISSION_RATE if rate is None else Decimal(rate)
        commission += Decimal(line_total) * rate / Decimal("100")

    gross = sum(paid_totals, Decimal("0")).quantize(CENTS)
    commission = commission.quantize(CENTS)

    return APIResponse(
        data=FinancialSummary(
            gross_sales=gross,
            platform_commission=commission,
            vendor_payouts=gross - commission,
            refunded_amount=sum(refunded_totals, Decimal("0")).quantize(CENTS),
            paid_orders=len(paid_totals),
        )
    )
