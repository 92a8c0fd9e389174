"""Integration tests for the marketplace seed data."""

import pytest
from services.marketplace_service.models import (
    AdminUser,
    Order,
    OrderStatus,
    Product,
    ProductStatus,
)
from services.marketplace_service.seed_marketplace_data import (
    ADMIN_USERS,
    ORDERS,
    PRODUCTS,
    seed_marketplace,
)
from sqlalchemy import func, select


@pytest.mark.asyncio
@pytest.mark.integration
async def test_seed_covers_every_status(db_session):
    assert await seed_marketplace(db_session) is True

    product_statuses = set(
        (await db_session.execute(select(Product.status))).scalars().all()
    )
    order_statuses = set(
        (await db_session.execute(select(Order.status))).scalars().all()
    )
    assert product_statuses == set(ProductStatus)
    assert order_statuses == set(OrderStatus)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_seed_rejected_product_keeps_reason(db_session):
    await seed_marketplace(db_session)

    product = (
        await db_session.execute(
            select(Product).where(Product.status == ProductStatus.REJECTED)
        )
    ).scalar_one()
    assert product.name == "Moringa Leaf Powder"
    assert product.review_note == "Missing certification"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_seed_is_idempotent(db_session):
    await seed_marketplace(db_session)

    assert await seed_marketplace(db_session) is False

    counts = [
        (await db_session.execute(select(func.count(model.id)))).scalar()
        for model in (AdminUser, Product, Order)
    ]
    assert counts == [len(ADMIN_USERS), len(PRODUCTS), len(ORDERS)]
