"""Seed script for marketplace test data.

Creates categories, a verified vendor, products in every approval status,
orders in every fulfillment status and the admin user directory, so the
admin dashboards have something to show.

Usage:
    python -m services.marketplace_service.seed_marketplace_data
"""

import asyncio
from decimal import Decimal

from libs.common.logging import configure_logging, get_logger
from libs.db.config import AsyncSessionLocal
from services.marketplace_service.models import (
    AdminRole,
    AdminUser,
    AdminUserStatus,
    Category,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Product,
    ProductStatus,
    SourcingType,
    VendorProfile,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

ADMIN_USERS = [
    {
        "code": "ADM001",
        "name": "John Smith",
        "email": "john.smith@afrigos.com",
        "role": AdminRole.SUPER_ADMIN,
        "status": AdminUserStatus.ACTIVE,
        "permissions": ["all"],
        "department": "Management",
        "phone": "+44 7911 123456",
        "location": "London, UK",
    },
    {
        "code": "ADM002",
        "name": "Sarah Johnson",
        "email": "sarah.johnson@afrigos.com",
        "role": AdminRole.ADMIN,
        "status": AdminUserStatus.ACTIVE,
        "permissions": ["vendors", "products", "orders", "analytics"],
        "department": "Operations",
        "phone": "+44 7911 234567",
        "location": "Manchester, UK",
    },
    {
        "code": "ADM003",
        "name": "Michael Brown",
        "email": "michael.brown@afrigos.com",
        "role": AdminRole.MODERATOR,
        "status": AdminUserStatus.ACTIVE,
        "permissions": ["products", "orders"],
        "department": "Support",
        "phone": "+44 7911 345678",
        "location": "Birmingham, UK",
    },
    {
        "code": "ADM004",
        "name": "Emma Wilson",
        "email": "emma.wilson@afrigos.com",
        "role": AdminRole.SUPPORT,
        "status": AdminUserStatus.INACTIVE,
        "permissions": ["orders", "customers"],
        "department": "Customer Service",
        "phone": "+44 7911 456789",
        "location": "Liverpool, UK",
    },
]

CATEGORIES = [
    ("Spices & Seasonings", "spices-seasonings", Decimal("12.00")),
    ("Beauty & Personal Care", "beauty-personal-care", Decimal("15.00")),
    ("Textiles & Fashion", "textiles-fashion", Decimal("10.00")),
]

# (name, category slug, price, sourcing, status, review note)
PRODUCTS = [
    ("Authentic Jollof Rice Spice Mix", "spices-seasonings", "8.99",
     SourcingType.IN_HOUSE, ProductStatus.PENDING, None),
    ("Shea Butter Hair Care Set", "beauty-personal-care", "24.50",
     SourcingType.OUTSOURCED, ProductStatus.PENDING, None),
    ("Traditional Kente Cloth Scarf", "textiles-fashion", "45.00",
     SourcingType.OUTSOURCED, ProductStatus.APPROVED, None),
    ("Moringa Leaf Powder", "spices-seasonings", "12.75",
     SourcingType.IN_HOUSE, ProductStatus.REJECTED, "Missing certification"),
    ("Nigerian Pepper Soup Mix", "spices-seasonings", "6.50",
     SourcingType.IN_HOUSE, ProductStatus.DRAFT, None),
    ("Black Soap Bar", "beauty-personal-care", "5.25",
     SourcingType.IN_HOUSE, ProductStatus.ACTIVE, None),
    ("Ankara Print Tote Bag", "textiles-fashion", "19.99",
     SourcingType.OUTSOURCED, ProductStatus.INACTIVE, None),
]

# (status, payment status, quantity of the Kente scarf)
ORDERS = [
    (OrderStatus.PENDING, PaymentStatus.PENDING, 1),
    (OrderStatus.PROCESSING, PaymentStatus.PAID, 2),
    (OrderStatus.SHIPPED, PaymentStatus.PAID, 1),
    (OrderStatus.DELIVERED, PaymentStatus.PAID, 3),
    (OrderStatus.CANCELLED, PaymentStatus.REFUNDED, 1),
]


async def seed_marketplace(db: AsyncSession) -> bool:
    """Insert the sample data set; returns False when data already exists."""
    count = (await db.execute(select(func.count(Category.id)))).scalar()
    if count:
        logger.info("Marketplace data already exists (%s categories). Skipping seed.", count)
        return False

    # =========================================================================
    # 1. ADMIN USERS
    # =========================================================================
    db.add_all([AdminUser(**data) for data in ADMIN_USERS])

    # =========================================================================
    # 2. CATEGORIES AND VENDOR
    # =========================================================================
    categories = {
        slug: Category(name=name, slug=slug, commission_rate=rate)
        for name, slug, rate in CATEGORIES
    }
    db.add_all(categories.values())

    vendor = VendorProfile(
        user_id="vendor-mama-asha",
        business_name="Mama Asha's Kitchen",
        contact_name="Asha Okafor",
        email="asha@mamaashaskitchen.co.uk",
        is_verified=True,
    )
    db.add(vendor)
    await db.flush()

    # =========================================================================
    # 3. PRODUCTS
    # =========================================================================
    products = {}
    for index, (name, slug, price, sourcing, status, note) in enumerate(PRODUCTS, 1):
        product = Product(
            vendor_id=vendor.id,
            category_id=categories[slug].id,
            name=name,
            description=f"{name} from {vendor.business_name}.",
            sku=f"MAK-{index:03d}",
            price=Decimal(price),
            stock=25,
            sourcing=sourcing,
            status=status,
            review_note=note,
        )
        products[name] = product
        db.add(product)
    await db.flush()

    # =========================================================================
    # 4. ORDERS
    # =========================================================================
    scarf = products["Traditional Kente Cloth Scarf"]
    for index, (status, payment_status, quantity) in enumerate(ORDERS, 1):
        line_total = scarf.price * quantity
        order = Order(
            order_number=Order.generate_order_number(),
            customer_id=f"customer-{index}",
            customer_name=f"Customer {index}",
            customer_email=f"customer{index}@example.com",
            vendor_id=vendor.id,
            total_amount=line_total,
            status=status,
            payment_status=payment_status,
            shipping_address={
                "line1": f"{index} High Street",
                "city": "London",
                "postcode": "E1 6AN",
                "country": "GB",
            },
        )
        order.items.append(
            OrderItem(
                product_id=scarf.id,
                product_name=scarf.name,
                quantity=quantity,
                unit_price=scarf.price,
                line_total=line_total,
            )
        )
        db.add(order)

    await db.commit()
    logger.info(
        "Seeded %s admin users, %s categories, %s products, %s orders",
        len(ADMIN_USERS),
        len(CATEGORIES),
        len(PRODUCTS),
        len(ORDERS),
    )
    return True


async def seed_marketplace_data():
    async with AsyncSessionLocal() as db:
        await seed_marketplace(db)


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed_marketplace_data())
