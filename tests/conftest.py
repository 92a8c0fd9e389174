"""Shared marketplace fixtures: users, tokens and baseline catalog rows."""

import pytest
import pytest_asyncio
from libs.auth.dependencies import create_access_token
from libs.auth.models import AuthUser
from tests.factories import CategoryFactory, VendorProfileFactory

ADMIN_ID = "admin-user-1"
VENDOR_ID = "vendor-user-1"
OTHER_VENDOR_ID = "vendor-user-2"
CUSTOMER_ID = "customer-user-1"


def _bearer(user_id: str, role: str) -> dict:
    token = create_access_token(user_id, role, email=f"{user_id}@test.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user() -> AuthUser:
    return AuthUser(user_id=ADMIN_ID, email="admin@test.com", role="admin")


@pytest.fixture
def vendor_user() -> AuthUser:
    return AuthUser(user_id=VENDOR_ID, email="vendor@test.com", role="vendor")


@pytest.fixture
def admin_headers() -> dict:
    return _bearer(ADMIN_ID, "admin")


@pytest.fixture
def vendor_headers() -> dict:
    return _bearer(VENDOR_ID, "vendor")


@pytest.fixture
def other_vendor_headers() -> dict:
    return _bearer(OTHER_VENDOR_ID, "vendor")


@pytest.fixture
def customer_headers() -> dict:
    return _bearer(CUSTOMER_ID, "customer")


@pytest_asyncio.fixture
async def vendor(db_session):
    profile = VendorProfileFactory.create(user_id=VENDOR_ID)
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest_asyncio.fixture
async def other_vendor(db_session):
    profile = VendorProfileFactory.create(
        user_id=OTHER_VENDOR_ID, business_name="Other Vendor Ltd"
    )
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest_asyncio.fixture
async def category(db_session):
    cat = CategoryFactory.create()
    db_session.add(cat)
    await db_session.commit()
    return cat
