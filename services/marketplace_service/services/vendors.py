"""Vendor profile upkeep and admin verification."""

import uuid
from typing import Optional

from fastapi import HTTPException
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.marketplace_service.models import (
    AuditEntityType,
    NotificationType,
    VendorProfile,
)
from services.marketplace_service.schemas import VendorProfileUpsert
from services.marketplace_service.services.audit import log_audit, notify
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def find_vendor_profile(
    db: AsyncSession, user: AuthUser
) -> Optional[VendorProfile]:
    result = await db.execute(
        select(VendorProfile).where(VendorProfile.user_id == user.user_id)
    )
    return result.scalar_one_or_none()


async def upsert_vendor_profile(
    db: AsyncSession,
    *,
    user: AuthUser,
    profile_in: VendorProfileUpsert,
) -> tuple[VendorProfile, bool]:
    """Create the caller's vendor profile, or update the one they have.

    Returns the profile and whether it was newly created. Verification is
    never touched here; only an admin can set it.
    """
    data = profile_in.model_dump(exclude_unset=True)
    vendor = await find_vendor_profile(db, user)

    if vendor is None:
        data.setdefault("email", user.email)
        vendor = VendorProfile(user_id=user.user_id, **data)
        db.add(vendor)
        await db.flush()
        await log_audit(
            db,
            AuditEntityType.VENDOR,
            vendor.id,
            "profile_created",
            user.user_id,
            new_value={"business_name": vendor.business_name},
        )
        created = True
    else:
        old_value = {field: getattr(vendor, field) for field in data}
        for field, value in data.items():
            setattr(vendor, field, value)
        await log_audit(
            db,
            AuditEntityType.VENDOR,
            vendor.id,
            "profile_updated",
            user.user_id,
            old_value=old_value,
            new_value=data,
        )
        created = False

    await db.commit()
    await db.refresh(vendor)

    logger.info(
        "Vendor profile %s %s by %s",
        vendor.id,
        "created" if created else "updated",
        user.user_id,
    )
    return vendor, created


async def set_vendor_verification(
    db: AsyncSession,
    *,
    vendor_id: uuid.UUID,
    is_verified: bool,
    performed_by: str,
    reason: Optional[str] = None,
) -> VendorProfile:
    """Verify or unverify a vendor and tell them about it."""
    vendor = await db.get(VendorProfile, vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")

    was_verified = vendor.is_verified
    vendor.is_verified = is_verified
    vendor.verified_at = utc_now() if is_verified else None

    await log_audit(
        db,
        AuditEntityType.VENDOR,
        vendor.id,
        "verified" if is_verified else "unverified",
        performed_by,
        old_value={"is_verified": was_verified},
        new_value={"is_verified": is_verified},
        notes=reason,
    )

    message = (
        f"Your vendor account has been {'verified' if is_verified else 'unverified'}."
    )
    if reason:
        message = f"{message} {reason}"
    notify(
        db,
        user_id=vendor.user_id,
        notification_type=NotificationType.VENDOR_VERIFICATION,
        title="Verification Status Updated",
        message=message,
    )

    await db.commit()
    await db.refresh(vendor)

    logger.info(
        "Vendor %s verification %s -> %s by %s",
        vendor.id,
        was_verified,
        is_verified,
        performed_by,
    )
    return vendor
