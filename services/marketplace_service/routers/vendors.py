"""Vendors router: storefront profiles and admin verification."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from libs.auth.dependencies import require_admin, require_vendor
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.marketplace_service.models import VendorProfile
from services.marketplace_service.routers._helpers import (
    PageParams,
    ilike_any,
    page_params,
    paginate,
)
from services.marketplace_service.schemas import (
    APIResponse,
    VendorProfileResponse,
    VendorProfileUpsert,
    VendorVerificationUpdate,
)
from services.marketplace_service.services.vendors import (
    find_vendor_profile,
    set_vendor_verification,
    upsert_vendor_profile,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["vendors"])


@router.get("/vendors/profile", response_model=APIResponse[VendorProfileResponse])
async def get_my_profile(
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    vendor = await find_vendor_profile(db, current_user)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor profile not found")
    return APIResponse(data=VendorProfileResponse.model_validate(vendor))


@router.post("/vendors/profile", response_model=APIResponse[VendorProfileResponse])
async def save_my_profile(
    body: VendorProfileUpsert,
    response: Response,
    current_user: AuthUser = Depends(require_vendor),
    db: AsyncSession = Depends(get_async_db),
):
    """Create the vendor profile on first call (201), update it afterwards."""
    vendor, created = await upsert_vendor_profile(
        db, user=current_user, profile_in=body
    )
    if created:
        response.status_code = status.HTTP_201_CREATED
    return APIResponse(
        message="Vendor profile created" if created else "Vendor profile updated",
        data=VendorProfileResponse.model_validate(vendor),
    )


@router.get(
    "/admin/vendors", response_model=APIResponse[list[VendorProfileResponse]]
)
async def list_vendors(
    search: Optional[str] = None,
    verified: Optional[bool] = None,
    params: PageParams = Depends(page_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List vendor profiles, newest first."""
    query = select(VendorProfile)

    if search and search.strip():
        query = query.where(
            ilike_any(
                search,
                VendorProfile.business_name,
                VendorProfile.email,
                VendorProfile.contact_name,
            )
        )
    if verified is not None:
        query = query.where(VendorProfile.is_verified.is_(verified))

    query = query.order_by(VendorProfile.created_at.desc(), VendorProfile.id)
    vendors, pagination = await paginate(db, query, params)

    return APIResponse(
        data=[VendorProfileResponse.model_validate(v) for v in vendors],
        pagination=pagination,
    )


@router.patch(
    "/vendors/{vendor_id}/verify", response_model=APIResponse[VendorProfileResponse]
)
async def verify_vendor(
    vendor_id: uuid.UUID,
    body: VendorVerificationUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    vendor = await set_vendor_verification(
        db,
        vendor_id=vendor_id,
        is_verified=body.is_verified,
        performed_by=current_user.user_id,
        reason=body.reason,
    )
    return APIResponse(
        message=(
            "Vendor verified successfully"
            if vendor.is_verified
            else "Vendor verification removed"
        ),
        data=VendorProfileResponse.model_validate(vendor),
    )
