"""Admin users router: platform operator directory."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.marketplace_service.models import (
    AdminRole,
    AdminUser,
    AdminUserStatus,
    AuditEntityType,
)
from services.marketplace_service.routers._helpers import (
    PageParams,
    ilike_any,
    page_params,
    paginate,
)
from services.marketplace_service.schemas import (
    AdminUserResponse,
    AdminUserStatusUpdate,
    APIResponse,
)
from services.marketplace_service.services.audit import log_audit
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["admin-users"])


@router.get("/admin/users", response_model=APIResponse[list[AdminUserResponse]])
async def list_admin_users(
    search: Optional[str] = None,
    role: Optional[AdminRole] = None,
    status_filter: Optional[AdminUserStatus] = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List admin users; every supplied filter must match."""
    query = select(AdminUser)

    if search and search.strip():
        query = query.where(
            ilike_any(search, AdminUser.name, AdminUser.email, AdminUser.code)
        )
    if role:
        query = query.where(AdminUser.role == role)
    if status_filter:
        query = query.where(AdminUser.status == status_filter)

    query = query.order_by(AdminUser.code)
    users, pagination = await paginate(db, query, params)

    return APIResponse(
        data=[AdminUserResponse.model_validate(u) for u in users],
        pagination=pagination,
    )


@router.patch(
    "/admin/users/{user_id}/status", response_model=APIResponse[AdminUserResponse]
)
async def update_admin_user_status(
    user_id: uuid.UUID,
    body: AdminUserStatusUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Activate or deactivate an admin user."""
    user = await db.get(AdminUser, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Admin user not found")

    old_status = user.status
    user.status = body.status

    await log_audit(
        db,
        AuditEntityType.ADMIN_USER,
        user.id,
        "status_changed",
        current_user.user_id,
        old_value={"status": old_status.value},
        new_value={"status": body.status.value},
    )
    await db.commit()
    await db.refresh(user)

    logger.info(
        "Admin user %s status %s -> %s by %s",
        user.code,
        old_status.value,
        user.status.value,
        current_user.user_id,
    )
    return APIResponse(
        message=f"User {user.status.value}",
        data=AdminUserResponse.model_validate(user),
    )
