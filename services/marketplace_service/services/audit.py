"""Audit trail and vendor notification helpers shared by the workflows."""

import uuid
from typing import Optional

from services.marketplace_service.models import (
    AuditEntityType,
    MarketplaceAuditLog,
    Notification,
    NotificationType,
)
from sqlalchemy.ext.asyncio import AsyncSession


async def log_audit(
    db: AsyncSession,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: str,
    performed_by: str,
    old_value: Optional[dict] = None,
    new_value: Optional[dict] = None,
    notes: Optional[str] = None,
):
    """Log an audit event (committed with the caller's transaction)."""
    audit_log = MarketplaceAuditLog(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        old_value=old_value,
        new_value=new_value,
        performed_by=performed_by,
        notes=notes,
    )
    db.add(audit_log)


def notify(
    db: AsyncSession,
    *,
    user_id: str,
    notification_type: NotificationType,
    title: str,
    message: str,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=notification_type,
        title=title,
        message=message,
    )
    db.add(notification)
    return notification
