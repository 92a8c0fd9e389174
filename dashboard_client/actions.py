"""Dashboard action handlers.

Each handler sends at most one request and always returns a Toast. Failures
become a destructive toast and are never re-raised, so a button handler can
render the result without its own error handling.
"""

from typing import Any, Awaitable, Dict, Literal, Optional

from libs.common.logging import get_logger
from pydantic import BaseModel

from dashboard_client.api import APIError, api_fetch

logger = get_logger(__name__)


class Toast(BaseModel):
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


def format_status_label(status: str) -> str:
    return status.replace("_", " ").title()


async def _run(
    request: Awaitable[Dict[str, Any]],
    success: Toast,
    failure_title: str,
    failure_description: str,
) -> Toast:
    try:
        await request
    except APIError as e:
        logger.warning("%s: %s", failure_title, e.message)
        return Toast(
            title=failure_title,
            description=f"{failure_description} Please try again.",
            variant="destructive",
        )
    return success


def _missing(title: str, description: str) -> Toast:
    return Toast(title=title, description=description, variant="destructive")


# ---------------------------------------------------------------------------
# Product approval queue
# ---------------------------------------------------------------------------


async def approve_product(
    token: str, product_id: str, note: Optional[str] = None
) -> Toast:
    payload = {"note": note.strip()} if note and note.strip() else None
    return await _run(
        api_fetch(
            "POST", f"/admin/products/{product_id}/approve", token, json=payload
        ),
        Toast(
            title="Product Approved",
            description=f"Product {product_id} has been approved and is now live",
        ),
        "Approval Failed",
        "Failed to approve product.",
    )


async def reject_product(token: str, product_id: str, reason: str) -> Toast:
    reason = (reason or "").strip()
    if not reason:
        return _missing(
            "Reason Required", "Please provide a reason for rejecting this product."
        )
    return await _run(
        api_fetch(
            "PUT",
            f"/admin/products/{product_id}/status",
            token,
            json={"status": "REJECTED", "reason": reason},
        ),
        Toast(
            title="Product Rejected",
            description=f"Product {product_id} has been rejected: {reason}",
        ),
        "Rejection Failed",
        "Failed to reject product.",
    )


async def request_changes(token: str, product_id: str, note: str) -> Toast:
    note = (note or "").strip()
    if not note:
        return _missing(
            "Note Required", "Please describe the changes the vendor must make."
        )
    return await _run(
        api_fetch(
            "POST",
            f"/admin/products/{product_id}/request-changes",
            token,
            json={"note": note},
        ),
        Toast(
            title="Changes Requested",
            description=f"Changes requested for product {product_id}",
        ),
        "Request Failed",
        "Failed to request changes.",
    )


# ---------------------------------------------------------------------------
# Order management
# ---------------------------------------------------------------------------


async def update_order_status(token: str, order_id: str, new_status: str) -> Toast:
    return await _run(
        api_fetch(
            "PATCH", f"/orders/{order_id}/status", token, json={"status": new_status}
        ),
        Toast(
            title="Status Updated",
            description=(
                f"Order {order_id} status updated to "
                f"{format_status_label(new_status)}"
            ),
        ),
        "Update Failed",
        "Failed to update order status.",
    )


async def mark_shipped(
    token: str, order_id: str, tracking_number: Optional[str] = None
) -> Toast:
    payload = {"tracking_number": tracking_number} if tracking_number else None
    return await _run(
        api_fetch("POST", f"/orders/{order_id}/ship", token, json=payload),
        Toast(
            title="Order Shipped",
            description=f"Order {order_id} has been marked as shipped",
        ),
        "Update Failed",
        "Failed to mark order as shipped.",
    )


async def mark_delivered(token: str, order_id: str) -> Toast:
    return await _run(
        api_fetch("POST", f"/orders/{order_id}/deliver", token),
        Toast(
            title="Order Delivered",
            description=f"Order {order_id} has been marked as delivered",
        ),
        "Update Failed",
        "Failed to mark order as delivered.",
    )


async def cancel_order(
    token: str, order_id: str, reason: Optional[str] = None
) -> Toast:
    payload = {"reason": reason.strip()} if reason and reason.strip() else None
    return await _run(
        api_fetch("POST", f"/orders/{order_id}/cancel", token, json=payload),
        Toast(
            title="Order Cancelled",
            description=f"Order {order_id} has been cancelled successfully",
        ),
        "Cancellation Failed",
        "Failed to cancel order.",
    )


async def process_refund(token: str, order_id: str) -> Toast:
    return await _run(
        api_fetch("POST", f"/orders/{order_id}/refund", token),
        Toast(
            title="Refund Processed",
            description=f"Refund has been processed for order {order_id}",
        ),
        "Refund Failed",
        "Failed to process refund.",
    )


# ---------------------------------------------------------------------------
# Vendor verification
# ---------------------------------------------------------------------------


async def set_vendor_verified(
    token: str, vendor_id: str, is_verified: bool, reason: Optional[str] = None
) -> Toast:
    payload: Dict[str, Any] = {"is_verified": is_verified}
    if reason and reason.strip():
        payload["reason"] = reason.strip()
    verb = "verified" if is_verified else "unverified"
    return await _run(
        api_fetch("PATCH", f"/vendors/{vendor_id}/verify", token, json=payload),
        Toast(
            title="Vendor Updated",
            description=f"Vendor {vendor_id} has been {verb}",
        ),
        "Verification Failed",
        "Failed to update vendor verification.",
    )
