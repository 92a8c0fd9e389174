"""Canonical transition tables for the product and order lifecycles.

Both the API handlers and the dashboard action bar read from these tables, so
the buttons a dashboard renders and the transitions the server accepts are the
same set.
"""

import enum
from typing import Optional

from services.marketplace_service.models.enums import (
    TERMINAL_ORDER_STATUSES,
    OrderStatus,
    PaymentStatus,
    ProductStatus,
)


class TransitionError(ValueError):
    """Raised when an action is not legal from the entity's current status."""

    def __init__(self, action: str, current: enum.Enum, entity: str):
        self.action = action
        self.current = current
        self.entity = entity
        super().__init__(
            f"Cannot {action.replace('_', ' ')} {entity} in status {current.value}"
        )

    @classmethod
    def illegal_move(cls, current: enum.Enum, target: enum.Enum, entity: str):
        error = cls(f"move_to_{target.value}", current, entity)
        error.args = (
            f"Cannot move {entity} from {current.value} to {target.value}",
        )
        return error


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class ProductAction(str, enum.Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CHANGES = "request_changes"
    EDIT = "edit"
    DEACTIVATE = "deactivate"
    ACTIVATE = "activate"


PRODUCT_TRANSITIONS: dict[ProductAction, dict[ProductStatus, ProductStatus]] = {
    ProductAction.SUBMIT: {ProductStatus.DRAFT: ProductStatus.PENDING},
    ProductAction.APPROVE: {ProductStatus.PENDING: ProductStatus.APPROVED},
    ProductAction.REJECT: {ProductStatus.PENDING: ProductStatus.REJECTED},
    ProductAction.REQUEST_CHANGES: {ProductStatus.PENDING: ProductStatus.DRAFT},
    # Vendors rework drafts and rejected listings; a rejected one drops back to draft
    ProductAction.EDIT: {
        ProductStatus.DRAFT: ProductStatus.DRAFT,
        ProductStatus.REJECTED: ProductStatus.DRAFT,
    },
    ProductAction.DEACTIVATE: {
        ProductStatus.APPROVED: ProductStatus.INACTIVE,
        ProductStatus.ACTIVE: ProductStatus.INACTIVE,
    },
    ProductAction.ACTIVATE: {ProductStatus.INACTIVE: ProductStatus.ACTIVE},
}

REVIEW_ACTIONS = (
    ProductAction.APPROVE,
    ProductAction.REJECT,
    ProductAction.REQUEST_CHANGES,
)


def next_product_status(current: ProductStatus, action: ProductAction) -> ProductStatus:
    """Return the status ``action`` leads to, or raise TransitionError."""
    target = PRODUCT_TRANSITIONS[action].get(current)
    if target is None:
        raise TransitionError(action.value, current, "product")
    return target


def available_product_actions(current: ProductStatus) -> list[ProductAction]:
    return [
        action for action, table in PRODUCT_TRANSITIONS.items() if current in table
    ]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class OrderAction(str, enum.Enum):
    START_PROCESSING = "start_processing"
    MARK_SHIPPED = "mark_shipped"
    MARK_DELIVERED = "mark_delivered"
    PROCESS_REFUND = "process_refund"
    CANCEL = "cancel"


ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

_FORWARD_ACTIONS: dict[OrderAction, tuple[OrderStatus, OrderStatus]] = {
    OrderAction.START_PROCESSING: (OrderStatus.PENDING, OrderStatus.PROCESSING),
    OrderAction.MARK_SHIPPED: (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
    OrderAction.MARK_DELIVERED: (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
}


def check_order_transition(current: OrderStatus, target: OrderStatus) -> None:
    if target not in ORDER_TRANSITIONS[current]:
        raise TransitionError.illegal_move(current, target, "order")


def forward_target(action: OrderAction, current: OrderStatus) -> OrderStatus:
    """Resolve a single-step forward action, gated on exact status equality."""
    source, target = _FORWARD_ACTIONS[action]
    if current != source:
        raise TransitionError(action.value, current, "order")
    return target


def can_cancel(status: OrderStatus) -> bool:
    return status not in TERMINAL_ORDER_STATUSES


def can_refund(status: OrderStatus, payment_status: Optional[PaymentStatus]) -> bool:
    return payment_status == PaymentStatus.PAID and status not in TERMINAL_ORDER_STATUSES


def available_order_actions(
    status: OrderStatus, payment_status: Optional[PaymentStatus]
) -> list[OrderAction]:
    """Actions a dashboard may offer for an order in its current state."""
    actions = [
        action
        for action, (source, _target) in _FORWARD_ACTIONS.items()
        if source == status
    ]
    if can_refund(status, payment_status):
        actions.append(OrderAction.PROCESS_REFUND)
    if can_cancel(status):
        actions.append(OrderAction.CANCEL)
    return actions
