"""
Order status machine.

    PENDING ──pay──▶ PAID ──▶ PROCESSING ──▶ SHIPPED ──▶ DELIVERED
       │                │          │            │
       └──cancel────────┴──────────┴────────────┴──▶ CANCELLED

Admin updates are checked against ALLOWED_TRANSITIONS. PENDING orders may only
become PAID or CANCELLED; PAID, PROCESSING and SHIPPED orders may be moved to
any status; CANCELLED and DELIVERED are terminal.

Customer cancellation is narrower (see ensure_cancellable): once an order has
been SHIPPED the customer can no longer cancel it.
"""

from domain.enums import OrderStatus
from domain.errors import BusinessRuleError

TERMINAL_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.DELIVERED})

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset(OrderStatus),
    OrderStatus.PROCESSING: frozenset(OrderStatus),
    OrderStatus.SHIPPED: frozenset(OrderStatus),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# An order in one of these states counts as a purchase (review eligibility)
REVIEWABLE_STATUSES = frozenset({
    OrderStatus.PAID,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
})

_NOT_CANCELLABLE = {
    OrderStatus.CANCELLED: "Order is already cancelled",
    OrderStatus.DELIVERED: "Cannot cancel an order that has been delivered",
    OrderStatus.SHIPPED: "Cannot cancel an order that has been shipped",
}


def is_transition_allowed(current: OrderStatus | str, requested: OrderStatus | str) -> bool:
    return OrderStatus(requested) in ALLOWED_TRANSITIONS[OrderStatus(current)]


def validate_status_transition(current: OrderStatus | str, requested: OrderStatus | str) -> None:
    """Raise BusinessRuleError unless an admin may move `current` to `requested`."""
    current = OrderStatus(current)
    requested = OrderStatus(requested)

    if current == OrderStatus.CANCELLED:
        raise BusinessRuleError(
            "Cannot change the status of a cancelled order",
            details={"current": current.value, "requested": requested.value},
        )
    if current == OrderStatus.DELIVERED:
        raise BusinessRuleError(
            "Cannot change the status of a delivered order",
            details={"current": current.value, "requested": requested.value},
        )
    if not is_transition_allowed(current, requested):
        raise BusinessRuleError(
            f"Invalid status for a {current.value.lower()} order: {requested.value}",
            details={
                "current": current.value,
                "requested": requested.value,
                "allowed": sorted(s.value for s in ALLOWED_TRANSITIONS[current]),
            },
        )


def ensure_cancellable(status: OrderStatus | str) -> None:
    """Customer-initiated cancellation check."""
    reason = _NOT_CANCELLABLE.get(OrderStatus(status))
    if reason:
        raise BusinessRuleError(reason, details={"status": OrderStatus(status).value})
