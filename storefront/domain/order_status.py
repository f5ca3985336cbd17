# storefront/domain/order_status.py
import enum
from typing import Mapping, FrozenSet

from storefront.domain.errors import InvalidTransition, ValidationError


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TransitionTable = Mapping[OrderStatus, FrozenSet[OrderStatus]]

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

LIFECYCLE_TRANSITIONS: TransitionTable = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# any status may be set from any other
PERMISSIVE_TRANSITIONS: TransitionTable = {
    status: frozenset(OrderStatus) for status in OrderStatus
}

TRANSITION_TABLES = {
    "lifecycle": LIFECYCLE_TRANSITIONS,
    "permissive": PERMISSIVE_TRANSITIONS,
}


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Invalid order status '{value}', expected one of: {allowed}")


def transition_table(name: str) -> TransitionTable:
    try:
        return TRANSITION_TABLES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown order transition table '{name}'")


def check_transition(table: TransitionTable, current: OrderStatus, requested: OrderStatus) -> None:
    """Re-setting the current status is always accepted."""
    if current == requested:
        return
    if requested not in table.get(current, frozenset()):
        raise InvalidTransition(current.value, requested.value)
