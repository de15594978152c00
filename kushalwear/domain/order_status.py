# kushalwear/domain/order_status.py
from enum import Enum

from kushalwear.domain.errors import ConflictError


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# tylko do przodu, delivered i cancelled sa koncowe
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    # ten sam status dozwolony, zeby zmienic tylko tracking / notes
    return current == new or new in ALLOWED_TRANSITIONS[current]


def check_transition(current: str, new: str) -> OrderStatus:
    current_status = OrderStatus(current)
    new_status = OrderStatus(new)
    if not can_transition(current_status, new_status):
        raise ConflictError(
            f"Invalid status transition from {current_status.value} to {new_status.value}"
        )
    return new_status
