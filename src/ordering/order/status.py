"""Order status tracker.

Five ordered stages that only move forward, plus ``cancelled``, which can be
reached from any stage before delivery. The same ordering drives the
customer's progress bar.
"""

from dataclasses import dataclass
from enum import Enum


class OrderStatus(Enum):
    CONFIRMED = "confirmed"
    PAYMENT_ACCEPTED = "payment_accepted"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


STAGES = (
    OrderStatus.CONFIRMED.value,
    OrderStatus.PAYMENT_ACCEPTED.value,
    OrderStatus.PREPARING.value,
    OrderStatus.SHIPPED.value,
    OrderStatus.DELIVERED.value,
)

TERMINAL = (OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value)

LABELS = {
    OrderStatus.CONFIRMED.value: "Order Confirmed",
    OrderStatus.PAYMENT_ACCEPTED.value: "Payment Accepted",
    OrderStatus.PREPARING.value: "Order is Being Prepared",
    OrderStatus.SHIPPED.value: "Order Has Been Shipped",
    OrderStatus.DELIVERED.value: "Order Successfully Delivered",
    OrderStatus.CANCELLED.value: "Order Cancelled",
}


class StepState(Enum):
    COMPLETED = "completed"
    ACTIVE = "active"
    PENDING = "pending"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TrackerStep:
    stage: str
    label: str
    state: str


def stage_index(status: str) -> int:
    """Position of ``status`` among the stages. Unknown statuses are -1."""
    try:
        return STAGES.index(status)
    except ValueError:
        return -1


def can_advance(current: str, target: str) -> bool:
    if current in TERMINAL or target not in STAGES:
        return False
    return stage_index(target) > stage_index(current)


def can_cancel(current: str) -> bool:
    return current not in TERMINAL


def next_stages(current: str) -> list[str]:
    """Stages a vendor may move the order to from ``current``."""
    return [stage for stage in STAGES if can_advance(current, stage)]


def progress(current: str, cancelled_at: str | None = None) -> list[TrackerStep]:
    """Progress bar steps: before current completed, current active, rest pending.

    A cancelled order shows the stage it was cancelled at as cancelled.
    """
    if current == OrderStatus.CANCELLED.value:
        position = stage_index(cancelled_at) if cancelled_at else 0
        current_state = StepState.CANCELLED
    else:
        position = stage_index(current)
        current_state = StepState.ACTIVE

    steps = []
    for index, stage in enumerate(STAGES):
        if index < position:
            state = StepState.COMPLETED
        elif index == position:
            state = current_state
        else:
            state = StepState.PENDING
        steps.append(TrackerStep(stage=stage, label=LABELS[stage], state=state.value))
    return steps
