"""Terminal step of the checkout: the simulated delivery confirmation."""

import time
from dataclasses import dataclass, field, replace
from typing import Callable, List

from ..config.rules import DELIVERY_SUCCESS_MESSAGE, DELIVERY_TIMELINE
from ..config.settings import DELIVERY_PROCESSING_DELAY
from ..utils.logging import get_logger
from .order import STAGE_CONFIRMED, RentalOrder

logger = get_logger(__name__)


@dataclass(frozen=True)
class Confirmation:
    message: str
    order: RentalOrder
    timeline: List[dict] = field(default_factory=list)


def timeline_status(current_step: int = 1) -> List[dict]:
    """Delivery timeline steps tagged 'completed' up to ``current_step``, else 'pending'."""
    steps = []
    for entry in DELIVERY_TIMELINE:
        step = dict(entry)
        step['status'] = 'completed' if entry['step'] <= current_step else 'pending'
        steps.append(step)
    return steps


def confirm_delivery(
    order: RentalOrder,
    sleep: Callable[[float], None] = time.sleep,
    delay: float = DELIVERY_PROCESSING_DELAY,
) -> Confirmation:
    """Simulate order processing and return the success confirmation.

    Nothing is persisted; the order is only echoed back in its confirmed stage.
    """
    logger.info(
        "Confirming delivery of %s to %s, %s (%s)",
        (order.appliance or {}).get('name', '?'), order.area, order.city, order.preferred_time,
    )
    sleep(delay)
    confirmed = replace(order, stage=STAGE_CONFIRMED)
    return Confirmation(
        message=DELIVERY_SUCCESS_MESSAGE,
        order=confirmed,
        timeline=timeline_status(1),
    )
