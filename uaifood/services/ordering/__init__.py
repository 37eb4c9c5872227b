"""
Order workflow: pricing, status state machine, persistence and the
aggregate service that ties them together.
"""

from uaifood.services.ordering.pricing import (
    PricingResolver,
    PricedOrder,
    RequestedLine,
    ResolvedLine,
)
from uaifood.services.ordering.repository import OrderRepository
from uaifood.services.ordering.service import OrderService
from uaifood.services.ordering.status import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    is_terminal,
    next_status,
    progression,
    validate_transition,
)

__all__ = [
    "PricingResolver",
    "PricedOrder",
    "RequestedLine",
    "ResolvedLine",
    "OrderRepository",
    "OrderService",
    "INITIAL_STATUS",
    "TERMINAL_STATUSES",
    "is_terminal",
    "next_status",
    "progression",
    "validate_transition",
]
