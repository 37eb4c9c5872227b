"""
Order Status State Machine

Orders move through a fixed, one-directional sequence:

    pending → preparing → delivering → delivered

``delivered`` is terminal. There is no way to move backward or to skip a
state; such requests are rejected, never clamped.
"""

from typing import Iterator

from uaifood.core.errors import InvalidTransitionError
from uaifood.models import OrderStatus

INITIAL_STATUS = OrderStatus.PENDING

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED})


def next_status(current: OrderStatus) -> OrderStatus:
    """
    Return the single legal successor of ``current``.

    Raises:
        InvalidTransitionError: ``current`` is terminal
    """
    current = OrderStatus(current)

    if current is OrderStatus.PENDING:
        return OrderStatus.PREPARING
    if current is OrderStatus.PREPARING:
        return OrderStatus.DELIVERING
    if current is OrderStatus.DELIVERING:
        return OrderStatus.DELIVERED
    if current is OrderStatus.DELIVERED:
        raise InvalidTransitionError(
            f"Order is already '{current.value}' and cannot advance."
        )
    raise ValueError(f"Unhandled order status: {current!r}")


def is_terminal(status: OrderStatus) -> bool:
    return OrderStatus(status) in TERMINAL_STATUSES


def validate_transition(current: OrderStatus, target: OrderStatus) -> OrderStatus:
    """
    Check an explicit ``current → target`` request.

    Only the immediate successor is accepted.

    Raises:
        InvalidTransitionError: backward move, skip, no-op or terminal source
    """
    expected = next_status(current)
    target = OrderStatus(target)
    if target is not expected:
        raise InvalidTransitionError(
            f"Cannot change order status from '{OrderStatus(current).value}' "
            f"to '{target.value}'; next allowed status is '{expected.value}'."
        )
    return target


def progression(start: OrderStatus = INITIAL_STATUS) -> Iterator[OrderStatus]:
    """Yield every status reachable from ``start``, in order."""
    status = OrderStatus(start)
    while not is_terminal(status):
        status = next_status(status)
        yield status
