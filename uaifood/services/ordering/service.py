"""
Order Aggregate

Owns creation and status transitions of orders:
    - totals are always derived by the ``PricingResolver``
    - status changes always follow the state machine in ``status``
    - clients only ever see their own orders
"""

import logging
from typing import Iterable, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from uaifood.models import Order, OrderStatus, PaymentMethod
from uaifood.services.access import Action, Principal, authorize
from uaifood.services.ordering.pricing import PricingResolver, RequestedLine
from uaifood.services.ordering.repository import OrderRepository
from uaifood.services.ordering.status import next_status, validate_transition

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order workflow coordinator.

    Example:
        >>> service = OrderService(session)
        >>> order = await service.create(
        ...     client_id=7,
        ...     payment_method="PIX",
        ...     requested_lines=[RequestedLine(item_id=1, quantity=2)],
        ... )
        >>> order.status
        <OrderStatus.PENDING: 'pending'>
    """

    def __init__(
        self,
        session: AsyncSession,
        repository: Optional[OrderRepository] = None,
        pricing: Optional[PricingResolver] = None,
    ):
        self.repository = repository or OrderRepository(session)
        self.pricing = pricing or PricingResolver(self.repository)

    @staticmethod
    def _parse_payment_method(payment_method) -> PaymentMethod:
        try:
            return PaymentMethod(payment_method)
        except ValueError:
            valid = ", ".join(m.value for m in PaymentMethod)
            raise ValidationError(f"Payment method must be one of: {valid}.")

    async def create(
        self,
        client_id: int,
        payment_method,
        requested_lines: Iterable[RequestedLine],
    ) -> Order:
        """
        Place a new order in ``pending`` with a server-computed total.

        Raises:
            ValidationError: unknown payment method, empty or invalid lines
            NotFoundError: a requested item does not exist
        """
        method = self._parse_payment_method(payment_method)
        priced = await self.pricing.compute_order(requested_lines)

        order = await self.repository.create_order_with_lines(client_id, method, priced)
        logger.info(
            f"Order #{order.id} created for client #{client_id} "
            f"({len(priced.lines)} line(s), total {priced.total}, {method.value})"
        )
        return order

    async def advance_status(
        self,
        order_id: int,
        acting_principal: Principal,
        requested_status: Optional[OrderStatus] = None,
    ) -> Order:
        """
        Move an order exactly one step forward.

        Args:
            order_id: Order to advance
            acting_principal: Administrator performing the change
            requested_status: Optional explicit target; must be the next status

        Raises:
            ForbiddenError: principal is not an administrator
            NotFoundError: order does not exist
            InvalidTransitionError: order already delivered, or the requested
                status is not the immediate successor
            ConflictError: another request advanced the order first
        """
        authorize(acting_principal, Action.ORDER_ADVANCE)

        order = await self.get(order_id)
        current = order.status
        if requested_status is None:
            target = next_status(current)
        else:
            target = validate_transition(current, requested_status)

        if not await self.repository.update_order_status(order_id, current, target):
            logger.warning(
                f"Order #{order_id} changed while advancing from '{current.value}'"
            )
            raise ConflictError(
                "Order status was changed by another request. Reload and try again."
            )

        logger.info(
            f"Order #{order_id} advanced {current.value} → {target.value} "
            f"by admin #{acting_principal.id}"
        )
        return await self.get(order_id)

    async def get(self, order_id: int) -> Order:
        """
        Load any order (administrative view).

        Raises:
            NotFoundError: order does not exist
        """
        order = await self.repository.find_order(order_id)
        if order is None:
            raise NotFoundError("Order not found.")
        return order

    async def get_for_client(self, order_id: int, client_id: int) -> Order:
        """
        Load an order on behalf of its owner.

        Raises:
            NotFoundError: order does not exist
            ForbiddenError: order belongs to another client
        """
        order = await self.get(order_id)
        if order.client_id != client_id:
            logger.info(f"Client #{client_id} denied access to order #{order_id}")
            raise ForbiddenError("You cannot access this order.")
        return order

    async def list_for_client(self, client_id: int) -> Sequence[Order]:
        """Orders of one client, newest first."""
        return await self.repository.list_orders_by_client(client_id)

    async def list_all(self) -> Sequence[Order]:
        """Every order, newest first."""
        return await self.repository.list_all_orders()
