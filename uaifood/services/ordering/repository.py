"""
Order Store

Thin persistence façade over an ``AsyncSession`` for the order workflow.
Every method either reads, or writes inside a single transaction that is
committed or rolled back before returning.
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.models import Item, Order, OrderLine, OrderStatus, PaymentMethod
from uaifood.services.ordering.pricing import PricedOrder
from uaifood.services.ordering.status import INITIAL_STATUS

logger = logging.getLogger(__name__)


class OrderRepository:
    """Relational access for orders, their lines and catalog prices."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def find_items_by_ids(self, ids: Sequence[int]) -> Sequence[Item]:
        if not ids:
            return []
        result = await self.session.execute(select(Item).where(Item.id.in_(ids)))
        return result.scalars().all()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def find_order(self, order_id: int) -> Optional[Order]:
        result = await self.session.execute(
            select(Order)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_orders_by_client(self, client_id: int) -> Sequence[Order]:
        result = await self.session.execute(
            select(Order)
            .where(Order.client_id == client_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return result.scalars().all()

    async def list_all_orders(self) -> Sequence[Order]:
        result = await self.session.execute(
            select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        )
        return result.scalars().all()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_order_with_lines(
        self,
        client_id: int,
        payment_method: PaymentMethod,
        priced: PricedOrder,
    ) -> Order:
        """
        Insert an order and all of its lines atomically.

        Either the order, every line and the computed total are committed
        together, or nothing is.
        """
        order = Order(
            client_id=client_id,
            payment_method=payment_method,
            status=INITIAL_STATUS,
            total=priced.total,
            lines=[
                OrderLine(item_id=line.item_id, quantity=line.quantity)
                for line in priced.lines
            ],
        )
        self.session.add(order)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return await self.find_order(order.id)

    async def update_order_status(
        self,
        order_id: int,
        from_status: OrderStatus,
        to_status: OrderStatus,
    ) -> bool:
        """
        Conditionally move an order from one status to another.

        The row is only updated if it still holds ``from_status``, so two
        concurrent advances cannot both succeed from the same state.

        Returns:
            bool: True if exactly this call performed the transition
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == from_status)
            .values(status=to_status)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return result.rowcount == 1
