"""
Pricing Resolver

Turns requested (item id, quantity) pairs into priced lines and an order
total. Unit prices always come from the catalog store; nothing the client
sends is used as a price. All arithmetic is done with ``Decimal`` rounded
to cents.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence

from uaifood.core.errors import NotFoundError, ValidationError
from uaifood.models import MAX_ID, Item

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

MAX_QUANTITY = 1000

# Largest amount a Numeric(10, 2) column stores
MAX_AMOUNT = Decimal("99999999.99")


def to_money(value) -> Decimal:
    """Convert a stored or computed amount to a two-decimal ``Decimal``."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class RequestedLine:
    """One line as requested by the client."""
    item_id: int
    quantity: int


@dataclass(frozen=True)
class ResolvedLine:
    """A requested line priced against the catalog."""
    item_id: int
    quantity: int
    unit_price: Decimal
    line_amount: Decimal


@dataclass(frozen=True)
class PricedOrder:
    """
    Result of pricing a whole order.

    Attributes:
        lines: Resolved lines, in request order
        total: Sum of all line amounts
    """
    lines: tuple[ResolvedLine, ...]
    total: Decimal


class PricingResolver:
    """
    Resolves authoritative prices from a catalog store.

    The catalog is any object exposing
    ``async find_items_by_ids(ids) -> Sequence[Item]``
    (``OrderRepository`` in production, a fake in unit tests).

    Example:
        >>> resolver = PricingResolver(repository)
        >>> priced = await resolver.compute_order([RequestedLine(1, 2)])
        >>> priced.total
        Decimal('37.80')
    """

    def __init__(self, catalog):
        self.catalog = catalog

    @staticmethod
    def _validate(requested_lines: Sequence[RequestedLine]) -> None:
        if not requested_lines:
            raise ValidationError("The order must contain at least one item.")
        for line in requested_lines:
            quantity = line.quantity
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise ValidationError("Quantity must be a positive integer.")
            if quantity > MAX_QUANTITY:
                raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY}.")
            item_id = line.item_id
            if isinstance(item_id, bool) or not isinstance(item_id, int) or not 1 <= item_id <= MAX_ID:
                raise ValidationError(f"Item id must be an integer between 1 and {MAX_ID}.")

    async def compute_order(self, requested_lines: Iterable[RequestedLine]) -> PricedOrder:
        """
        Price a set of requested lines.

        Args:
            requested_lines: (item id, quantity) pairs, at least one

        Returns:
            PricedOrder: resolved lines and exact total

        Raises:
            ValidationError: empty set, quantity out of range, bad item id
                or a total too large to store
            NotFoundError: an item id is not in the catalog
        """
        requested_lines = list(requested_lines)
        self._validate(requested_lines)

        item_ids = sorted({line.item_id for line in requested_lines})
        items: Sequence[Item] = await self.catalog.find_items_by_ids(item_ids)
        prices = {item.id: to_money(item.unit_price) for item in items}

        missing = [item_id for item_id in item_ids if item_id not in prices]
        if missing:
            raise NotFoundError(f"Item #{missing[0]} not found.")

        resolved = []
        for line in requested_lines:
            unit_price = prices[line.item_id]
            resolved.append(
                ResolvedLine(
                    item_id=line.item_id,
                    quantity=line.quantity,
                    unit_price=unit_price,
                    line_amount=to_money(unit_price * line.quantity),
                )
            )

        total = to_money(sum((line.line_amount for line in resolved), Decimal("0")))
        if total > MAX_AMOUNT:
            raise ValidationError(f"Order total cannot exceed {MAX_AMOUNT}.")
        logger.debug(f"Priced {len(resolved)} line(s): total {total}")

        return PricedOrder(lines=tuple(resolved), total=total)
