"""
Menu Catalog Service

CRUD for categories and items. Deletes are restricted: a category that
still has items, or an item referenced by any order line, cannot be
removed (``ConflictError``).
"""

import logging
from typing import Sequence

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.errors import ConflictError, NotFoundError
from uaifood.models import Category, Item, OrderLine
from uaifood.schemas import CategoryCreate, ItemCreate

logger = logging.getLogger(__name__)


class CatalogService:
    """Categories and menu items."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Catalog integrity error: {e.orig}")
            raise ConflictError("Operation violates catalog references.")

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def list_categories(self) -> Sequence[Category]:
        result = await self.session.execute(select(Category).order_by(Category.id))
        return result.scalars().all()

    async def get_category(self, category_id: int) -> Category:
        category = await self.session.get(Category, category_id, populate_existing=True)
        if category is None:
            raise NotFoundError("Category not found.")
        return category

    async def create_category(self, data: CategoryCreate) -> Category:
        category = Category(description=data.description)
        self.session.add(category)
        await self._commit()
        logger.info(f"Category #{category.id} '{category.description}' created")
        return await self.get_category(category.id)

    async def update_category(self, category_id: int, data: CategoryCreate) -> Category:
        category = await self.get_category(category_id)
        category.description = data.description
        await self._commit()
        return await self.get_category(category_id)

    async def delete_category(self, category_id: int) -> None:
        category = await self.get_category(category_id)

        item_count = await self.session.scalar(
            select(func.count(Item.id)).where(Item.category_id == category_id)
        )
        if item_count:
            raise ConflictError(
                f"Category has {item_count} item(s) and cannot be deleted."
            )

        await self.session.delete(category)
        await self._commit()
        logger.info(f"Category #{category_id} deleted")

    # =========================================================================
    # ITEMS
    # =========================================================================

    async def list_items(self) -> Sequence[Item]:
        result = await self.session.execute(select(Item).order_by(Item.id))
        return result.scalars().all()

    async def get_item(self, item_id: int) -> Item:
        item = await self.session.get(Item, item_id, populate_existing=True)
        if item is None:
            raise NotFoundError("Item not found.")
        return item

    async def _ensure_category(self, category_id: int) -> None:
        if await self.session.get(Category, category_id) is None:
            raise NotFoundError("Category not found.")

    async def create_item(self, data: ItemCreate) -> Item:
        await self._ensure_category(data.category_id)
        item = Item(
            description=data.description,
            unit_price=data.unit_price,
            image_url=str(data.image_url) if data.image_url else None,
            category_id=data.category_id,
        )
        self.session.add(item)
        await self._commit()
        logger.info(f"Item #{item.id} '{item.description}' created at {item.unit_price}")
        return await self.get_item(item.id)

    async def update_item(self, item_id: int, data: ItemCreate) -> Item:
        item = await self.get_item(item_id)
        await self._ensure_category(data.category_id)

        item.description = data.description
        item.unit_price = data.unit_price
        item.image_url = str(data.image_url) if data.image_url else None
        item.category_id = data.category_id
        await self._commit()
        return await self.get_item(item_id)

    async def delete_item(self, item_id: int) -> None:
        item = await self.get_item(item_id)

        line_count = await self.session.scalar(
            select(func.count(OrderLine.id)).where(OrderLine.item_id == item_id)
        )
        if line_count:
            raise ConflictError("Item is referenced by existing orders and cannot be deleted.")

        await self.session.delete(item)
        await self._commit()
        logger.info(f"Item #{item_id} deleted")
