"""
Address Service

Every operation is keyed on the acting user's id; there is no way to
read or change another user's address, and no listing of addresses.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.errors import ConflictError, NotFoundError
from uaifood.models import Address
from uaifood.schemas import AddressCreate

logger = logging.getLogger(__name__)


class AddressService:
    """The single delivery address of a user."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_mine(self, user_id: int) -> Optional[Address]:
        result = await self.session.execute(
            select(Address).where(Address.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_mine(self, user_id: int) -> Address:
        address = await self.find_mine(user_id)
        if address is None:
            raise NotFoundError("No address registered.")
        return address

    async def create_mine(self, user_id: int, data: AddressCreate) -> Address:
        """
        Raises:
            ConflictError: the user already has an address
        """
        if await self.find_mine(user_id) is not None:
            raise ConflictError("You already have a registered address.")

        address = Address(user_id=user_id, **data.model_dump())
        self.session.add(address)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("You already have a registered address.")

        logger.info(f"Address #{address.id} created for user #{user_id}")
        return address

    async def update_mine(self, user_id: int, data: AddressCreate) -> Address:
        address = await self.get_mine(user_id)
        for field, value in data.model_dump().items():
            setattr(address, field, value)
        await self.session.commit()
        return address

    async def delete_mine(self, user_id: int) -> None:
        address = await self.get_mine(user_id)
        await self.session.delete(address)
        await self.session.commit()
        logger.info(f"Address of user #{user_id} deleted")
