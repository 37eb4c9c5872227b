"""
User Service

Registration, login/logout and profile management.

Security rules:
    - passwords are only ever stored as bcrypt hashes
    - self-registration always creates a CLIENT, whatever the payload says
    - clients may only read and edit their own record
    - only administrators may change a role
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.config import Settings
from uaifood.core.errors import ConflictError, ForbiddenError, NotFoundError, UnauthenticatedError
from uaifood.core.security import (
    TokenClaims,
    create_access_token,
    hash_password,
    verify_password,
)
from uaifood.models import User, UserRole
from uaifood.schemas import UserCreate, UserUpdate
from uaifood.services.access import Action, Principal, ensure_self_or_admin, is_allowed
from uaifood.services.revocation import BaseTokenBlacklist

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "E-mail is already in use by another user."


class UserService:
    """Users, credentials and sessions."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(EMAIL_IN_USE)

    async def _find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    # =========================================================================
    # REGISTRATION & SESSIONS
    # =========================================================================

    async def register(self, data: UserCreate) -> User:
        """
        Create a CLIENT account.

        Raises:
            ConflictError: e-mail already registered
        """
        email = data.email.lower()
        if await self._find_by_email(email) is not None:
            raise ConflictError(EMAIL_IN_USE)

        user = User(
            name=data.name,
            phone=data.phone,
            email=email,
            password=hash_password(data.password),
            role=UserRole.CLIENT,
        )
        self.session.add(user)
        await self._commit()
        logger.info(f"User #{user.id} registered as {user.role.value}")
        return await self.get(user.id)

    async def authenticate(self, email: str, password: str) -> tuple[User, str]:
        """
        Check credentials and issue an access token.

        Raises:
            UnauthenticatedError: unknown e-mail or wrong password
        """
        user = await self._find_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login attempt")
            raise UnauthenticatedError("Invalid credentials.")

        token = create_access_token(user.id, user.role)
        logger.info(f"User #{user.id} logged in")
        return user, token

    async def logout(self, claims: TokenClaims, blacklist: BaseTokenBlacklist) -> None:
        """Revoke the presented token until it expires."""
        await blacklist.revoke(claims.token_id, claims.expires_at)
        logger.info(f"User #{claims.user_id} logged out")

    # =========================================================================
    # PROFILES
    # =========================================================================

    async def get(self, user_id: int) -> User:
        user = await self.session.get(User, user_id, populate_existing=True)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    async def get_for(self, principal: Principal, user_id: int) -> User:
        ensure_self_or_admin(principal, user_id)
        return await self.get(user_id)

    async def list_all(self) -> Sequence[User]:
        result = await self.session.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc())
        )
        return result.scalars().all()

    async def update(self, principal: Principal, user_id: int, data: UserUpdate) -> User:
        """
        Update name, phone, e-mail and optionally password and role.

        Raises:
            ForbiddenError: client editing someone else, or changing a role
            NotFoundError: user does not exist
            ConflictError: e-mail taken by another user
        """
        ensure_self_or_admin(principal, user_id, "You do not have permission to update this user.")

        if data.role is not None and not is_allowed(Action.USER_SET_ROLE, principal.role):
            raise ForbiddenError("Only administrators can change a user's role.")

        user = await self.get(user_id)

        email = data.email.lower()
        existing = await self._find_by_email(email)
        if existing is not None and existing.id != user_id:
            raise ConflictError(EMAIL_IN_USE)

        user.name = data.name
        user.phone = data.phone
        user.email = email
        if data.password:
            user.password = hash_password(data.password)
        if data.role is not None and data.role != user.role:
            logger.info(
                f"Admin #{principal.id} changed role of user #{user_id} "
                f"{user.role.value} → {data.role.value}"
            )
            user.role = data.role

        await self._commit()
        return await self.get(user_id)

    # =========================================================================
    # BOOTSTRAP
    # =========================================================================

    async def ensure_admin(self, settings: Settings) -> User:
        """Create the bootstrap administrator if it does not exist yet."""
        admin = await self._find_by_email(settings.admin_email)
        if admin is not None:
            return admin

        admin = User(
            name=settings.admin_name,
            phone=settings.admin_phone,
            email=settings.admin_email.lower(),
            password=hash_password(settings.admin_password),
            role=UserRole.ADMIN,
        )
        self.session.add(admin)
        await self._commit()
        logger.info(f"Bootstrap administrator {admin.email} created")
        return admin
