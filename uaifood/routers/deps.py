"""
FastAPI Dependencies

Bearer-token authentication, policy enforcement and service wiring.
The transport layer turns the token into a ``Principal`` (id + role);
services never look at the token themselves.
"""

import logging
from typing import Annotated, Callable, Optional

from fastapi import Depends, Path
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.errors import UnauthenticatedError
from uaifood.core.security import TokenClaims, decode_access_token
from uaifood.database import get_db
from uaifood.models import MAX_ID
from uaifood.services.access import Action, Principal, authorize
from uaifood.services.addresses import AddressService
from uaifood.services.catalog import CatalogService
from uaifood.services.ordering import OrderService
from uaifood.services.revocation import BaseTokenBlacklist, get_token_blacklist
from uaifood.services.users import UserService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Path id that fits an Integer key column; anything else is a 400
EntityId = Annotated[int, Path(ge=1, le=MAX_ID)]


# =============================================================================
# AUTHENTICATION
# =============================================================================

async def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    blacklist: BaseTokenBlacklist = Depends(get_token_blacklist),
) -> TokenClaims:
    """
    Decode the ``Authorization: Bearer <token>`` header.

    Raises:
        UnauthenticatedError: header missing, token invalid/expired or revoked
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Token not provided.")

    claims = decode_access_token(credentials.credentials)

    if await blacklist.is_revoked(claims.token_id):
        raise UnauthenticatedError("Token has been revoked.")

    return claims


async def get_current_principal(
    claims: TokenClaims = Depends(get_token_claims),
) -> Principal:
    return Principal(id=claims.user_id, role=claims.role)


def require(action: Action) -> Callable:
    """
    Build a dependency that authenticates and enforces ``action``.

    Usage:
        @router.post("", dependencies=[Depends(require(Action.CATALOG_WRITE))])
    """
    async def dependency(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        return authorize(principal, action)

    return dependency


# =============================================================================
# SERVICES
# =============================================================================

def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderService:
    return OrderService(db)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_address_service(db: AsyncSession = Depends(get_db)) -> AddressService:
    return AddressService(db)
