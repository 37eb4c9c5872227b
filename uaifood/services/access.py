"""
Access Policy

Maps (action, role) to allow/deny. Roles form the closed ``UserRole``
enum and every role is handled explicitly; an unknown role is a
programming error, not a silent deny.

Ownership (a client may only see its own orders, address and profile)
is checked by the services that load the resource; this module only
answers "may this role attempt the action at all".
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from uaifood.core.errors import ForbiddenError, UnauthenticatedError
from uaifood.models import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """
    The authenticated actor of a request.

    Attributes:
        id: User id
        role: Role carried by the access token
    """
    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


class Action(str, enum.Enum):
    """Operations guarded by the policy."""
    # Orders
    ORDER_CREATE = "order:create"
    ORDER_LIST_OWN = "order:list-own"
    ORDER_VIEW_OWN = "order:view-own"
    ORDER_LIST_ALL = "order:list-all"
    ORDER_LIST_BY_CLIENT = "order:list-by-client"
    ORDER_VIEW_ANY = "order:view-any"
    ORDER_ADVANCE = "order:advance"
    # Catalog
    CATALOG_READ = "catalog:read"
    CATALOG_WRITE = "catalog:write"
    # Address (always scoped to the principal)
    ADDRESS_MANAGE_OWN = "address:manage-own"
    # Users
    USER_SESSION = "user:session"
    USER_LIST = "user:list"
    USER_VIEW = "user:view"
    USER_UPDATE = "user:update"
    USER_SET_ROLE = "user:set-role"


CLIENT_ACTIONS = frozenset({
    Action.ORDER_CREATE,
    Action.ORDER_LIST_OWN,
    Action.ORDER_VIEW_OWN,
    Action.CATALOG_READ,
    Action.ADDRESS_MANAGE_OWN,
    Action.USER_SESSION,
    Action.USER_VIEW,
    Action.USER_UPDATE,
})

ADMIN_ACTIONS = frozenset({
    Action.ORDER_LIST_ALL,
    Action.ORDER_LIST_BY_CLIENT,
    Action.ORDER_VIEW_ANY,
    Action.ORDER_ADVANCE,
    Action.CATALOG_READ,
    Action.CATALOG_WRITE,
    Action.ADDRESS_MANAGE_OWN,
    Action.USER_SESSION,
    Action.USER_LIST,
    Action.USER_VIEW,
    Action.USER_UPDATE,
    Action.USER_SET_ROLE,
})


def is_allowed(action: Action, role: UserRole) -> bool:
    """Return True if ``role`` may perform ``action``."""
    if role is UserRole.ADMIN:
        return action in ADMIN_ACTIONS
    if role is UserRole.CLIENT:
        return action in CLIENT_ACTIONS
    raise ValueError(f"Unhandled role: {role!r}")


def authorize(principal: Optional[Principal], action: Action) -> Principal:
    """
    Enforce the policy for one action.

    Args:
        principal: Authenticated actor, or None when no credential was sent
        action: The operation being attempted

    Returns:
        Principal: The same principal, for chaining in dependencies

    Raises:
        UnauthenticatedError: No principal at all
        ForbiddenError: Role may not perform the action
    """
    if principal is None:
        raise UnauthenticatedError()
    if not is_allowed(action, principal.role):
        logger.info(
            f"Denied {action.value} for user #{principal.id} ({principal.role.value})"
        )
        raise ForbiddenError()
    return principal


def ensure_self_or_admin(principal: Principal, user_id: int, message: Optional[str] = None) -> None:
    """
    Clients may only act on their own user record; administrators on any.

    Raises:
        ForbiddenError: A client targeting another user
    """
    if principal.is_admin:
        return
    if principal.id != user_id:
        raise ForbiddenError(message or "You do not have permission to access this user.")
