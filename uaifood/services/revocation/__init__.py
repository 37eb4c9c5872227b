"""
Token Blacklist Factory

Provides a single entry point for obtaining the revocation store.

Usage:
    from uaifood.services.revocation import get_token_blacklist

    blacklist = get_token_blacklist()
    if await blacklist.is_revoked(claims.token_id):
        ...

Environment Switching:
    - ENV_MODE=development → MemoryTokenBlacklist (single process)
    - ENV_MODE=staging / production → RedisTokenBlacklist (shared)
"""

import logging
from functools import lru_cache

from uaifood.core.config import get_settings
from uaifood.services.revocation.base import BaseTokenBlacklist
from uaifood.services.revocation.mock import MemoryTokenBlacklist
from uaifood.services.revocation.redis import RedisTokenBlacklist

logger = logging.getLogger(__name__)


@lru_cache()
def get_token_blacklist() -> BaseTokenBlacklist:
    """
    Get the configured token blacklist instance.

    The instance is cached so every request in the process consults the
    same store.

    Returns:
        BaseTokenBlacklist: Configured revocation store
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Token Blacklist: Using MemoryTokenBlacklist (development mode)")
        return MemoryTokenBlacklist()

    logger.info(
        f"Token Blacklist: Using RedisTokenBlacklist "
        f"({settings.env_mode.value} mode)"
    )
    return RedisTokenBlacklist()


def reset_token_blacklist() -> None:
    """
    Clear the cached blacklist instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_token_blacklist.cache_clear()
    logger.debug("Token blacklist cache cleared")


__all__ = [
    "get_token_blacklist",
    "reset_token_blacklist",
    "BaseTokenBlacklist",
    "MemoryTokenBlacklist",
    "RedisTokenBlacklist",
]
