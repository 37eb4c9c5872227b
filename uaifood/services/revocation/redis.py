"""
Redis Token Blacklist

Shared revocation store used when ENV_MODE=staging or ENV_MODE=production.
Each revoked token is a key ``revoked:<jti>`` whose TTL equals the token's
remaining lifetime, so Redis drops the entry exactly when the token would
have expired anyway.

Requirements:
    - REDIS_URL must point to a reachable Redis instance
"""

import logging
from datetime import datetime
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from uaifood.core.config import get_settings
from uaifood.services.revocation.base import BaseTokenBlacklist

logger = logging.getLogger(__name__)


class RedisTokenBlacklist(BaseTokenBlacklist):
    """
    Redis-backed revocation store.

    Example:
        >>> blacklist = RedisTokenBlacklist()
        >>> await blacklist.revoke("3f2a...", claims.expires_at)
    """

    KEY_PREFIX = "revoked:"

    def __init__(self, client: Optional[aioredis.Redis] = None):
        """
        Initialize the Redis client from settings.

        Args:
            client: Pre-built client (tests); defaults to REDIS_URL
        """
        settings = get_settings()
        self._client = client or aioredis.Redis.from_url(
            settings.redis_url,
            socket_timeout=2,
            decode_responses=True,
        )
        logger.info("RedisTokenBlacklist initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "redis"

    def _key(self, token_id: str) -> str:
        return f"{self.KEY_PREFIX}{token_id}"

    async def revoke(self, token_id: str, expires_at: datetime) -> None:
        ttl = self.remaining_seconds(expires_at)
        if ttl <= 0:
            return
        await self._client.set(self._key(token_id), "1", ex=ttl)
        logger.debug(f"Redis: token {token_id[:8]}... revoked for {ttl}s")

    async def is_revoked(self, token_id: str) -> bool:
        return bool(await self._client.exists(self._key(token_id)))

    async def health_check(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        await self._client.aclose()
