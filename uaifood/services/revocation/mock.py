"""
In-Memory Token Blacklist

Process-local revocation store used in development mode
(ENV_MODE=development) and in tests. Entries are dropped once the token
they refer to has expired. Not shared between processes: run staging
and production with the Redis store.
"""

import logging
from datetime import datetime, timezone

from uaifood.services.revocation.base import BaseTokenBlacklist

logger = logging.getLogger(__name__)


class MemoryTokenBlacklist(BaseTokenBlacklist):
    """
    Dict-backed revocation store keyed by token id.

    Attributes:
        _entries: token id -> expiry (UTC)
    """

    def __init__(self):
        self._entries: dict[str, datetime] = {}
        logger.info("MemoryTokenBlacklist initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "memory"

    def _purge_expired(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [tid for tid, exp in self._entries.items() if exp <= now]
        for tid in expired:
            del self._entries[tid]

    async def revoke(self, token_id: str, expires_at: datetime) -> None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        self._purge_expired()
        if expires_at <= datetime.now(timezone.utc):
            return
        self._entries[token_id] = expires_at
        logger.debug(f"Memory: token {token_id[:8]}... revoked until {expires_at.isoformat()}")

    async def is_revoked(self, token_id: str) -> bool:
        self._purge_expired()
        return token_id in self._entries

    async def health_check(self) -> bool:
        return True

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._entries)
