"""
Token Blacklist Abstract Base Class

Defines the interface contract for revoked-token stores. A token is
revoked on logout and must stay rejected until it would have expired on
its own; after that the entry may be forgotten.

Design Pattern: Strategy Pattern
    - In-memory store for a single development process
    - Redis store shared by every API instance in staging/production
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class BaseTokenBlacklist(ABC):
    """
    Abstract base class for token revocation stores.

    Example:
        >>> blacklist = get_token_blacklist()
        >>> await blacklist.revoke(claims.token_id, claims.expires_at)
        >>> await blacklist.is_revoked(claims.token_id)
        True
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the backing store.

        Returns:
            str: Provider name (e.g., "memory", "redis")
        """
        pass

    @abstractmethod
    async def revoke(self, token_id: str, expires_at: datetime) -> None:
        """
        Mark a token as revoked until its expiry.

        Args:
            token_id: The token's ``jti`` claim
            expires_at: Absolute expiry of the token (UTC)
        """
        pass

    @abstractmethod
    async def is_revoked(self, token_id: str) -> bool:
        """
        Check whether a token was revoked.

        Args:
            token_id: The token's ``jti`` claim

        Returns:
            bool: True if the token must be rejected
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the backing store.

        Returns:
            bool: True if the store is reachable
        """
        pass

    async def close(self) -> None:
        """Release connections held by the store."""
        return None

    @staticmethod
    def remaining_seconds(expires_at: datetime) -> int:
        """Seconds left until ``expires_at`` (never negative)."""
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        delta = expires_at - datetime.now(timezone.utc)
        return max(int(delta.total_seconds()) + 1, 0)
