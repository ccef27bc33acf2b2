"""Interface for the dual-tier cache.

Defines the contract for storing, retrieving, and managing cached data
across the memory and persistent tiers with TTL expiration.
"""

import abc
from typing import Any, Optional, Union

from cliniccache.domain.models.cache import CacheStats, CleanupReport
from cliniccache.domain.models.common import StorageTier

TierArg = Union[StorageTier, str]


class CacheService(abc.ABC):
    """Abstract Base Class for caching operations."""

    @abc.abstractmethod
    def set(
        self,
        key: str,
        data: Any,
        ttl: Optional[int] = None,
        tier: TierArg = StorageTier.BOTH,
        max_size: Optional[int] = None,
    ) -> None:
        """Stores an item in the specified tier(s).

        Args:
            key: The cache key to store the item under.
            data: JSON-serializable payload.
            ttl: Time-to-live in milliseconds (uses the default if None).
            tier: The tier(s) to write ('memory', 'persistent', 'both').
            max_size: Memory tier capacity for this write (uses the default if None).
        """
        pass

    @abc.abstractmethod
    def get(self, key: str, tier: TierArg = StorageTier.BOTH) -> Optional[Any]:
        """Retrieves an item, checking memory before the persistent tier.

        Returns:
            The cached payload if found and not expired, otherwise None.
        """
        pass

    @abc.abstractmethod
    def remove(self, key: str) -> None:
        """Deletes an item from every tier."""
        pass

    @abc.abstractmethod
    def clear(self, tier: TierArg = StorageTier.BOTH) -> None:
        """Removes all cache entries from the specified tier(s)."""
        pass

    @abc.abstractmethod
    def stats(self) -> CacheStats:
        """Returns entry counts and keys per tier."""
        pass

    @abc.abstractmethod
    def cleanup(self) -> CleanupReport:
        """Purges expired (and, in the persistent tier, corrupted) entries."""
        pass
