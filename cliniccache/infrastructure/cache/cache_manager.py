"""Concrete implementation of the dual-tier Cache Service.

Coordinates the memory tier (MemoryStore) and the persistent tier
(PersistentStore) behind a single set/get/remove/clear contract. Expiration
is checked lazily on read and by the cleanup sweep, never by a per-entry timer.

One CacheManager is built by the composition root and passed to everything
that needs it; tests construct their own instances.
"""

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Optional

from cliniccache.domain.interfaces.cache import CacheService, TierArg
from cliniccache.domain.interfaces.storage import KeyValueStorage
from cliniccache.domain.models.cache import CacheEntry, CacheStats, CleanupReport
from cliniccache.domain.models.common import MINUTE_MS, StorageTier
from cliniccache.infrastructure.cache.memory_store import DEFAULT_MAX_SIZE, MemoryStore
from cliniccache.infrastructure.cache.persistent_store import DEFAULT_PREFIX, PersistentStore

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 5 * MINUTE_MS


def now_ms() -> int:
    """Wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class CacheManager(CacheService):
    """Memory + persistent TTL cache with FIFO eviction in the memory tier."""

    def __init__(
        self,
        storage: KeyValueStorage,
        default_ttl: int = DEFAULT_TTL_MS,
        max_size: int = DEFAULT_MAX_SIZE,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], int] = now_ms,
    ):
        """Initializes the cache.

        Args:
            storage: Durable key-value store backing the persistent tier.
            default_ttl: TTL in milliseconds used when `set` is given none.
            max_size: Default memory tier capacity (entries).
            prefix: Namespace prefix for persistent keys.
            clock: Returns the current time in milliseconds.
        """
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        self.default_ttl = default_ttl
        self.memory = MemoryStore(max_size=max_size)
        self.persistent = PersistentStore(storage, prefix=prefix)
        self._clock = clock
        logger.info(
            f"CacheManager initialized. memory(max={max_size}), "
            f"persistent(prefix='{prefix}'), default_ttl={default_ttl}ms"
        )

    def set(
        self,
        key: str,
        data: Any,
        ttl: Optional[int] = None,
        tier: TierArg = StorageTier.BOTH,
        max_size: Optional[int] = None,
    ) -> None:
        """Writes an entry to the requested tier(s).

        A failing persistent write is logged and skipped; the memory write
        still happens.

        Raises:
            ValueError: If `ttl`, `max_size` or `tier` is invalid.
        """
        selected = StorageTier.parse(tier)
        effective_ttl = self.default_ttl if ttl is None else ttl
        if effective_ttl <= 0:
            raise ValueError(f"ttl must be positive, got {effective_ttl}")
        entry = CacheEntry(key=key, data=data, timestamp=self._clock(), ttl=effective_ttl)

        if selected.includes_memory:
            self.memory.put(entry, max_size=max_size)
        if selected.includes_persistent:
            self.persistent.write(entry)
        logger.debug(f"Cache PUT key: {key} tier={selected.value} ttl={effective_ttl}ms")

    def get(self, key: str, tier: TierArg = StorageTier.BOTH) -> Optional[Any]:
        """Reads an entry, memory first. Expired entries are deleted from the tier that held them."""
        selected = StorageTier.parse(tier)
        now = self._clock()

        if selected.includes_memory:
            memory_entry = self.memory.get(key)
            if memory_entry is not None:
                if memory_entry.is_valid(now):
                    logger.debug(f"Memory cache HIT for key: {key}")
                    return memory_entry.data
                self.memory.delete(key)
                logger.debug(f"Memory cache EXPIRED key: {key}")

        if selected.includes_persistent:
            stored = self.persistent.read(key)
            if stored is not None:
                if stored.is_valid(now):
                    logger.debug(f"Persistent cache HIT for key: {key}")
                    # Promotion keeps the original timestamp, so it never extends life
                    if selected is StorageTier.BOTH:
                        self.memory.put(stored if stored.key == key else replace(stored, key=key))
                    return stored.data
                self.persistent.delete(key)
                logger.debug(f"Persistent cache EXPIRED key: {key}. Removed.")

        logger.debug(f"Cache MISS for key: {key} (tier={selected.value})")
        return None

    def remove(self, key: str) -> None:
        self.memory.delete(key)
        self.persistent.delete(key)
        logger.debug(f"Cache REMOVE key: {key}")

    def clear(self, tier: TierArg = StorageTier.BOTH) -> None:
        selected = StorageTier.parse(tier)
        if selected.includes_memory:
            count = self.memory.clear()
            logger.info(f"Cleared memory cache. Removed {count} items.")
        if selected.includes_persistent:
            count = self.persistent.clear()
            logger.info(f"Cleared persistent cache. Removed {count} items.")

    def stats(self) -> CacheStats:
        persistent_keys = self.persistent.keys()
        return CacheStats(
            memory_size=len(self.memory),
            persistent_size=len(persistent_keys),
            memory_keys=self.memory.keys(),
            persistent_keys=persistent_keys,
        )

    def cleanup(self) -> CleanupReport:
        now = self._clock()
        report = CleanupReport()
        for key, entry in self.memory.items():
            if not entry.is_valid(now):
                self.memory.delete(key)
                report.memory_removed += 1
        report.persistent_removed = self.persistent.purge(now)
        logger.debug(
            f"Cleanup finished: memory_removed={report.memory_removed}, "
            f"persistent_removed={report.persistent_removed}"
        )
        return report
