"""Ephemeral (in-process) tier of the cache.

An insertion-ordered map bounded by an entry count. When a new key would
exceed the bound, the oldest inserted entry is evicted. Reads do not change
the order.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from cliniccache.domain.models.cache import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100


class MemoryStore:
    """FIFO-bounded key -> CacheEntry map."""

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        # dicts keep insertion order
        self._entries: Dict[str, CacheEntry[Any]] = {}

    def get(self, key: str) -> Optional[CacheEntry[Any]]:
        return self._entries.get(key)

    def put(self, entry: CacheEntry[Any], max_size: Optional[int] = None) -> None:
        """Stores an entry, evicting the oldest ones first if the store is full.

        Replacing an existing key never evicts another key; the replaced key
        moves to the newest position.
        """
        limit = max_size if max_size is not None else self.max_size
        if limit < 1:
            raise ValueError(f"max_size must be at least 1, got {limit}")
        if entry.key in self._entries:
            del self._entries[entry.key]
        else:
            # A smaller per-call limit may require more than one eviction
            while len(self._entries) >= limit:
                self._evict_oldest()
        self._entries[entry.key] = entry

    def _evict_oldest(self) -> None:
        oldest_key = next(iter(self._entries))
        del self._entries[oldest_key]
        logger.debug(f"Memory cache EVICTED oldest key: {oldest_key}")

    def delete(self, key: str) -> bool:
        """Removes a key. Returns True if it was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def keys(self) -> List[str]:
        return list(self._entries)

    def items(self) -> Iterator[Tuple[str, CacheEntry[Any]]]:
        """Iterates over a snapshot so callers may delete while looping."""
        return iter(list(self._entries.items()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
