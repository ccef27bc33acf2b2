"""Persistent tier of the cache.

Stores serialized CacheEntry blobs in a KeyValueStorage under namespaced keys
(`cache_<key>`). Every storage or decoding failure is absorbed here: writes
become no-ops and reads become misses, so the cache never fails its caller.
"""

import logging
from typing import Any, List, Optional

from cliniccache.domain.exceptions import CorruptedEntryError, StorageError
from cliniccache.domain.interfaces.storage import KeyValueStorage
from cliniccache.domain.models.cache import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "cache_"

# Backends are expected to raise StorageError, but disk-backed ones may leak OSError
_STORAGE_ERRORS = (StorageError, OSError)


class PersistentStore:
    """Namespaced adapter that serializes entries into a durable store."""

    def __init__(self, storage: KeyValueStorage, prefix: str = DEFAULT_PREFIX):
        self.storage = storage
        self.prefix = prefix

    def namespaced(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def write(self, entry: CacheEntry[Any]) -> bool:
        """Serializes and stores an entry. Returns False if the write was skipped."""
        try:
            payload = entry.serialize()
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning(f"Failed to serialize cache entry '{entry.key}', persistent write skipped: {e}")
            return False
        try:
            self.storage.set(self.namespaced(entry.key), payload)
        except _STORAGE_ERRORS as e:
            logger.warning(f"Failed to store '{entry.key}' in persistent cache: {e}")
            return False
        return True

    def read(self, key: str) -> Optional[CacheEntry[Any]]:
        """Loads an entry. Corrupted payloads are deleted and reported as absent."""
        namespaced_key = self.namespaced(key)
        try:
            payload = self.storage.get(namespaced_key)
        except _STORAGE_ERRORS as e:
            logger.warning(f"Failed to read '{key}' from persistent cache: {e}")
            return None
        if payload is None:
            return None
        try:
            return CacheEntry.deserialize(payload)
        except CorruptedEntryError as e:
            logger.warning(f"Corrupted persistent cache entry '{key}': {e}. Removing.")
            self._delete_namespaced(namespaced_key)
            return None

    def delete(self, key: str) -> None:
        self._delete_namespaced(self.namespaced(key))

    def _delete_namespaced(self, namespaced_key: str) -> bool:
        try:
            self.storage.remove(namespaced_key)
        except _STORAGE_ERRORS as e:
            logger.warning(f"Failed to remove '{namespaced_key}' from persistent cache: {e}")
            return False
        return True

    def namespaced_keys(self) -> List[str]:
        """Storage keys under this store's prefix. Empty if the storage cannot be listed."""
        try:
            return [k for k in self.storage.keys() if k.startswith(self.prefix)]
        except _STORAGE_ERRORS as e:
            logger.warning(f"Failed to list persistent cache keys: {e}")
            return []

    def keys(self) -> List[str]:
        """Cache keys (prefix stripped) currently in the persistent tier."""
        return [k[len(self.prefix):] for k in self.namespaced_keys()]

    def clear(self) -> int:
        """Removes every namespaced key, leaving other storage keys untouched."""
        removed = 0
        for namespaced_key in self.namespaced_keys():
            if self._delete_namespaced(namespaced_key):
                removed += 1
        return removed

    def purge(self, now: int) -> int:
        """Removes expired and unparseable entries. Returns how many were removed."""
        removed = 0
        for namespaced_key in self.namespaced_keys():
            try:
                payload = self.storage.get(namespaced_key)
            except _STORAGE_ERRORS as e:
                logger.warning(f"Failed to read '{namespaced_key}' during cleanup: {e}")
                continue
            if payload is None:
                continue
            try:
                entry = CacheEntry.deserialize(payload)
            except CorruptedEntryError:
                logger.debug(f"Cleanup removing corrupted entry: {namespaced_key}")
                if self._delete_namespaced(namespaced_key):
                    removed += 1
                continue
            if not entry.is_valid(now):
                if self._delete_namespaced(namespaced_key):
                    removed += 1
        return removed

    def __len__(self) -> int:
        return len(self.namespaced_keys())
