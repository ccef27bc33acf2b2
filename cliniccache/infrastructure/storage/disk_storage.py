"""Concrete KeyValueStorage backends.

`DiskStorage` keeps values in a `diskcache` directory so they survive process
restarts. `InMemoryStorage` is a dict-backed stand-in used by tests and as the
fallback when the disk directory cannot be opened.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import diskcache as dc

from cliniccache.domain.exceptions import StorageError, StorageQuotaExceeded
from cliniccache.domain.interfaces.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".cliniccache" / "storage"

# diskcache surfaces sqlite and filesystem failures directly
_BACKEND_ERRORS = (OSError, sqlite3.Error, dc.Timeout)


class DiskStorage(KeyValueStorage):
    """Durable string store on top of `diskcache.Cache`."""

    def __init__(self, directory: Union[str, Path] = DEFAULT_CACHE_DIR, timeout: float = 1.0):
        """Opens (creating if needed) the storage directory.

        Raises:
            StorageError: If the directory cannot be created or opened.
        """
        self.directory = Path(directory).expanduser()
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # No expire: TTLs live inside the serialized entries
            self._cache = dc.Cache(str(self.directory), timeout=timeout)
        except _BACKEND_ERRORS as e:
            logger.error(f"Failed to open disk storage at {self.directory}: {e}", exc_info=True)
            raise StorageError(f"Cannot open disk storage at {self.directory}: {e}") from e
        logger.info(f"Initialized disk storage at: {self._cache.directory}")

    def get(self, key: str) -> Optional[str]:
        try:
            value: Any = self._cache.get(key, default=None)
        except _BACKEND_ERRORS as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e
        if value is None or isinstance(value, str):
            return value
        # Host application may store non-string values under its own keys
        return str(value)

    def set(self, key: str, value: str) -> None:
        try:
            stored = self._cache.set(key, value)
        except _BACKEND_ERRORS as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e
        if not stored:
            raise StorageError(f"Disk storage refused write for '{key}'")

    def remove(self, key: str) -> None:
        try:
            self._cache.delete(key)
        except _BACKEND_ERRORS as e:
            raise StorageError(f"Failed to delete '{key}': {e}") from e

    def keys(self) -> List[str]:
        try:
            return [k for k in self._cache.iterkeys() if isinstance(k, str)]
        except _BACKEND_ERRORS as e:
            raise StorageError(f"Failed to list keys: {e}") from e

    def close(self) -> None:
        self._cache.close()
        logger.debug(f"Closed disk storage at {self.directory}")


class InMemoryStorage(KeyValueStorage):
    """Dict-backed storage with an optional entry quota."""

    def __init__(self, quota: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self.quota = quota

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota is not None and key not in self._data and len(self._data) >= self.quota:
            raise StorageQuotaExceeded(key, self.quota)
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


def open_storage(directory: Union[str, Path] = DEFAULT_CACHE_DIR) -> KeyValueStorage:
    """Opens disk storage, degrading to in-memory storage if the disk is unavailable."""
    try:
        return DiskStorage(directory)
    except StorageError as e:
        logger.warning(f"Persistent tier falls back to process memory: {e}")
        return InMemoryStorage()
