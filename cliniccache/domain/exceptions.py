"""Exception types raised by storage backends and entry decoding.

None of these escape the CacheManager: the persistent store adapter converts
them into misses (reads) or skipped writes.
"""


class CacheError(Exception):
    """Base class for cache-related errors."""


class StorageError(CacheError):
    """Raised by a KeyValueStorage backend when an operation cannot complete."""


class StorageQuotaExceeded(StorageError):
    """Raised when the durable store refuses a write because it is full."""

    def __init__(self, key: str, quota: int):
        self.key = key
        self.quota = quota
        super().__init__(f"Storage quota of {quota} entries exceeded while writing '{key}'")


class CorruptedEntryError(CacheError, ValueError):
    """Raised when a stored payload is not a valid serialized cache entry."""
