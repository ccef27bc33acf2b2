"""Interface for durable key-value storage backends.

The persistent cache tier only needs string values under string keys, plus
key enumeration for bulk clear and the cleanup sweep. Backends may be shared
with the host application, so callers must filter keys by their own prefix.
"""

import abc
from typing import List, Optional


class KeyValueStorage(abc.ABC):
    """Abstract Base Class for a durable string key-value store."""

    @abc.abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Returns the stored string, or None if the key is absent."""
        pass

    @abc.abstractmethod
    def set(self, key: str, value: str) -> None:
        """Stores a value.

        Raises:
            StorageError: If the backend refuses the write (quota, permissions).
        """
        pass

    @abc.abstractmethod
    def remove(self, key: str) -> None:
        """Deletes a key. Missing keys are ignored."""
        pass

    @abc.abstractmethod
    def keys(self) -> List[str]:
        """Returns a snapshot of every key in the store."""
        pass
