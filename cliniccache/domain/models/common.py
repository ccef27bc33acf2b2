"""Defines common Value Objects used across the cache contexts.

These objects represent simple values like cache keys, owner identifiers
and storage tiers, ensuring consistency and type safety.
"""

import enum
from typing import NewType, Union

# === Core Value Objects ===

CacheKey = NewType("CacheKey", str)        # Unique key within a store's namespace
OwnerId = NewType("OwnerId", str)          # Id of the entity owning cached records (dentist, patient, user)
Milliseconds = NewType("Milliseconds", int)


class StorageTier(str, enum.Enum):
    """Which tier(s) an operation touches."""

    MEMORY = "memory"
    PERSISTENT = "persistent"
    BOTH = "both"

    @property
    def includes_memory(self) -> bool:
        return self in (StorageTier.MEMORY, StorageTier.BOTH)

    @property
    def includes_persistent(self) -> bool:
        return self in (StorageTier.PERSISTENT, StorageTier.BOTH)

    @classmethod
    def parse(cls, value: Union[str, "StorageTier"]) -> "StorageTier":
        """Parses a tier name, accepting 'localStorage' as an alias of 'persistent'.

        Raises:
            ValueError: If the name is not a known tier.
        """
        if isinstance(value, StorageTier):
            return value
        normalized = str(value).strip().lower()
        if normalized in ("localstorage", "local_storage", "disk"):
            return cls.PERSISTENT
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Invalid storage tier '{value}'. Choose one of: {valid}.") from None


# === Time helpers ===
SECOND_MS = Milliseconds(1000)
MINUTE_MS = Milliseconds(60 * SECOND_MS)
