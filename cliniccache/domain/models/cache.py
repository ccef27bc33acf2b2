"""Cache entry and diagnostics models.

A CacheEntry is immutable once written: a `set` on an existing key builds a
new entry with a fresh timestamp and ttl.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, TypeVar

from cliniccache.domain.exceptions import CorruptedEntryError

T = TypeVar("T")

_REQUIRED_FIELDS = ("data", "timestamp", "ttl", "key")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached payload with the instant it was written and its time-to-live."""
    key: str
    data: T
    timestamp: int  # ms since epoch
    ttl: int        # ms

    def is_valid(self, now: int) -> bool:
        """True while `now - timestamp < ttl`."""
        return now - self.timestamp < self.ttl

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "timestamp": self.timestamp, "ttl": self.ttl, "key": self.key}

    def serialize(self) -> str:
        """Encodes the entry in the persistent-tier wire format.

        Raises:
            TypeError, ValueError, RecursionError: If `data` is not JSON-serializable.
        """
        return json.dumps(self.to_dict(), allow_nan=False)

    @classmethod
    def from_dict(cls, raw: Any) -> "CacheEntry[Any]":
        """Builds an entry from a decoded wire object.

        Raises:
            CorruptedEntryError: If `raw` does not conform to the wire format.
        """
        if not isinstance(raw, dict):
            raise CorruptedEntryError(f"Expected a JSON object, got {type(raw).__name__}")
        missing = [name for name in _REQUIRED_FIELDS if name not in raw]
        if missing:
            raise CorruptedEntryError(f"Serialized entry is missing fields: {', '.join(missing)}")
        timestamp, ttl, key = raw["timestamp"], raw["ttl"], raw["key"]
        for name, value in (("timestamp", timestamp), ("ttl", ttl)):
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise CorruptedEntryError(f"Field '{name}' must be a number, got {value!r}")
            # json.loads accepts Infinity, NaN and overflowing literals
            if isinstance(value, float) and not math.isfinite(value):
                raise CorruptedEntryError(f"Field '{name}' must be finite, got {value!r}")
        if not isinstance(key, str):
            raise CorruptedEntryError(f"Field 'key' must be a string, got {key!r}")
        return cls(key=key, data=raw["data"], timestamp=int(timestamp), ttl=int(ttl))

    @classmethod
    def deserialize(cls, payload: str) -> "CacheEntry[Any]":
        """Decodes a persistent-tier payload.

        Raises:
            CorruptedEntryError: If the payload is not valid JSON or not a valid entry.
        """
        try:
            raw = json.loads(payload)
        except (TypeError, ValueError, RecursionError) as e:
            raise CorruptedEntryError(f"Unparseable cache payload: {e}") from e
        return cls.from_dict(raw)


@dataclass
class CacheStats:
    """Counts and key lists per tier. Diagnostic only."""
    memory_size: int = 0
    persistent_size: int = 0
    memory_keys: List[str] = field(default_factory=list)
    persistent_keys: List[str] = field(default_factory=list)


@dataclass
class CleanupReport:
    """Number of entries a cleanup pass removed from each tier."""
    memory_removed: int = 0
    persistent_removed: int = 0

    @property
    def total(self) -> int:
        return self.memory_removed + self.persistent_removed
