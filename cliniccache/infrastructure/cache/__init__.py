"""Cache Implementation.

Memory tier, persistent tier, the CacheManager coordinating them and the
periodic cleanup sweep.
"""

from cliniccache.infrastructure.cache.cache_manager import CacheManager
from cliniccache.infrastructure.cache.cleanup_sweep import CleanupSweep

__all__ = ["CacheManager", "CleanupSweep"]
