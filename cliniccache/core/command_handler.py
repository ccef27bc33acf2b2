"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), validates their
arguments and delegates to the cache, the domain wrappers and the cleanup
sweep. Failures are reported through the UserInterface, never raised.
"""

import json
import logging
from typing import Optional

from cliniccache.core.services.profile_cache import ProfileCache
from cliniccache.domain.interfaces.cache import CacheService
from cliniccache.domain.interfaces.user_interface import UserInterface
from cliniccache.domain.models.common import SECOND_MS, OwnerId, StorageTier
from cliniccache.infrastructure.cache.cleanup_sweep import CleanupSweep

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to appropriate services."""

    def __init__(
        self,
        cache_service: CacheService,
        profile_cache: ProfileCache,
        cleanup_sweep: CleanupSweep,
        ui: UserInterface,
    ):
        self.cache_service = cache_service
        self.profile_cache = profile_cache
        self.cleanup_sweep = cleanup_sweep
        self.ui = ui

    def _parse_tier(self, tier: str) -> Optional[StorageTier]:
        try:
            return StorageTier.parse(tier)
        except ValueError as e:
            self.ui.display_error(str(e))
            return None

    def handle_stats(self) -> None:
        logger.info("Handling 'stats' command")
        try:
            self.ui.display_stats(self.cache_service.stats())
        except Exception as e:
            logger.error(f"Stats command failed: {e}", exc_info=True)
            self.ui.display_error(f"Failed to read cache statistics: {e}")

    def handle_get(self, key: str, tier: str = StorageTier.BOTH.value) -> None:
        logger.info(f"Handling 'get' command for key: {key}")
        selected = self._parse_tier(tier)
        if selected is None:
            return
        value = self.cache_service.get(key, tier=selected)
        if value is None:
            self.ui.display_warning(f"No cached data for '{key}'.")
            return
        self.ui.display_value(key, value)

    def handle_set(self, key: str, raw_value: str, ttl_seconds: Optional[float] = None,
                   tier: str = StorageTier.BOTH.value) -> None:
        """Handles the 'set' command. `raw_value` must be JSON."""
        logger.info(f"Handling 'set' command for key: {key}")
        selected = self._parse_tier(tier)
        if selected is None:
            return
        try:
            value = json.loads(raw_value)
        except (ValueError, RecursionError) as e:
            self.ui.display_error(f"Value must be valid JSON: {e}")
            return
        ttl = None
        if ttl_seconds is not None:
            if ttl_seconds <= 0:
                self.ui.display_error("TTL must be a positive number of seconds.")
                return
            ttl = int(ttl_seconds * SECOND_MS)
        try:
            self.cache_service.set(key, value, ttl=ttl, tier=selected)
        except ValueError as e:
            self.ui.display_error(f"Set command failed: {e}")
            return
        self.ui.display_info(f"Cached '{key}' in tier '{selected.value}'.")

    def handle_remove(self, key: str) -> None:
        logger.info(f"Handling 'remove' command for key: {key}")
        self.cache_service.remove(key)
        self.ui.display_info(f"Removed '{key}' from all tiers.")

    def handle_invalidate(self, owner_id: str) -> None:
        logger.info(f"Handling 'invalidate' command for owner: {owner_id}")
        self.profile_cache.invalidate_owner_caches(OwnerId(owner_id))
        self.ui.display_info(f"Invalidated cached profiles and appointments for owner '{owner_id}'.")

    def handle_clear(self, tier: str = StorageTier.BOTH.value) -> None:
        logger.info(f"Handling 'clear' command for tier: {tier}")
        selected = self._parse_tier(tier)
        if selected is None:
            return
        self.cache_service.clear(selected)
        self.ui.display_info(f"Cache tier '{selected.value}' cleared successfully.")

    def handle_cleanup(self) -> None:
        logger.info("Handling 'cleanup' command")
        report = self.cleanup_sweep.run_once()
        self.ui.display_info(
            f"Cleanup removed {report.total} entries "
            f"(memory: {report.memory_removed}, persistent: {report.persistent_removed})."
        )
