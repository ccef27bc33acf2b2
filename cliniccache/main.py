"""Main entry point for the clinic-cache application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import logging
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

from cliniccache.core.command_handler import CommandHandler
from cliniccache.core.services.profile_cache import ProfileCache, build_policies
from cliniccache.infrastructure.cache.cache_manager import CacheManager
from cliniccache.infrastructure.cache.cleanup_sweep import CleanupSweep
from cliniccache.infrastructure.cli.display import ConsoleDisplay
from cliniccache.infrastructure.config.settings import (
    get_cache_dir,
    get_cache_prefix,
    get_config,
    get_default_ttl_ms,
    get_max_memory_size,
    get_policy_overrides,
    get_sweep_interval_seconds,
    load_configuration,
)
from cliniccache.infrastructure.monitoring.logger_setup import setup_logging
from cliniccache.infrastructure.storage.disk_storage import open_storage

logger = logging.getLogger(__name__)


def create_dependencies() -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root. The CacheManager built here is the
    single instance for the process lifetime; everything else receives it
    by reference.
    """
    load_configuration()
    setup_logging(
        log_level=get_config('logging.level'),
        log_format=get_config('logging.format'),
        log_file=get_config('logging.file'),
    )

    dependencies: Dict[str, Any] = {}
    dependencies['ui'] = ConsoleDisplay()
    dependencies['storage'] = open_storage(get_cache_dir())
    dependencies['cache_manager'] = CacheManager(
        storage=dependencies['storage'],
        default_ttl=get_default_ttl_ms(),
        max_size=get_max_memory_size(),
        prefix=get_cache_prefix(),
    )
    dependencies['profile_cache'] = ProfileCache(
        dependencies['cache_manager'],
        policies=build_policies(get_policy_overrides()),
    )
    dependencies['cleanup_sweep'] = CleanupSweep(
        dependencies['cache_manager'],
        interval_seconds=get_sweep_interval_seconds(),
    )
    dependencies['command_handler'] = CommandHandler(
        cache_service=dependencies['cache_manager'],
        profile_cache=dependencies['profile_cache'],
        cleanup_sweep=dependencies['cleanup_sweep'],
        ui=dependencies['ui'],
    )
    logger.info("All dependencies initialized successfully.")
    return dependencies


_dependencies: Optional[Dict[str, Any]] = None


def get_dependencies() -> Dict[str, Any]:
    global _dependencies
    if _dependencies is None:
        _dependencies = create_dependencies()
    return _dependencies


def reset_dependencies() -> None:
    """Drops the wired instances (closing disk storage) so the next command rebuilds them."""
    global _dependencies
    if _dependencies is not None:
        close = getattr(_dependencies.get('storage'), 'close', None)
        if close is not None:
            close()
    _dependencies = None


def _handler() -> CommandHandler:
    return get_dependencies()['command_handler']


# --- Typer App Definition ---
app = typer.Typer(
    name="clinic-cache",
    help="Inspect and maintain the clinic application's profile/appointment cache.",
    add_completion=False,
)

TierOption = Annotated[
    str,
    typer.Option("--tier", "-t", help="Tier ('memory', 'persistent', 'both').")
]


@app.command()
def stats():
    """Shows entry counts and keys per cache tier."""
    _handler().handle_stats()


@app.command()
def get(
    key: Annotated[str, typer.Argument(help="Cache key, e.g. 'dentist_profile_42'.")],
    tier: TierOption = "both",
):
    """Prints a cached value, or a warning if it is missing or expired."""
    _handler().handle_get(key, tier)


@app.command(name="set")
def set_command(
    key: Annotated[str, typer.Argument(help="Cache key.")],
    value: Annotated[str, typer.Argument(help="JSON value to cache.")],
    ttl: Annotated[Optional[float], typer.Option("--ttl", help="Time-to-live in seconds.")] = None,
    tier: TierOption = "both",
):
    """Stores a JSON value in the cache."""
    _handler().handle_set(key, value, ttl_seconds=ttl, tier=tier)


@app.command()
def remove(key: Annotated[str, typer.Argument(help="Cache key.")]):
    """Removes a key from every tier."""
    _handler().handle_remove(key)


@app.command()
def invalidate(owner_id: Annotated[str, typer.Argument(help="Dentist, patient or user id.")]):
    """Removes cached profiles and appointments for one owner."""
    _handler().handle_invalidate(owner_id)


@app.command()
def clear(tier: TierOption = "both"):
    """Clears the cache. Only cache-namespaced persistent keys are touched."""
    _handler().handle_clear(tier)


@app.command()
def cleanup():
    """Purges expired and corrupted entries now."""
    _handler().handle_cleanup()


def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    try:
        app()
    finally:
        reset_dependencies()


if __name__ == "__main__":
    cli_entry_point()
