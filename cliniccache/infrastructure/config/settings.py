"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a YAML
configuration file (`~/.cliniccache/config.yaml` by default, or the path in
the CLINICCACHE_CONFIG environment variable). Nested YAML sections are
flattened into dotted keys, so

    cache:
      policies:
        clinic:
          ttl_seconds: 3600

is read with `get_config('cache.policies.clinic.ttl_seconds')` and can be
overridden by the CACHE_POLICIES_CLINIC_TTL_SECONDS environment variable.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".cliniccache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
CONFIG_FILE_ENV_VAR = "CLINICCACHE_CONFIG"
ENV_FILE_NAME = ".env"

DEFAULTS: Dict[str, Any] = {
    "cache.dir": str(DEFAULT_CONFIG_DIR / "storage"),
    "cache.prefix": "cache_",
    "cache.default_ttl_seconds": 5 * 60,
    "cache.max_memory_size": 100,
    "cache.sweep_interval_seconds": 5 * 60,
    "logging.level": "INFO",
    "logging.file": None,
    "logging.format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

POLICY_KINDS = ("dentist_profile", "patient_profile", "appointments", "clinic")
POLICY_FIELDS = ("ttl_seconds", "tier")

# --- Module-level Configuration Store ---
_config: Dict[str, Any] = {}
_overrides: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Mapping[str, Any], parent: str = "") -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{parent}.{key}" if parent else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from the .env file and the YAML file.

    Priority order (highest to lowest):
    1. Values set with set_config / set_config_for_testing
    2. Environment Variables (including those loaded from .env)
    3. YAML configuration file
    4. DEFAULTS

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # .env first so it can point CLINICCACHE_CONFIG at a YAML file
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: real environment variables take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("No .env file found at or above current directory.")

    yaml_path = config_file or Path(os.environ.get(CONFIG_FILE_ENV_VAR, DEFAULT_CONFIG_FILE)).expanduser()
    if yaml_path.exists():
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {yaml_path}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {yaml_path} did not contain a mapping.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {yaml_path}: {e}")
    else:
        logger.debug(f"YAML config file not found: {yaml_path}")

    _loaded = True


def reset_configuration() -> None:
    """Forgets loaded values so the next access reloads them."""
    global _config, _loaded
    _config = {}
    _overrides.clear()
    _loaded = False


def _coerce_env(value: str) -> Any:
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value


def get_config(key: str, default: Any = None) -> Any:
    """Gets a configuration value by dotted key.

    Args:
        key: The configuration key (e.g. 'cache.max_memory_size').
        default: Returned when no source defines the key. Falls back to DEFAULTS.

    Returns:
        The configuration value.
    """
    if key in _test_config:
        return _test_config[key]
    if key in _overrides:
        return _overrides[key]

    if not _loaded:
        load_configuration()

    env_key = key.upper().replace(".", "_")
    if env_key in os.environ:
        return _coerce_env(os.environ[env_key])

    if key in _config:
        return _config[key]

    if default is None:
        default = DEFAULTS.get(key)
    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the lifetime of the process."""
    logger.debug(f"Setting config: {key} = {value}")
    _overrides[key] = value


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    try:
        cwd = Path.cwd()
        for path in [cwd] + list(cwd.parents):
            env_path = path / ENV_FILE_NAME
            if env_path.is_file():
                return env_path
    except OSError as e:
        logger.warning(f"Error searching for .env file: {e}")
    return None


# --- Convenience Functions ---

def _positive_number(key: str) -> float:
    raw = get_config(key)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Config '{key}' must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"Config '{key}' must be positive, got {raw!r}")
    return value


def get_cache_dir() -> Path:
    return Path(str(get_config("cache.dir"))).expanduser()


def get_cache_prefix() -> str:
    return str(get_config("cache.prefix"))


def get_default_ttl_ms() -> int:
    """Default cache TTL in milliseconds (configured in seconds)."""
    return int(_positive_number("cache.default_ttl_seconds") * 1000)


def get_max_memory_size() -> int:
    return int(_positive_number("cache.max_memory_size"))


def get_sweep_interval_seconds() -> float:
    return _positive_number("cache.sweep_interval_seconds")


def get_policy_overrides() -> Dict[str, Dict[str, Any]]:
    """Collects per-entity TTL/tier overrides, e.g. {'clinic': {'ttl_seconds': 3600}}."""
    overrides: Dict[str, Dict[str, Any]] = {}
    for kind in POLICY_KINDS:
        for field_name in POLICY_FIELDS:
            value = get_config(f"cache.policies.{kind}.{field_name}")
            if value is not None:
                overrides.setdefault(kind, {})[field_name] = value
    return overrides


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
