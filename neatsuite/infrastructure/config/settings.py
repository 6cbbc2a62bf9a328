"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables and a YAML
configuration file (``~/.neatsuite/config.yaml`` by default), and turns
the result into a validated ``ClientConfig``.

Example YAML file:

    netsuite:
      account_id: "1234567_SB1"
      timeout: 15000
      oauth:
        consumer_key: "..."
        realm: "1234567_SB1"
    logging:
      level: DEBUG
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from neatsuite.domain.models.errors import ConfigurationError
from neatsuite.domain.models.http import DEFAULT_RETRIES, DEFAULT_TIMEOUT_MS, ClientConfig
from neatsuite.utils.helpers import validate_config

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".neatsuite"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

OAUTH_FIELDS = ("consumer_key", "consumer_secret", "token_key", "token_secret", "realm")

# Dotted setting key -> environment variable
ENV_VARS: Dict[str, str] = {
    "netsuite.account_id": "NETSUITE_ACCOUNT_ID",
    "netsuite.oauth.consumer_key": "NETSUITE_CONSUMER_KEY",
    "netsuite.oauth.consumer_secret": "NETSUITE_CONSUMER_SECRET",
    "netsuite.oauth.token_key": "NETSUITE_TOKEN_KEY",
    "netsuite.oauth.token_secret": "NETSUITE_TOKEN_SECRET",
    "netsuite.oauth.realm": "NETSUITE_REALM",
    "netsuite.timeout": "NETSUITE_TIMEOUT",
    "netsuite.retries": "NETSUITE_RETRIES",
    "netsuite.enable_performance_logging": "NETSUITE_ENABLE_PERFORMANCE_LOGGING",
    "logging.level": "NETSUITE_LOG_LEVEL",
    "logging.file": "NETSUITE_LOG_FILE",
}

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from the YAML file and the .env file.

    Priority order (highest to lowest):
    1. Test overrides (``set_config_for_testing``)
    2. Environment Variables
    3. .env file (never overrides variables already set)
    4. YAML configuration file
    5. Defaults

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = Path(config_file) if config_file else DEFAULT_CONFIG_FILE

    # 1. YAML file (lowest priority)
    if config_file.exists():
        with open(config_file, 'r', encoding='utf-8') as f:
            yaml_config = yaml.safe_load(f)
        if isinstance(yaml_config, dict):
            _config.update(yaml_config)
            logger.info(f"Loaded configuration from YAML: {config_file}")
        elif yaml_config is not None:
            logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables win
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("No .env file found at or above the current directory.")

    _loaded = True


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load re-reads the files."""
    global _config, _loaded
    _config = {}
    _loaded = False


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def _lookup(data: Dict[str, Any], key: str) -> Any:
    """Resolves a dotted key through nested dicts, or a literal dotted key."""
    if key in data:
        return data[key]
    node: Any = data
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dotted key (e.g. ``netsuite.account_id``).

    Priority:
    1. Test configuration
    2. Environment variable (see ``ENV_VARS``)
    3. YAML config
    4. Default value

    Environment values are returned as strings; use ``get_int_config`` or
    ``get_bool_config`` for typed values.
    """
    if key in _test_config:
        return _test_config[key]

    env_key = ENV_VARS.get(key, key.upper().replace('.', '_'))
    if env_key in os.environ:
        return os.environ[env_key]

    value = _lookup(_config, key)
    if value is not None:
        return value

    return default


def get_int_config(key: str, default: int) -> int:
    value = get_config(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid integer for '{key}': {value!r}. Using default {default}.")
        return default


def get_bool_config(key: str, default: bool = False) -> bool:
    value = get_config(key)
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def build_config_dict() -> Dict[str, Any]:
    """Collects the client configuration as a plain mapping.

    The ``oauth`` block is None when none of its fields are set, so
    validation reports the block itself as missing.
    """
    oauth = {name: get_config(f"netsuite.oauth.{name}") for name in OAUTH_FIELDS}
    headers = get_config("netsuite.headers") or {}
    return {
        "oauth": oauth if any(oauth.values()) else None,
        "account_id": get_config("netsuite.account_id"),
        "timeout": get_int_config("netsuite.timeout", DEFAULT_TIMEOUT_MS),
        "retries": get_int_config("netsuite.retries", DEFAULT_RETRIES),
        "headers": headers if isinstance(headers, dict) else {},
        "enable_performance_logging": get_bool_config("netsuite.enable_performance_logging"),
    }


def load_client_config(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> ClientConfig:
    """Loads, validates and builds the client configuration.

    Raises:
        ConfigurationError: Carrying every validation message.
    """
    load_configuration(config_file=config_file, env_file=env_file)
    data = build_config_dict()
    errors = validate_config(data)
    if errors:
        raise ConfigurationError(errors)
    return ClientConfig.from_dict(data)


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {sorted(config_dict)}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
