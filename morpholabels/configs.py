"""
User configuration of the morpholabels client.

Values are kept in a YAML file under the user configuration directory. Each key
can be overridden by its environment variable (see :data:`ENV_VARS`).
"""
import yaml
import os
import logging
from platformdirs import PlatformDirs
from typing import Any

APIURL_KEY = 'default_api_url'
TIMEOUT_KEY = 'timeout'

ENV_VARS = {
    APIURL_KEY: 'MORPHOLABELS_API_URL',
    TIMEOUT_KEY: 'MORPHOLABELS_TIMEOUT'
}

_LOGGER = logging.getLogger(__name__)

DIRS = PlatformDirs(appname='morpholabels')
CONFIG_FILE = os.path.join(DIRS.user_config_dir, 'morpholabels.yaml')


def read_config() -> dict:
    """All values stored in the configuration file. Empty when there is no file."""
    if not os.path.exists(CONFIG_FILE):
        return {}
    with open(CONFIG_FILE, 'r') as configfile:
        return yaml.safe_load(configfile) or {}


def _write_config(config: dict) -> None:
    os.makedirs(DIRS.user_config_dir, exist_ok=True)
    with open(CONFIG_FILE, 'w') as configfile:
        yaml.safe_dump(config, configfile)
    _LOGGER.debug(f"Configuration saved to {CONFIG_FILE}.")


def set_value(key: str, value: Any) -> None:
    config = read_config()
    config[key] = value
    _write_config(config)


def get_value(key: str,
              include_envvars: bool = True) -> Any:
    """
    Read a configuration value.

    Args:
        key: One of :data:`APIURL_KEY`, :data:`TIMEOUT_KEY`.
        include_envvars: Whether the environment variable of ``key`` takes precedence over the file.

    Returns:
        The value, or None when it is not set.
    """
    env_name = ENV_VARS.get(key)
    if include_envvars and env_name is not None:
        env_value = os.getenv(env_name)
        if env_value is not None:
            return env_value
    return read_config().get(key)


def get_timeout(default: float) -> float:
    """Configured request timeout in seconds, or ``default`` when unset or unreadable."""
    value = get_value(TIMEOUT_KEY)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        _LOGGER.warning(f"Ignoring invalid timeout configuration: {value!r}")
        return default


def clear_all_configurations() -> None:
    if os.path.exists(CONFIG_FILE):
        os.remove(CONFIG_FILE)
        _LOGGER.debug(f"Configuration file {CONFIG_FILE} removed.")
