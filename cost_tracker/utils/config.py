import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cost_tracker.exceptions import ConfigurationError, InvalidArgument

# Config file lookup order when --config is not given
CONFIG_FILENAME = "cost-tracker-config.json"
APP_DIR = Path.home() / ".cost-tracker"
CONFIG_FILE = APP_DIR / "config.json"

ENV_PREFIX = "COSTTRACKER_"
DEFAULT_DAYS = 30


def find_config_file(path: Optional[str] = None) -> Optional[Path]:
    """Return the first config file that exists, or None."""
    if path:
        return Path(path)
    for candidate in (Path.cwd() / CONFIG_FILENAME, CONFIG_FILE):
        if candidate.exists():
            return candidate
    return None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the static configuration from the JSON file.

    Having no config file at all is fine: every setting has a default or can
    come from the environment. An explicit path that is missing, or a file
    that cannot be parsed, is an error.
    """
    config_file = find_config_file(path)
    if config_file is None:
        return {}
    if not config_file.exists():
        raise ConfigurationError(f"config file {config_file} does not exist")
    try:
        with open(config_file, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"failed to read config file {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"config file {config_file} must contain a JSON object"
        )
    return data


def resolve_setting(flag=None, env=None, file=None, default=None):
    """
    Merge the four configuration layers.
    Priority: Flag > Environment > Config File > Default
    """
    if env == "":
        env = None
    for value in (flag, env, file):
        if value is not None:
            return value
    return default


def get_setting(
    key: str,
    flag: Any = None,
    config: Optional[Dict[str, Any]] = None,
    default: Any = None,
) -> Any:
    """
    Resolve a single setting by name.

    Usage:
        get_setting("slack_webhook_url", flag=webhook_url, config=ctx.obj)
    """
    env_value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
    file_value = (config or {}).get(key)
    return resolve_setting(flag, env_value, file_value, default)


def resolve_days(flag: Optional[int] = None, config: Optional[Dict[str, Any]] = None) -> int:
    """Resolve the lookback window and coerce env/file values to int."""
    value = get_setting("days", flag=flag, config=config, default=DEFAULT_DAYS)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidArgument(f"days must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"days must be an integer, got {value!r}") from e
