"""User preferences. Zero imports from the services layer.

Config lives in ~/.budget/config.json unless BUDGET_PROJECTIONS_CONFIG
points somewhere else.
"""
import json
import os
from pathlib import Path

from utils.constants import DEFAULT_SETTINGS

CONFIG_ENV_VAR = "BUDGET_PROJECTIONS_CONFIG"
DEFAULT_CONFIG_FILE = Path.home() / ".budget" / "config.json"


def config_file() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else DEFAULT_CONFIG_FILE


def load_config() -> dict:
    """Returns {} on missing or corrupt file — never raises."""
    try:
        with open(config_file(), "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError):
        return {}
    return config if isinstance(config, dict) else {}


def save_config(config: dict) -> None:
    """Creates the config folder if needed; atomic write via .tmp + os.replace()."""
    path = config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_setting(key: str, config: dict | None = None):
    """Return config[key], falling back to DEFAULT_SETTINGS."""
    config = load_config() if config is None else config
    return config.get(key, DEFAULT_SETTINGS.get(key))


def set_setting(key: str, value) -> None:
    """Update one key in config and save. None removes the key."""
    config = load_config()
    if value is None:
        config.pop(key, None)
    else:
        config[key] = value
    save_config(config)
