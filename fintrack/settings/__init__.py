"""Configuration loader for static kernel settings.

Tunables that are not worth an environment variable (recommendation
wording, thresholds, the currency table) live in JSON files next to
this module so they can be edited without code changes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

# Configuration directory
SETTINGS_DIR = Path(__file__).parent


def load_config(config_name: str) -> Dict[str, Any]:
    """Load a settings file by name.

    Args:
        config_name: Name of the settings file (without .json extension)

    Returns:
        Dictionary containing the configuration

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        json.JSONDecodeError: If the settings file is invalid JSON

    Example:
        >>> config = load_config('recommendations')
        >>> config['constants']['essential_positions']
        3
    """
    config_path = SETTINGS_DIR / f"{config_name}.json"

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_recommendation_config() -> Dict[str, Any]:
    """Get the budget recommendation settings."""
    return load_config('recommendations')


def get_currency_config() -> Dict[str, Any]:
    """Get the supported currency table."""
    return load_config('currencies')


def get_config_value(config_name: str, *keys: str, default: Any = None) -> Any:
    """Get a nested configuration value by key path.

    Example:
        >>> get_config_value('recommendations', 'constants', 'savings_keyword')
        'saving'
    """
    try:
        value = load_config(config_name)
        for key in keys:
            value = value[key]
        return value
    except (KeyError, FileNotFoundError):
        return default


__all__ = [
    'SETTINGS_DIR',
    'load_config',
    'get_recommendation_config',
    'get_currency_config',
    'get_config_value',
]
