"""Configuration management for the analytics kernel.

This module centralizes runtime defaults together with their
environment variable overrides.
"""

from __future__ import annotations

import os

from .settings import get_config_value

VALID_PERIODS = ('daily', 'weekly', 'monthly')

# Fallback cadence (days) when a category has too little history
DEFAULT_FREQUENCY_DAYS = {
    'daily': 1,
    'weekly': 7,
    'monthly': 30,
}

# Projection horizon
PROJECTION_DAYS = int(os.getenv("FINTRACK_PROJECTION_DAYS", "90"))
PROJECTION_PERIOD = os.getenv("FINTRACK_PROJECTION_PERIOD", "monthly").strip().lower()
if PROJECTION_PERIOD not in VALID_PERIODS:
    PROJECTION_PERIOD = "monthly"

# Display currency (formatting only, never converted); currencies.json names the default
CURRENCY_CODE = (
    os.getenv("FINTRACK_CURRENCY") or get_config_value('currencies', 'default', default='PHP')
).strip().upper()


def get_projection_days() -> int:
    """Get the default projection horizon in days."""
    return PROJECTION_DAYS


def get_projection_period() -> str:
    """Get the default projection period."""
    return PROJECTION_PERIOD


def get_currency_code() -> str:
    """Get the default display currency code."""
    return CURRENCY_CODE
