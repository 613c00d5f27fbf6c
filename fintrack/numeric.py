"""Numeric helpers shared by the allocation and projection modules.

Invalid inputs are never rejected here: NaN and infinities flow through
so callers can decide how to display them.
"""

from __future__ import annotations

import math

import numpy as np


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves towards positive infinity (``round`` uses banker's rounding)."""
    if not math.isfinite(value):
        return value
    scale = 10 ** digits
    scaled = value * scale
    if not math.isfinite(scaled):
        return value
    rounded = math.floor(scaled + 0.5)
    return rounded / scale if digits else float(rounded)


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide without raising; zero denominators give inf or NaN."""
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.divide(np.float64(numerator), np.float64(denominator)))


def clamp_percentage(value: float) -> float:
    """Clamp into [0, 100], leaving NaN untouched."""
    if math.isnan(value):
        return value
    return max(0.0, min(value, 100.0))
