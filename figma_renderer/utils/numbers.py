"""Numeric formatting helpers for emitted markup."""
from __future__ import annotations

import math

DEFAULT_PRECISION = 4
CHANNEL_SCALE = 255


def round_to(value: float, precision: int = DEFAULT_PRECISION) -> float:
    """Round to a fixed number of decimals, folding negative zero to zero."""
    rounded = round(value, precision)
    return 0.0 if rounded == 0 else rounded


def format_number(value: float, precision: int | None = None) -> str:
    """Render a number the way markup expects: no trailing zeros or dot."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if precision is not None:
        value = round_to(value, precision)
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite number: {value}")
    if value == int(value) and abs(value) < 1e15:
        return str(int(value))
    return repr(float(value))
