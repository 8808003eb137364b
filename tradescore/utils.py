"""Small numeric helpers shared by the engines."""

import math


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into the closed interval [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity.

    Python's built-in round() uses banker's rounding (round(2.5) == 2),
    which would shift score boundaries. Scores and confidences use this
    instead.
    """
    return int(math.floor(value + 0.5))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero.

    Symmetric around zero, so round_half_away(-x) == -round_half_away(x).
    """
    if value < 0:
        return -round_half_up(-value)
    return round_half_up(value)


def require_finite(values, name: str = "values") -> None:
    """Raise ValueError if any value is NaN or infinite."""
    for v in values:
        if not math.isfinite(v):
            raise ValueError(f"{name} must be finite, got {v!r}")


def require_non_negative(values, name: str = "values") -> None:
    """Raise ValueError if any value is negative, NaN or infinite."""
    require_finite(values, name)
    for v in values:
        if v < 0:
            raise ValueError(f"{name} must be non-negative, got {v!r}")


def require_period(period: int, name: str = "period") -> None:
    """Raise ValueError if period is not a positive integer."""
    if isinstance(period, bool) or not isinstance(period, int) or period < 1:
        raise ValueError(f"{name} must be a positive integer, got {period!r}")
