import math
from typing import Any


def validate_float(val: Any, default: float = 0.0) -> float:
    """Ensures a value is a finite float, providing a default otherwise."""
    if val is None:
        return default
    try:
        res = float(val)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(res):
        return default
    return res


def validate_int(val: Any, default: int = 0) -> int:
    """Ensures a value is an int, providing a default if None."""
    if val is None:
        return default
    try:
        return int(val)
    except (TypeError, ValueError, OverflowError):
        return default


def clamp_index(index: int, length: int) -> int:
    """
    Clamps a table index into [0, length - 1].
    """
    return max(0, min(index, length - 1))
