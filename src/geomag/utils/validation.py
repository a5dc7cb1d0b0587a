import math
from typing import Optional

from geomag.exceptions import RangeError

def validate_range(value: float, min_val: float = None, max_val: float = None) -> bool:
    """Validate numeric value is within range."""
    if min_val is not None and value < min_val:
        return False
    if max_val is not None and value > max_val:
        return False
    return True

def require_range(name: str, value: float, min_val: Optional[float] = None,
                  max_val: Optional[float] = None) -> float:
    """Return value unchanged, raising RangeError if it is outside [min_val, max_val]."""
    if isinstance(value, float) and math.isnan(value):
        raise RangeError(name, value, _describe(min_val, max_val))
    if not validate_range(value, min_val, max_val):
        raise RangeError(name, value, _describe(min_val, max_val))
    return value

def require_harmonic_index(n: int, m: int, max_degree: int) -> None:
    """Validate a spherical harmonic degree/order pair."""
    require_range("n", n, 0, max_degree)
    require_range("m", m, 0, max_degree)
    if m > n:
        raise RangeError("m", m, f"[0, n={n}]")

def _describe(min_val: Optional[float], max_val: Optional[float]) -> str:
    low = "-inf" if min_val is None else f"{min_val:g}"
    high = "inf" if max_val is None else f"{max_val:g}"
    return f"[{low}, {high}]"
