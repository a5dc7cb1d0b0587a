"""
Angle and length unit helpers.
"""

import math
from typing import Tuple

DEG = math.pi / 180.0  # radians per degree
FT = 0.3048  # meters per foot

def dms_to_degrees(d: float, m: float = 0.0, s: float = 0.0) -> float:
    """
    Convert degrees, minutes and seconds to decimal degrees.

    The sign is taken from the first nonzero component, so (-12, 45, 12)
    and (0, -12, 54) both describe southern/western angles.
    """
    sign = -1.0 if (d < 0 or (d == 0 and (m < 0 or (m == 0 and s < 0)))) else 1.0
    return sign * (abs(d) + abs(m) / 60.0 + abs(s) / 3600.0)

def degrees_to_dms(degrees: float) -> Tuple[int, int, float]:
    """Convert decimal degrees to (degrees, minutes, seconds), sign on the leading term."""
    sign = -1 if degrees < 0 else 1
    total = abs(degrees) * 3600.0
    d, rem = divmod(total, 3600.0)
    m, s = divmod(rem, 60.0)
    d, m = int(d), int(m)
    if d:
        d *= sign
    elif m:
        m *= sign
    else:
        s *= sign
    return d, m, s
