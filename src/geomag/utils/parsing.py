import math
import re
from datetime import datetime, timezone

from geomag.utils.time import decimal_year_to_datetime
from geomag.utils.units import FT, dms_to_degrees

_HEMISPHERES = {"N": 1.0, "E": 1.0, "S": -1.0, "W": -1.0}
_DMS_SPLIT = re.compile(r"[\s:°'\"dms]+")
_DECIMAL_YEAR = re.compile(r"^\d{4}(\.\d*)?$")

def parse_lat_lng(text: str) -> float:
    """
    Parse a latitude or longitude string into decimal degrees.

    Accepted forms include "40.5", "-105.25", "40.5N", "W105.25",
    "40:30:00N", "40 30 0 S" and "40°30'00\"N".

    Args:
        text: Angle text

    Returns:
        Angle in decimal degrees

    Raises:
        ValueError: If the text cannot be interpreted as an angle
    """
    s = text.strip().upper()
    if not s:
        raise ValueError("empty latitude/longitude")

    sign = 1.0
    hemisphere = None
    if s[-1] in _HEMISPHERES:
        hemisphere, s = s[-1], s[:-1]
    elif s[0] in _HEMISPHERES:
        hemisphere, s = s[0], s[1:]
    if hemisphere is not None:
        sign = _HEMISPHERES[hemisphere]

    # The sign applies to the whole angle, so "-0:30:00" is -0.5
    s = s.strip()
    if s[:1] in ("-", "+"):
        if hemisphere is not None:
            raise ValueError(f"both a sign and a hemisphere in {text!r}")
        if s[0] == "-":
            sign = -sign
        s = s[1:]

    parts = [p for p in _DMS_SPLIT.split(s.lower()) if p]
    if not 1 <= len(parts) <= 3:
        raise ValueError(f"could not parse latitude/longitude {text!r}")
    try:
        values = [float(p) for p in parts]
    except ValueError as e:
        raise ValueError(f"could not parse latitude/longitude {text!r}") from e
    if any(math.copysign(1.0, v) < 0 for v in values):
        raise ValueError(f"misplaced sign in latitude/longitude {text!r}")

    return sign * dms_to_degrees(*values)

def parse_date(text: str) -> datetime:
    """
    Parse a decimal year ("2017.5") or ISO date ("2017-07-02") into a UTC datetime.
    """
    s = text.strip()
    if _DECIMAL_YEAR.match(s):
        return decimal_year_to_datetime(float(s))
    try:
        t = datetime.fromisoformat(s)
    except ValueError as e:
        raise ValueError(f"could not parse date {text!r}") from e
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)

def parse_height(text: str) -> float:
    """Parse a height in meters, or in feet with an "ft" suffix, returning meters."""
    s = text.strip().lower()
    scale = 1.0
    if s.endswith("ft"):
        s, scale = s[:-2], FT
    elif s.endswith("m"):
        s = s[:-1]
    try:
        return float(s) * scale
    except ValueError as e:
        raise ValueError(f"could not parse height {text!r}") from e
