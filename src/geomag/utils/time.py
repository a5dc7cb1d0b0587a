from datetime import date, datetime, timedelta, timezone
from typing import Union

SECONDS_PER_DAY = 86400.0

DateLike = Union[datetime, date, float, int]

def days_in_year(year: int) -> int:
    """Number of days in a Gregorian calendar year."""
    if year % 4 == 0 and (year % 100 != 0 or year % 400 == 0):
        return 366
    return 365

def decimal_year_to_datetime(year: float) -> datetime:
    """
    Convert a decimal year such as 2017.5 to a UTC datetime.

    The fractional part is a fraction of the containing year's day count,
    with day 0 being January 1st.

    Args:
        year: Decimal year

    Returns:
        Timezone-aware UTC datetime
    """
    whole = int(year // 1)
    seconds = (year - whole) * days_in_year(whole) * SECONDS_PER_DAY
    # Float noise in the fraction is far below a millisecond
    seconds = round(seconds, 3)
    return datetime(whole, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=seconds)

def datetime_to_decimal_year(t: DateLike) -> float:
    """
    Convert a date or datetime to a decimal year.

    Naive datetimes are taken to be UTC, dates are taken to be midnight UTC
    and plain numbers are assumed to already be decimal years.

    Args:
        t: Date, datetime or decimal year

    Returns:
        Decimal year
    """
    if isinstance(t, (int, float)):
        return float(t)
    t = to_utc(t)
    start = datetime(t.year, 1, 1, tzinfo=timezone.utc)
    elapsed = (t - start).total_seconds()
    return t.year + elapsed / (days_in_year(t.year) * SECONDS_PER_DAY)

def to_utc(t: DateLike) -> datetime:
    """Normalize a date, datetime or decimal year to an aware UTC datetime."""
    if isinstance(t, (int, float)):
        return decimal_year_to_datetime(float(t))
    if not isinstance(t, datetime):
        return datetime(t.year, t.month, t.day, tzinfo=timezone.utc)
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)
