"""
Utility functions and helpers for geomagnetic model evaluation.
"""

from .logging import setup_logging
from .time import decimal_year_to_datetime, datetime_to_decimal_year
from .validation import (
    validate_range,
    require_range
)

__all__ = [
    'setup_logging',
    'decimal_year_to_datetime',
    'datetime_to_decimal_year',
    'validate_range',
    'require_range'
]
