"""
Custom exceptions and warnings for geomagnetic model evaluation.
"""

from typing import Any, Optional


class GeomagError(Exception):
    """Base exception for all geomag errors."""
    pass


class RangeError(GeomagError, ValueError):
    """Exception for coordinates or harmonic indices outside supported bounds."""
    def __init__(self, name: str, value: Any, valid_range: str):
        self.name = name
        self.value = value
        self.valid_range = valid_range
        super().__init__(f"{name}={value} is outside the valid range {valid_range}")


class ParseError(GeomagError, ValueError):
    """Exception for malformed coefficient or geoid grid data."""
    def __init__(self, source: str, reason: str, line: Optional[int] = None,
                 field: Optional[str] = None):
        self.source = source
        self.line = line
        self.field = field
        self.reason = reason
        location = source if line is None else f"{source}:{line}"
        if field:
            message = f"{location}: bad {field}: {reason}"
        else:
            message = f"{location}: {reason}"
        super().__init__(message)


class ConfigurationError(GeomagError):
    """Exception for missing default datasets or invalid configuration."""
    pass


class ModelValidityWarning(UserWarning):
    """Requested date lies outside the validity window of the loaded model."""
    pass
