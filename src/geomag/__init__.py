"""
geomag: World Magnetic Model evaluation.

Evaluates the main geomagnetic field and its secular variation at a WGS84
location and date, with EGM96 geoid support for heights above sea level.
"""

from .exceptions import (
    GeomagError,
    RangeError,
    ParseError,
    ConfigurationError,
    ModelValidityWarning
)
from .models import (
    Polynomial,
    LegendreTable,
    legendre,
    Location,
    GeoidGrid,
    CoefficientStore,
    CoefficientTable,
    MagneticField,
    MagneticFieldModel
)

__version__ = "0.1.0"

__all__ = [
    'GeomagError',
    'RangeError',
    'ParseError',
    'ConfigurationError',
    'ModelValidityWarning',
    'Polynomial',
    'LegendreTable',
    'legendre',
    'Location',
    'GeoidGrid',
    'CoefficientStore',
    'CoefficientTable',
    'MagneticField',
    'MagneticFieldModel'
]
