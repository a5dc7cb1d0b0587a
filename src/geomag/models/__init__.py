"""
Geomagnetic and geodetic models.
"""

from .polynomial import Polynomial, LegendreTable, legendre
from .geodesy import Location, GeoidGrid
from .coefficients import CoefficientStore, CoefficientTable, Coefficients, parse_cof
from .magnetic_field import MagneticField, MagneticFieldModel, FieldUncertainty

__all__ = [
    'Polynomial',
    'LegendreTable',
    'legendre',
    'Location',
    'GeoidGrid',
    'CoefficientStore',
    'CoefficientTable',
    'Coefficients',
    'parse_cof',
    'MagneticField',
    'MagneticFieldModel',
    'FieldUncertainty'
]
