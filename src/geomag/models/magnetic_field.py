"""
World Magnetic Model evaluation.

The main field is the gradient of a scalar potential expanded in spherical
harmonics to degree and order 12. Evaluating the expansion at a geocentric
position gives the field in spherical axes (X' north, Y' east, Z' down);
rotating by the difference between geocentric and geodetic latitude gives the
ellipsoidal components from which declination, inclination and intensities
are derived.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from geomag.models.coefficients import (
    CoefficientStore,
    CoefficientTable,
    warn_outside_validity,
)
from geomag.models.geodesy import Location
from geomag.models.polynomial import LegendreTable, default_legendre_table
from geomag.utils.time import DateLike, datetime_to_decimal_year
from geomag.utils.units import DEG

AGEO = 6371200.0  # Geomagnetic reference radius [m]

# WMM global average uncertainties
ERR_X = 131.0  # nT
ERR_Y = 94.0  # nT
ERR_Z = 157.0  # nT
ERR_H = 128.0  # nT
ERR_F = 148.0  # nT
ERR_I = 0.21  # deg
ERR_DA = 0.26  # D uncertainty away from the poles, deg
ERR_DB = 5625.0  # H scale of the D uncertainty near the poles, nT

GRID_VARIATION_LATITUDE = 55.0  # deg

logger = logging.getLogger(__name__)

class FieldUncertainty(NamedTuple):
    """One-sigma uncertainties of the field elements."""
    x: float  # nT
    y: float  # nT
    z: float  # nT
    h: float  # nT
    f: float  # nT
    i: float  # deg
    d: float  # deg

@dataclass(frozen=True)
class MagneticField:
    """Geomagnetic field and its rate of change at one location and date."""
    location: Location
    year: float  # decimal year of evaluation
    x: float  # spherical X' [nT]
    y: float  # spherical Y' [nT]
    z: float  # spherical Z' [nT]
    dx: float  # [nT/yr]
    dy: float  # [nT/yr]
    dz: float  # [nT/yr]
    valid: bool = True  # date within the model validity window

    def spherical(self) -> Tuple[float, float, float, float, float, float]:
        """Field [nT] and rates [nT/yr] in geocentric spherical axes."""
        return self.x, self.y, self.z, self.dx, self.dy, self.dz

    def ellipsoidal(self) -> Tuple[float, float, float, float, float, float]:
        """
        Field [nT] and rates [nT/yr] in ellipsoidal axes.

        The horizontal axes are parallel to the WGS84 ellipsoid. The rates
        are rotated by the same latitude difference as the field; its own
        variation with time is ignored, as in the WMM report.
        """
        lat_s, _, _ = self.location.spherical()
        d_phi = lat_s - self.location.latitude
        cos_d = math.cos(d_phi)
        sin_d = math.sin(d_phi)
        x = self.x * cos_d - self.z * sin_d
        y = self.y
        z = self.x * sin_d + self.z * cos_d
        dx = self.dx * cos_d - self.dz * sin_d
        dy = self.dy
        dz = self.dx * sin_d + self.dz * cos_d
        return x, y, z, dx, dy, dz

    @property
    def horizontal_intensity(self) -> float:
        """H [nT]."""
        x, y, _, _, _, _ = self.ellipsoidal()
        return math.hypot(x, y)

    @property
    def total_intensity(self) -> float:
        """F [nT]."""
        x, y, z, _, _, _ = self.ellipsoidal()
        return math.sqrt(x * x + y * y + z * z)

    @property
    def inclination(self) -> float:
        """I [deg], positive downward."""
        _, _, z, _, _, _ = self.ellipsoidal()
        return math.atan2(z, self.horizontal_intensity) / DEG

    @property
    def declination(self) -> float:
        """D [deg], positive east of true north."""
        x, y, _, _, _, _ = self.ellipsoidal()
        return math.atan2(y, x) / DEG

    @property
    def grid_variation(self) -> float:
        """GV [deg], declination relative to grid north in the polar regions."""
        gv = self.declination
        lat = self.location.latitude_deg
        if lat > GRID_VARIATION_LATITUDE:
            gv -= self.location.longitude_deg
        elif lat < -GRID_VARIATION_LATITUDE:
            gv += self.location.longitude_deg
        return gv

    @property
    def horizontal_intensity_rate(self) -> float:
        """dH/dt [nT/yr]."""
        x, y, _, dx, dy, _ = self.ellipsoidal()
        return (x * dx + y * dy) / self.horizontal_intensity

    @property
    def total_intensity_rate(self) -> float:
        """dF/dt [nT/yr]."""
        x, y, z, dx, dy, dz = self.ellipsoidal()
        return (x * dx + y * dy + z * dz) / self.total_intensity

    @property
    def inclination_rate(self) -> float:
        """dI/dt [deg/yr]."""
        _, _, z, _, _, dz = self.ellipsoidal()
        h = self.horizontal_intensity
        f = self.total_intensity
        return (h * dz - self.horizontal_intensity_rate * z) / (f * f) / DEG

    @property
    def declination_rate(self) -> float:
        """dD/dt [deg/yr]."""
        x, y, _, dx, dy, _ = self.ellipsoidal()
        h = self.horizontal_intensity
        return (x * dy - dx * y) / (h * h) / DEG

    @property
    def grid_variation_rate(self) -> float:
        """dGV/dt [deg/yr]."""
        return self.declination_rate

    def uncertainty(self) -> FieldUncertainty:
        """WMM global average uncertainties; D degrades where H is weak."""
        h = self.horizontal_intensity
        err_d = math.sqrt(ERR_DA * ERR_DA + (ERR_DB / h) ** 2)
        return FieldUncertainty(x=ERR_X, y=ERR_Y, z=ERR_Z, h=ERR_H, f=ERR_F, i=ERR_I, d=err_d)

    def as_dict(self) -> Dict[str, float]:
        """Ellipsoidal elements and rates keyed by their usual symbols."""
        x, y, z, dx, dy, dz = self.ellipsoidal()
        return {
            "X": x, "Y": y, "Z": z,
            "H": self.horizontal_intensity,
            "F": self.total_intensity,
            "I": self.inclination,
            "D": self.declination,
            "GV": self.grid_variation,
            "dX": dx, "dY": dy, "dZ": dz,
            "dH": self.horizontal_intensity_rate,
            "dF": self.total_intensity_rate,
            "dI": self.inclination_rate,
            "dD": self.declination_rate,
            "dGV": self.grid_variation_rate,
        }

class MagneticFieldModel:
    def __init__(self, coefficients: Optional[CoefficientStore] = None,
                 legendre: Optional[LegendreTable] = None):
        """
        Initialize magnetic field model.

        Args:
            coefficients: Coefficient store; a new store using the configured
                default dataset if omitted
            legendre: Legendre polynomial table; the shared table if omitted
        """
        self.coefficients = coefficients if coefficients is not None else CoefficientStore()
        self.legendre = legendre if legendre is not None else default_legendre_table()

    def evaluate(self, location: Location, date: DateLike) -> MagneticField:
        """
        Calculate the main field and its secular variation.

        Args:
            location: Evaluation point
            date: Date, datetime or decimal year

        Returns:
            MagneticField bound to location
        """
        table = self.coefficients.snapshot()
        valid = table.is_valid(date)
        if not valid:
            warn_outside_validity(table, date)
        return self._sum(table, location, datetime_to_decimal_year(date), valid)

    def _sum(self, table: CoefficientTable, location: Location, year: float,
             valid: bool) -> MagneticField:
        lat_s, lon, r = location.spherical()
        cos_lat = math.cos(lat_s)

        x = y = z = 0.0
        dx = dy = dz = 0.0
        for n in range(1, table.max_degree + 1):
            ar = (AGEO / r) ** (n + 2)
            for m in range(n + 1):
                c = table.interpolate(n, m, year)
                p, dp = self.legendre.schmidt(n, m, lat_s)
                cos_ml = math.cos(m * lon)
                sin_ml = math.sin(m * lon)

                a = c.g * cos_ml + c.h * sin_ml
                b = c.g * sin_ml - c.h * cos_ml
                da = c.dg * cos_ml + c.dh * sin_ml
                db = c.dg * sin_ml - c.dh * cos_ml

                x -= ar * a * dp
                y += ar * m * b * p
                z -= ar * (n + 1) * a * p
                dx -= ar * da * dp
                dy += ar * m * db * p
                dz -= ar * (n + 1) * da * p

        y /= cos_lat
        dy /= cos_lat

        return MagneticField(location=location, year=year,
                             x=x, y=y, z=z, dx=dx, dy=dy, dz=dz, valid=valid)

    def evaluate_grid(self, latitudes: Iterable[float], longitudes: Iterable[float],
                      height: float, date: DateLike) -> pd.DataFrame:
        """
        Evaluate the field over a latitude/longitude grid.

        Args:
            latitudes: Geodetic latitudes [deg]
            longitudes: Longitudes [deg]
            height: Height above the ellipsoid [m]
            date: Date, datetime or decimal year

        Returns:
            DataFrame with one row per point: lat, lon and the elements of
            MagneticField.as_dict()
        """
        lats = np.atleast_1d(np.asarray(latitudes, dtype=float))
        lons = np.atleast_1d(np.asarray(longitudes, dtype=float))

        # One table and one validity check for the whole grid
        table = self.coefficients.snapshot()
        valid = table.is_valid(date)
        if not valid:
            warn_outside_validity(table, date)
        year = datetime_to_decimal_year(date)

        rows = []
        for lat in lats:
            for lon in lons:
                location = Location.from_geodetic(lat, lon, height)
                field = self._sum(table, location, year, valid)
                rows.append({"lat": lat, "lon": lon, **field.as_dict()})
        logger.debug("Evaluated field on a %dx%d grid", len(lats), len(lons))
        return pd.DataFrame(rows)
