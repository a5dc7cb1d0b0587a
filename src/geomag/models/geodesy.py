"""
WGS84 locations and the EGM96 geoid.

A Location stores geodetic latitude, longitude and height above the WGS84
reference ellipsoid and derives the geocentric spherical coordinates used by
the magnetic model. Heights above mean sea level are converted through the
geoid undulation, bilinearly interpolated from the NGA 15'x15' EGM96 grid.
"""

import logging
import math
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional, Tuple, Union

import numpy as np

from geomag.config import get_config
from geomag.exceptions import ConfigurationError, ParseError, RangeError
from geomag.utils.units import DEG

# Constants defining the WGS84 reference ellipsoid
A = 6378137.0  # Equatorial radius [m]
F = 1 / 298.257223563  # Flattening
E2 = F * (2 - F)  # Eccentricity squared

logger = logging.getLogger(__name__)

class GeoidGrid:
    """Regular latitude/longitude grid of geoid undulations [m]."""

    _default: ClassVar[Optional["GeoidGrid"]] = None
    _default_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, heights: np.ndarray, north: float = 90.0,
                 west: float = 0.0, step: float = 0.25):
        """
        Initialize geoid grid.

        Args:
            heights: Undulations [m], rows from north to south, columns from west to east
            north: Latitude of the first row [deg]
            west: Longitude of the first column [deg]
            step: Grid spacing in both directions [deg]
        """
        heights = np.array(heights, dtype=float)
        if heights.ndim != 2 or heights.shape[0] < 2 or heights.shape[1] < 2:
            raise ValueError("heights must be a 2-D grid of at least 2x2 nodes")
        if step <= 0:
            raise ValueError("step must be positive")
        heights.setflags(write=False)

        self.heights = heights
        self.north = float(north)
        self.west = float(west)
        self.step = float(step)
        self.south = self.north - (heights.shape[0] - 1) * self.step
        self.east = self.west + (heights.shape[1] - 1) * self.step

    @classmethod
    def parse(cls, data: Union[bytes, str], source: str = "<geoid grid>") -> "GeoidGrid":
        """
        Parse a grid in the NGA WW15MGH.GRD text format.

        The header holds "south north west east dlat dlon"; the values that
        follow run row by row from north to south, each row west to east.
        """
        if isinstance(data, bytes):
            data = data.decode("ascii", errors="replace")
        tokens = data.split()
        if len(tokens) < 6:
            raise ParseError(source, "could not read grid header", line=1)

        try:
            values = np.array([float(t) for t in tokens], dtype=float)
        except ValueError as e:
            raise ParseError(source, str(e), field="grid value") from e

        south, north, west, east, dlat, dlon = values[:6]
        if dlat <= 0 or not math.isclose(dlat, dlon):
            raise ParseError(source, f"unsupported grid spacing {dlat} x {dlon}", line=1,
                             field="spacing")
        rows = int(round((north - south) / dlat)) + 1
        cols = int(round((east - west) / dlon)) + 1
        body = values[6:]
        if body.size != rows * cols:
            raise ParseError(source, f"expected {rows * cols} values for a {rows}x{cols} "
                                     f"grid, found {body.size}")

        return cls(body.reshape(rows, cols), north=north, west=west, step=dlat)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "GeoidGrid":
        """Load a grid file in NGA WW15MGH.GRD format."""
        path = Path(path)
        grid = cls.parse(path.read_bytes(), source=str(path))
        logger.info("Loaded geoid grid %s (%dx%d, %.4g deg step)",
                    path.name, grid.heights.shape[0], grid.heights.shape[1], grid.step)
        return grid

    @classmethod
    def default(cls) -> "GeoidGrid":
        """The process-wide grid named by the configuration, loaded once."""
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    path = get_config().geoid_path()
                    if not path.is_file():
                        raise ConfigurationError(
                            f"Geoid grid file not found: {path}. Download the EGM96 "
                            f"15' grid (WW15MGH.GRD) from NGA or set geoid.grid_file")
                    cls._default = cls.from_file(path)
        return cls._default

    @classmethod
    def set_default(cls, grid: Optional["GeoidGrid"]):
        """Install a grid as the process-wide default (None re-enables lazy loading)."""
        with cls._default_lock:
            cls._default = grid

    def undulation(self, lat_deg: float, lon_deg: float) -> float:
        """
        Height of the geoid above the WGS84 ellipsoid [m].

        Args:
            lat_deg: Latitude [deg], within the grid's latitude span
            lon_deg: Longitude [deg], within [-180, 360]

        Raises:
            RangeError: If the point is not covered by the grid
        """
        if not self.south <= lat_deg <= self.north:
            raise RangeError("latitude", lat_deg, f"[{self.south:g}, {self.north:g}]")
        if not -180.0 <= lon_deg <= 360.0:
            raise RangeError("longitude", lon_deg, "[-180, 360]")
        lon = lon_deg
        if not self.west <= lon <= self.east:
            # Same meridian, expressed within the grid's own longitude span
            lon = (lon - self.west) % 360.0 + self.west
        if not self.west <= lon <= self.east:
            raise RangeError("longitude", lon_deg, f"[{self.west:g}, {self.east:g}]")

        rows, cols = self.heights.shape
        fy = (self.north - lat_deg) / self.step
        fx = (lon - self.west) / self.step
        i = min(int(math.floor(fy)), rows - 2)
        j = min(int(math.floor(fx)), cols - 2)
        y = fy - i
        x = fx - j

        h00 = self.heights[i, j]
        h10 = self.heights[i, j + 1]
        h01 = self.heights[i + 1, j]
        h11 = self.heights[i + 1, j + 1]

        return float((1 - x) * (1 - y) * h00 + x * (1 - y) * h10 +
                     (1 - x) * y * h01 + x * y * h11)

@dataclass(frozen=True)
class Location:
    """A position given by geodetic latitude, longitude and ellipsoidal height."""
    latitude: float  # [rad]
    longitude: float  # [rad]
    height: float  # [m] above the WGS84 ellipsoid

    @classmethod
    def from_geodetic(cls, lat_deg: float, lon_deg: float, height: float) -> "Location":
        """Location from latitude/longitude in degrees and height above the ellipsoid in meters."""
        return cls(lat_deg * DEG, lon_deg * DEG, float(height))

    @classmethod
    def from_msl(cls, lat_deg: float, lon_deg: float, height_msl: float,
                 geoid: Optional[GeoidGrid] = None) -> "Location":
        """
        Location from latitude/longitude in degrees and height above mean sea level.

        Args:
            lat_deg: Geodetic latitude [deg]
            lon_deg: Longitude [deg]
            height_msl: Height above mean sea level [m]
            geoid: Undulation grid, defaults to GeoidGrid.default()

        Raises:
            RangeError: If the point lies outside the geoid grid
        """
        if geoid is None:
            geoid = GeoidGrid.default()
        n = geoid.undulation(lat_deg, lon_deg)
        return cls(lat_deg * DEG, lon_deg * DEG, height_msl + n)

    @property
    def latitude_deg(self) -> float:
        return self.latitude / DEG

    @property
    def longitude_deg(self) -> float:
        return self.longitude / DEG

    def geodetic(self) -> Tuple[float, float, float]:
        """Geodetic latitude [rad], longitude [rad] and height above the ellipsoid [m]."""
        return self.latitude, self.longitude, self.height

    def spherical(self) -> Tuple[float, float, float]:
        """Geocentric spherical latitude [rad], longitude [rad] and radius [m]."""
        sin_lat = math.sin(self.latitude)
        cos_lat = math.cos(self.latitude)
        rc = A / math.sqrt(1 - E2 * sin_lat * sin_lat)
        p = (rc + self.height) * cos_lat
        z = (rc * (1 - E2) + self.height) * sin_lat
        r = math.sqrt(p * p + z * z)
        return math.asin(z / r), self.longitude, r

    def height_above_msl(self, geoid: Optional[GeoidGrid] = None) -> float:
        """Height above mean sea level [m]."""
        if geoid is None:
            geoid = GeoidGrid.default()
        return self.height - geoid.undulation(self.latitude_deg, self.longitude_deg)
