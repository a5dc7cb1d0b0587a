import copy

import numpy as np
import pytest

from geomag import config
from geomag.models.coefficients import CoefficientStore
from geomag.models.geodesy import GeoidGrid


@pytest.fixture(autouse=True)
def restore_global_state():
    """
    Keep tests independent of each other's configuration changes and of
    whichever geoid grid became the process default.
    """
    saved = copy.deepcopy(config.DEFAULT_CONFIG)
    GeoidGrid.set_default(None)
    yield
    config.set_config(saved)
    GeoidGrid.set_default(None)


@pytest.fixture
def wmm2015() -> CoefficientStore:
    """Coefficient store holding the bundled WMM-2015 (v1) coefficients."""
    store = CoefficientStore()
    store.load(config.DEFAULT_COF_FILE)
    return store


def synthetic_undulation(lat_deg, lon_deg):
    """Smooth stand-in for the EGM96 geoid, in meters."""
    lat = np.radians(lat_deg)
    lon = np.radians(lon_deg)
    return 30.0 * np.sin(2 * lat) * np.cos(lon) + 15.0 * np.cos(lat) ** 2 - 5.0


@pytest.fixture(scope="session")
def synthetic_geoid() -> GeoidGrid:
    """Full-resolution (15') global grid laid out like WW15MGH.GRD."""
    lats = np.linspace(90.0, -90.0, 721)
    lons = np.linspace(0.0, 360.0, 1441)
    lon_grid, lat_grid = np.meshgrid(lons, lats)
    return GeoidGrid(synthetic_undulation(lat_grid, lon_grid), north=90.0, west=0.0, step=0.25)


def write_grd(path, heights, south, north, west, east, step):
    """Write heights (rows north to south) in the NGA .GRD text layout."""
    lines = [f"{south:.6f} {north:.6f} {west:.6f} {east:.6f} {step:.6f} {step:.6f}", ""]
    for row in heights:
        for k in range(0, len(row), 8):
            lines.append(" ".join(f"{v:9.3f}" for v in row[k:k + 8]))
        lines.append("")
    path.write_text("\n".join(lines), encoding="ascii")
    return path


@pytest.fixture
def coarse_grd_file(tmp_path):
    """Global 30-degree grid file with values 0.5 * row + column."""
    rows, cols = 7, 13
    heights = np.add.outer(0.5 * np.arange(rows), np.arange(cols, dtype=float))
    return write_grd(tmp_path / "coarse.GRD", heights, -90.0, 90.0, 0.0, 360.0, 30.0)
