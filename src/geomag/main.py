#!/usr/bin/env python3
"""
geomag-point
Estimates the strength and direction of Earth's main magnetic field at a point.

Usage:
    geomag-point [--cof-file WMM.COF] [--msl] [--spherical] LAT LON HEIGHT [DATE]

LAT and LON accept decimal degrees, hemisphere letters or D:M:S forms;
HEIGHT is in meters (or feet with an "ft" suffix) above the WGS84 ellipsoid,
or above mean sea level with --msl. DATE is a decimal year or ISO date and
defaults to today.
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

from geomag.config import get_config, load_config, set_cof_file, set_config, set_geoid_file
from geomag.exceptions import GeomagError
from geomag.models.coefficients import CoefficientStore
from geomag.models.geodesy import Location
from geomag.models.magnetic_field import MagneticField, MagneticFieldModel
from geomag.utils.logging import setup_logging
from geomag.utils.parsing import parse_date, parse_height, parse_lat_lng

logger = logging.getLogger("geomag")

def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Evaluate the World Magnetic Model at a point"
    )
    parser.add_argument("latitude", type=parse_lat_lng, help="Geodetic latitude")
    parser.add_argument("longitude", type=parse_lat_lng, help="Longitude")
    parser.add_argument("height", type=parse_height, help="Height [m, or ft with 'ft' suffix]")
    parser.add_argument("date", nargs="?", type=parse_date,
                        help="Decimal year or ISO date (default: today)")
    parser.add_argument("--cof-file", help="WMM coefficient file to load")
    parser.add_argument("--geoid-file", help="EGM96 WW15MGH.GRD geoid grid")
    parser.add_argument("--msl", action="store_true",
                        help="Height is above mean sea level rather than the ellipsoid")
    parser.add_argument("--spherical", action="store_true",
                        help="Also report components in geocentric spherical axes")
    parser.add_argument("--config", help="Path to YAML configuration file")
    parser.add_argument("--log-level", help="Logging level")
    return parser.parse_args(argv)

def format_report(field: MagneticField, model_name: str, spherical: bool = False) -> str:
    """Human readable summary of a field evaluation."""
    x, y, z, dx, dy, dz = field.ellipsoidal()
    err = field.uncertainty()
    loc = field.location
    lines = [
        f"Model: {model_name}",
        f"Date: {field.year:.4f}" + ("" if field.valid else " (outside validity window)"),
        f"Location: lat {loc.latitude_deg:.5f} deg, lon {loc.longitude_deg:.5f} deg, "
        f"height {loc.height:.1f} m (ellipsoid)",
        "",
        f"{'':4}{'Value':>14}{'Rate/yr':>12}{'Uncertainty':>14}",
        f"{'X':4}{x:12.1f}nT{dx:10.1f}nT{err.x:12.0f}nT",
        f"{'Y':4}{y:12.1f}nT{dy:10.1f}nT{err.y:12.0f}nT",
        f"{'Z':4}{z:12.1f}nT{dz:10.1f}nT{err.z:12.0f}nT",
        f"{'H':4}{field.horizontal_intensity:12.1f}nT"
        f"{field.horizontal_intensity_rate:10.1f}nT{err.h:12.0f}nT",
        f"{'F':4}{field.total_intensity:12.1f}nT"
        f"{field.total_intensity_rate:10.1f}nT{err.f:12.0f}nT",
        f"{'I':4}{field.inclination:11.2f}deg{field.inclination_rate:9.2f}deg"
        f"{err.i:11.2f}deg",
        f"{'D':4}{field.declination:11.2f}deg{field.declination_rate:9.2f}deg"
        f"{err.d:11.2f}deg",
        f"{'GV':4}{field.grid_variation:11.2f}deg{field.grid_variation_rate:9.2f}deg",
    ]
    if spherical:
        sx, sy, sz, sdx, sdy, sdz = field.spherical()
        lines += [
            "",
            "Spherical axes:",
            f"{'X':4}{sx:12.1f}nT{sdx:10.1f}nT",
            f"{'Y':4}{sy:12.1f}nT{sdy:10.1f}nT",
            f"{'Z':4}{sz:12.1f}nT{sdz:10.1f}nT",
        ]
    return "\n".join(lines)

def run(args: argparse.Namespace) -> str:
    """Evaluate the field for parsed arguments and return the report."""
    if args.config:
        set_config(load_config(args.config))
    config = get_config()
    setup_logging(args.log_level or config.logging.level, config.logging.log_file)

    # Command line overrides configuration
    if args.cof_file:
        set_cof_file(args.cof_file)
    if args.geoid_file:
        set_geoid_file(args.geoid_file)

    if args.msl:
        location = Location.from_msl(args.latitude, args.longitude, args.height)
    else:
        location = Location.from_geodetic(args.latitude, args.longitude, args.height)

    store = CoefficientStore()
    store.load()
    date = args.date or datetime.now(timezone.utc)
    field = MagneticFieldModel(store).evaluate(location, date)
    return format_report(field, store.name, spherical=args.spherical)

def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    # Parse command line arguments
    args = parse_arguments(argv)

    try:
        print(run(args))
    except (GeomagError, OSError, ValueError) as e:
        logger.error(f"Fatal error: {str(e)}")
        sys.exit(1)

if __name__ == "__main__":
    main()
