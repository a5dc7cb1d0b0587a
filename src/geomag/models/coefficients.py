"""
World Magnetic Model spherical harmonic coefficients.

A coefficient file (COF) holds, for every degree n and order m up to the
model order, the Gauss coefficients g(n,m), h(n,m) at the model epoch and
their secular variation dg(n,m), dh(n,m). Coefficients at other dates are
extrapolated linearly from the epoch.
"""

import logging
import threading
import warnings
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import NamedTuple, Optional, Union

import numpy as np

from geomag.config import get_config
from geomag.exceptions import ModelValidityWarning, ParseError
from geomag.utils.time import DateLike, datetime_to_decimal_year, to_utc
from geomag.utils.validation import require_harmonic_index

MAX_LEGENDRE_ORDER = 12

logger = logging.getLogger(__name__)

class Coefficients(NamedTuple):
    """Gauss coefficients [nT] and rates [nT/yr] for one (n, m) at one date."""
    g: float
    h: float
    dg: float
    dh: float
    valid: bool  # date within the model's validity window

@dataclass(frozen=True)
class CoefficientTable:
    """
    One complete, immutable coefficient dataset.

    Arrays are indexed [n, m] and sized for the maximum model order;
    entries with m > n and the n = 0 row are zero.
    """
    epoch: float  # decimal year
    name: str
    valid_date: datetime
    g: np.ndarray
    h: np.ndarray
    dg: np.ndarray
    dh: np.ndarray
    source: str = "<bytes>"
    validity_years: float = 5.0

    @property
    def max_degree(self) -> int:
        return self.g.shape[0] - 1

    def is_valid(self, date: DateLike) -> bool:
        """Whether date lies in [valid_date, epoch + validity_years]."""
        if to_utc(date) < self.valid_date:
            return False
        return datetime_to_decimal_year(date) <= self.epoch + self.validity_years

    def interpolate(self, n: int, m: int, year: float) -> Coefficients:
        """Coefficients for (n, m) at a decimal year, without range checks."""
        dt = year - self.epoch
        return Coefficients(
            g=float(self.g[n, m] + dt * self.dg[n, m]),
            h=float(self.h[n, m] + dt * self.dh[n, m]),
            dg=float(self.dg[n, m]),
            dh=float(self.dh[n, m]),
            valid=True,
        )

def parse_cof(data: Union[bytes, str], source: str = "<bytes>",
              max_degree: int = MAX_LEGENDRE_ORDER,
              validity_years: float = 5.0) -> CoefficientTable:
    """
    Parse a WMM coefficient file.

    The header line is "<epoch> <model name> <MM/DD/YYYY>"; each data line is
    "<n> <m> <g> <h> <dg> <dh>". Lines with fewer than six fields, such as the
    trailing row of 9s, are ignored. A degree 0 row is stored but does not
    contribute to the field, which has no monopole term.

    Args:
        data: File contents
        source: Name used in error messages
        max_degree: Highest degree accepted
        validity_years: Length of the validity window after the epoch

    Returns:
        Parsed coefficient table

    Raises:
        ParseError: If the header or any data field is malformed
    """
    if isinstance(data, bytes):
        data = data.decode("ascii", errors="replace")
    lines = data.splitlines()

    # Read and parse header
    header_no = next((i for i, line in enumerate(lines) if line.strip()), None)
    if header_no is None:
        raise ParseError(source, "could not read header line")
    header = lines[header_no].split()
    if len(header) < 3:
        raise ParseError(source, f"header needs epoch, model name and date, got {len(header)} "
                                 f"field(s)", line=header_no + 1)
    try:
        epoch = float(header[0])
    except ValueError as e:
        raise ParseError(source, repr(header[0]), line=header_no + 1, field="epoch") from e
    try:
        valid_date = datetime.strptime(header[-1], "%m/%d/%Y").replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise ParseError(source, repr(header[-1]), line=header_no + 1,
                         field="valid date") from e
    name = " ".join(header[1:-1])

    size = max_degree + 1
    g, h, dg, dh = (np.zeros((size, size)) for _ in range(4))

    fields = ("n", "m", "g", "h", "dg", "dh")
    count = 0
    for line_no, line in enumerate(lines[header_no + 1:], start=header_no + 2):
        parts = line.split()
        if len(parts) < 6:
            continue
        values = []
        for field_name, text in zip(fields, parts):
            try:
                values.append(int(text) if field_name in ("n", "m") else float(text))
            except ValueError as e:
                raise ParseError(source, repr(text), line=line_no, field=field_name) from e
        n, m = values[0], values[1]
        if not 0 <= n <= MAX_LEGENDRE_ORDER:
            raise ParseError(source, f"degree {n} not in [0, {MAX_LEGENDRE_ORDER}]",
                             line=line_no, field="n")
        if not 0 <= m <= n:
            raise ParseError(source, f"order {m} not in [0, {n}]", line=line_no, field="m")
        if n > max_degree:
            # truncated model
            continue
        g[n, m], h[n, m], dg[n, m], dh[n, m] = values[2:6]
        count += 1

    if count == 0:
        raise ParseError(source, "no coefficient rows found")

    for a in (g, h, dg, dh):
        a.setflags(write=False)

    return CoefficientTable(epoch=epoch, name=name, valid_date=valid_date,
                            g=g, h=h, dg=dg, dh=dh, source=source,
                            validity_years=validity_years)

class CoefficientStore:
    """
    Holder of the active coefficient table.

    Loading parses a complete new table and swaps it in under a lock, so
    readers only ever see a whole table. The configured default dataset is
    loaded on first use if nothing was loaded explicitly.
    """

    def __init__(self, table: Optional[CoefficientTable] = None):
        self._table = table
        self._lock = threading.Lock()

    def load(self, path: Optional[Union[str, Path]] = None) -> CoefficientTable:
        """
        Load a coefficient file, replacing the active table.

        Args:
            path: COF file; None loads the configured default dataset

        Returns:
            The newly active table
        """
        path = Path(path) if path else get_config().cof_path()
        return self.load_bytes(path.read_bytes(), source=str(path))

    def load_bytes(self, data: Union[bytes, str], source: str = "<bytes>") -> CoefficientTable:
        """Parse coefficient data and make it the active table."""
        table = _parse_configured(data, source)
        with self._lock:
            self._table = table
        return table

    def snapshot(self) -> CoefficientTable:
        """The active table, loading the default dataset if none is loaded yet."""
        table = self._table
        if table is not None:
            return table
        with self._lock:
            if self._table is None:
                path = get_config().cof_path()
                self._table = _parse_configured(path.read_bytes(), str(path))
            return self._table

    @property
    def epoch(self) -> float:
        return self.snapshot().epoch

    @property
    def name(self) -> str:
        return self.snapshot().name

    @property
    def valid_date(self) -> datetime:
        return self.snapshot().valid_date

    def coefficients(self, n: int, m: int, date: DateLike) -> Coefficients:
        """
        Gauss coefficients g(n,m), h(n,m) and their rates at the given date.

        Dates outside the model validity window still produce linearly
        extrapolated values, flagged with valid=False and a ModelValidityWarning.

        Raises:
            RangeError: If n or m is outside [0, max degree] or m > n
        """
        table = self.snapshot()
        require_harmonic_index(n, m, table.max_degree)

        c = table.interpolate(n, m, datetime_to_decimal_year(date))
        if not table.is_valid(date):
            warn_outside_validity(table, date)
            c = c._replace(valid=False)
        return c

def _parse_configured(data: Union[bytes, str], source: str) -> CoefficientTable:
    model = get_config().model
    table = parse_cof(data, source=source, max_degree=model.max_degree,
                      validity_years=model.validity_years)
    logger.info("Loaded %s coefficients from %s (epoch %.1f, valid from %s)",
                table.name, source, table.epoch, table.valid_date.date())
    return table

def warn_outside_validity(table: CoefficientTable, date: DateLike):
    """Issue the warning for a date outside the table's validity window."""
    message = (f"Requested date {date} is outside the validity period of {table.name} "
               f"({table.valid_date.date()} to {table.epoch + table.validity_years:.1f})")
    logger.warning(message)
    warnings.warn(message, ModelValidityWarning, stacklevel=3)
