"""
Polynomials, Legendre functions and factorial helpers.

Legendre polynomials are generated in closed form and memoized per
(degree, derivative order) in a LegendreTable. The table also evaluates the
Schmidt semi-normalized associated Legendre functions used by the
spherical harmonic expansion of the geomagnetic potential.
"""

import logging
import math
import threading
from typing import Dict, Iterable, Tuple, Union

import numpy as np
from scipy.special import comb

from geomag.exceptions import RangeError

MAX_EXACT_FACTORIAL = 20  # largest n with n! representable in a signed 64-bit integer

logger = logging.getLogger(__name__)

def factorial(n: int) -> int:
    """
    Exact factorial of n.

    Only defined for 0 <= n <= 20, the range a 64-bit integer can hold;
    use factorial_ratio_float for anything larger.
    """
    if n < 0 or n > MAX_EXACT_FACTORIAL:
        raise RangeError("n", n, f"[0, {MAX_EXACT_FACTORIAL}]")
    z = 1
    for k in range(2, n + 1):
        z *= k
    return z

def factorial_ratio(n: int, m: int) -> int:
    """Exact n!/m! for n >= m >= 0, as the product (m+1)...n."""
    z = 1
    for k in range(m + 1, n + 1):
        z *= k
    return z

def factorial_ratio_float(n: int, m: int) -> float:
    """n!/m! as a float; gives the reciprocal ratio when n < m."""
    if n < m:
        return 1.0 / factorial_ratio_float(m, n)
    z = 1.0
    for k in range(m + 1, n + 1):
        z *= k
    return z

def ipow(x: float, n: int) -> float:
    """x to an integer power; negative n gives 1/x^|n| and n=0 always gives 1."""
    if n == 0:
        return 1.0
    if n < 0:
        return 1.0 / ipow(x, -n)
    z = 1.0
    for _ in range(n):
        z *= x
    return z

class Polynomial:
    """Immutable polynomial in one variable; coefficient i multiplies x**i."""

    def __init__(self, coefficients: Iterable[float]):
        c = np.array(list(coefficients), dtype=float)
        if c.size == 0:
            c = np.zeros(1)
        # Drop trailing zeros so equal polynomials compare equal
        nonzero = np.flatnonzero(c)
        c = c[:nonzero[-1] + 1] if nonzero.size else c[:1]
        c.setflags(write=False)
        self._c = c

    @property
    def coefficients(self) -> np.ndarray:
        return self._c

    @property
    def degree(self) -> int:
        return len(self._c) - 1

    def evaluate(self, x: float) -> float:
        """Evaluate at x using Horner's scheme."""
        y = 0.0
        for c in self._c[::-1]:
            y = y * x + c
        return float(y)

    __call__ = evaluate

    def derivative(self) -> "Polynomial":
        if self.degree == 0:
            return Polynomial([0.0])
        return Polynomial(self._c[1:] * np.arange(1, len(self._c)))

    def __add__(self, other: Union["Polynomial", float]) -> "Polynomial":
        if not isinstance(other, Polynomial):
            other = Polynomial([other])
        size = max(len(self._c), len(other._c))
        c = np.zeros(size)
        c[:len(self._c)] += self._c
        c[:len(other._c)] += other._c
        return Polynomial(c)

    __radd__ = __add__

    def __mul__(self, other: Union["Polynomial", float]) -> "Polynomial":
        if isinstance(other, Polynomial):
            return Polynomial(np.convolve(self._c, other._c))
        return Polynomial(self._c * other)

    __rmul__ = __mul__

    def __neg__(self) -> "Polynomial":
        return Polynomial(-self._c)

    def __sub__(self, other: Union["Polynomial", float]) -> "Polynomial":
        return self + (-other)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return np.array_equal(self._c, other._c)

    def __hash__(self):
        return hash(tuple(self._c))

    def __repr__(self) -> str:
        return f"Polynomial({self._c.tolist()})"

class LegendreTable:
    """
    Thread-safe memo of Legendre polynomials and their derivatives.

    Entries are keyed by (degree n, derivative order m) and hold
    d^m/dx^m P_n(x). The table only grows; with degrees bounded by the
    model order it stays small.
    """

    def __init__(self):
        self._cache: Dict[Tuple[int, int], Polynomial] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._cache)

    def legendre(self, n: int) -> Polynomial:
        """Ordinary Legendre polynomial of degree n."""
        return self.derivative(n, 0)

    def derivative(self, n: int, m: int) -> Polynomial:
        """m-th derivative of the degree n Legendre polynomial."""
        key = (n, m)
        p = self._cache.get(key)
        if p is not None:
            return p
        with self._lock:
            p = self._cache.get(key)
            if p is None:
                p = _legendre_closed_form(n) if m == 0 else self._derive(n, m)
                self._cache[key] = p
                logger.debug("Cached Legendre polynomial (n=%d, m=%d)", n, m)
        return p

    def _derive(self, n: int, m: int) -> Polynomial:
        # Called with the lock held; walks down to the nearest cached order
        k = m
        while k > 0 and (n, k) not in self._cache:
            k -= 1
        if k == 0 and (n, 0) not in self._cache:
            self._cache[(n, 0)] = _legendre_closed_form(n)
        p = self._cache[(n, k)]
        for j in range(k + 1, m + 1):
            p = p.derivative()
            self._cache[(n, j)] = p
        return p

    def schmidt(self, n: int, m: int, latitude: float) -> Tuple[float, float]:
        """
        Schmidt semi-normalized associated Legendre function of sin(latitude).

        Args:
            n: Degree
            m: Order, 0 <= m <= n
            latitude: Geocentric latitude [rad]

        Returns:
            (P, dP/dlatitude)
        """
        x = math.sin(latitude)
        c = math.cos(latitude)

        d_m = self.derivative(n, m)(x)
        d_m1 = self.derivative(n, m + 1)(x)

        if m == 0:
            norm = 1.0
        else:
            norm = math.sqrt(2.0 * factorial_ratio_float(n - m, n + m))

        p = norm * ipow(c, m) * d_m
        dp = norm * ipow(c, m + 1) * d_m1
        if m > 0:
            dp -= norm * m * x * ipow(c, m - 1) * d_m
        return p, dp

def _legendre_closed_form(n: int) -> Polynomial:
    c = np.zeros(n + 1)
    scale = 2.0 ** n
    for k in range(n // 2 + 1):
        term = comb(n, k, exact=True) * comb(2 * n - 2 * k, n, exact=True)
        c[n - 2 * k] = (-1) ** k * term / scale
    return Polynomial(c)

_default_table = LegendreTable()

def legendre(n: int) -> Polynomial:
    """Ordinary Legendre polynomial of degree n, memoized."""
    return _default_table.legendre(n)

def default_legendre_table() -> LegendreTable:
    """Shared table used when a model is not given its own."""
    return _default_table
