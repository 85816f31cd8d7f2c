"""Tridiagonal solvers and the interpolation systems built on them.

Three system shapes are assembled from the data points:

* ``solve_y1``: general tridiagonal system for the first derivatives,
* ``solve_y2``: general tridiagonal system for the second derivatives,
* ``solve_y2_periodic``: symmetric cyclic system for the second derivatives.

Interior rows are always derived from the data; the first and last rows of
the general shapes come from a :class:`Boundary`, which is how the boundary
condition families in :mod:`knotspline.interpolation` parameterize them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InterpolationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Boundary:
    """First and last rows of a general interpolation system.

    ``d_0``/``e_0`` are the main and upper diagonal entries of the first row,
    ``c_n``/``d_n`` the lower and main diagonal entries of the last row, and
    ``b_0``/``b_n`` the matching right-hand side values.
    """

    e_0: float = 0.0
    c_n: float = 0.0
    b_0: float = 0.0
    b_n: float = 0.0
    d_0: float = 1.0
    d_n: float = 1.0


def solve_tridiagonal(
    lower: np.ndarray,
    diag: np.ndarray,
    upper: np.ndarray,
    rhs: np.ndarray,
) -> np.ndarray:
    """Solve a tridiagonal system by forward elimination and back substitution.

    Parameters
    ----------
    lower:
        Sub-diagonal of length ``n-1``; ``lower[i]`` multiplies ``x[i]`` in
        row ``i+1``.
    diag:
        Main diagonal of length ``n``.
    upper:
        Super-diagonal of length ``n-1``; ``upper[i]`` multiplies ``x[i+1]``
        in row ``i``.
    rhs:
        Right-hand side of length ``n``.

    Raises
    ------
    numpy.linalg.LinAlgError
        If elimination hits a zero pivot or produces non-finite values.
    """

    diag = np.asarray(diag, dtype=float)
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    rhs = np.asarray(rhs, dtype=float)
    n = diag.size
    if n == 0:
        raise ValueError("Tridiagonal system must have at least one row")
    if lower.size != n - 1 or upper.size != n - 1 or rhs.size != n:
        raise ValueError("Inconsistent tridiagonal system dimensions")

    c_prime = np.zeros(max(n - 1, 0))
    d_prime = np.zeros(n)

    pivot = diag[0]
    _check_pivot(pivot, 0)
    if n > 1:
        c_prime[0] = upper[0] / pivot
    d_prime[0] = rhs[0] / pivot
    for i in range(1, n):
        pivot = diag[i] - lower[i - 1] * c_prime[i - 1]
        _check_pivot(pivot, i)
        if i < n - 1:
            c_prime[i] = upper[i] / pivot
        d_prime[i] = (rhs[i] - lower[i - 1] * d_prime[i - 1]) / pivot

    solution = np.empty(n)
    solution[-1] = d_prime[-1]
    for i in range(n - 2, -1, -1):
        solution[i] = d_prime[i] - c_prime[i] * solution[i + 1]

    if not np.all(np.isfinite(solution)):
        raise np.linalg.LinAlgError("Tridiagonal solution is not finite")
    return solution


def solve_cyclic_tridiagonal(
    lower: np.ndarray,
    diag: np.ndarray,
    upper: np.ndarray,
    rhs: np.ndarray,
    *,
    alpha: float,
    beta: float,
) -> np.ndarray:
    """Solve a tridiagonal system with corner entries.

    ``alpha`` is the bottom-left entry (row ``n-1``, column ``0``) and
    ``beta`` the top-right entry (row ``0``, column ``n-1``). Systems with
    three or more rows use the Sherman-Morrison correction on top of
    :func:`solve_tridiagonal`; two-row systems fold the corners into the
    off-diagonals.
    """

    diag = np.asarray(diag, dtype=float)
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    rhs = np.asarray(rhs, dtype=float)
    n = diag.size
    if n < 2:
        raise ValueError("Cyclic tridiagonal system needs at least two rows")

    if n == 2:
        a01 = upper[0] + beta
        a10 = lower[0] + alpha
        det = diag[0] * diag[1] - a01 * a10
        if det == 0.0 or not np.isfinite(det):
            raise np.linalg.LinAlgError("Singular cyclic system")
        return np.array(
            [
                (rhs[0] * diag[1] - a01 * rhs[1]) / det,
                (diag[0] * rhs[1] - a10 * rhs[0]) / det,
            ]
        )

    gamma = -diag[0]
    _check_pivot(gamma, 0)
    modified = diag.copy()
    modified[0] = diag[0] - gamma
    modified[-1] = diag[-1] - alpha * beta / gamma

    solution = solve_tridiagonal(lower, modified, upper, rhs)
    u = np.zeros(n)
    u[0] = gamma
    u[-1] = alpha
    z = solve_tridiagonal(lower, modified, upper, u)

    denom = 1.0 + z[0] + beta * z[-1] / gamma
    _check_pivot(denom, n - 1)
    factor = (solution[0] + beta * solution[-1] / gamma) / denom
    return solution - factor * z


def _check_pivot(value: float, row: int) -> None:
    if value == 0.0 or not np.isfinite(value):
        raise np.linalg.LinAlgError(f"Zero pivot in row {row}")


def point_arrays(points) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(x, y)`` arrays for *points*.

    Accepts a sequence of :class:`~knotspline.knot.Point` (or anything with
    ``x``/``y`` attributes), a sequence of ``(x, y)`` pairs, or an ``(N, 2)``
    array. Abscissas must be strictly increasing.
    """

    if isinstance(points, np.ndarray):
        data = np.asarray(points, dtype=float)
    else:
        rows = [(p.x, p.y) if hasattr(p, "x") else tuple(p) for p in points]
        data = np.asarray(rows, dtype=float)
    if data.size == 0:
        return np.zeros(0), np.zeros(0)
    if data.ndim != 2 or data.shape[1] != 2:
        raise InterpolationError("points must be (x, y) pairs")
    x = data[:, 0].copy()
    y = data[:, 1].copy()
    if np.any(np.diff(x) <= 0.0):
        raise InterpolationError("point abscissas must be strictly increasing")
    return x, y


def solve_y2(x: np.ndarray, y: np.ndarray, boundary: Boundary) -> np.ndarray:
    """Second derivatives at every point from the general ``y2`` system."""

    n = require_points(x, 3)
    h = np.diff(x)
    dy = np.diff(y)

    lower, diag, upper, rhs = _allocate(n)
    diag[1:-1] = 2.0 * (h[:-1] + h[1:])
    lower[:-1] = h[:-1]
    upper[1:] = h[1:]
    rhs[1:-1] = 6.0 * (dy[1:] / h[1:] - dy[:-1] / h[:-1])
    _apply_boundary(lower, diag, upper, rhs, boundary)

    return _solve(lower, diag, upper, rhs, "y2")


def solve_y1(x: np.ndarray, y: np.ndarray, boundary: Boundary) -> np.ndarray:
    """First derivatives at every point from the general ``y1`` system."""

    n = require_points(x, 3)
    h = np.diff(x)
    slopes = np.diff(y) / h

    lower, diag, upper, rhs = _allocate(n)
    diag[1:-1] = 2.0 * (h[:-1] + h[1:])
    lower[:-1] = h[1:]
    upper[1:] = h[:-1]
    rhs[1:-1] = 3.0 * (h[:-1] * slopes[1:] + h[1:] * slopes[:-1])
    _apply_boundary(lower, diag, upper, rhs, boundary)

    return _solve(lower, diag, upper, rhs, "y1")


def solve_y2_periodic(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Second derivatives for periodic data.

    The first and last point share their derivatives, leaving ``n-1``
    unknowns in a symmetric cyclic system. The returned array has one entry
    per point with the last equal to the first.
    """

    n = require_points(x, 3)
    h = np.diff(x)
    slopes = np.diff(y) / h

    diag = 2.0 * (np.roll(h, 1) + h)
    off = h[:-1].copy()
    rhs = 6.0 * (slopes - np.roll(slopes, 1))
    try:
        y2 = solve_cyclic_tridiagonal(off, diag, off, rhs, alpha=h[-1], beta=h[-1])
    except np.linalg.LinAlgError as exc:
        logger.debug("Periodic system for %d points is singular: %s", n, exc)
        raise InterpolationError(str(exc)) from exc
    return np.append(y2, y2[0])


def require_points(x: np.ndarray, minimum: int) -> int:
    n = len(x)
    if n < minimum:
        raise InterpolationError(f"{n} points given, at least {minimum} required")
    return n


def _allocate(n: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    return np.zeros(n - 1), np.zeros(n), np.zeros(n - 1), np.zeros(n)


def _apply_boundary(
    lower: np.ndarray,
    diag: np.ndarray,
    upper: np.ndarray,
    rhs: np.ndarray,
    boundary: Boundary,
) -> None:
    diag[0] = boundary.d_0
    upper[0] = boundary.e_0
    rhs[0] = boundary.b_0
    lower[-1] = boundary.c_n
    diag[-1] = boundary.d_n
    rhs[-1] = boundary.b_n


def _solve(
    lower: np.ndarray,
    diag: np.ndarray,
    upper: np.ndarray,
    rhs: np.ndarray,
    label: str,
) -> np.ndarray:
    try:
        return solve_tridiagonal(lower, diag, upper, rhs)
    except np.linalg.LinAlgError as exc:
        logger.debug("%s system with %d rows is singular: %s", label, diag.size, exc)
        raise InterpolationError(str(exc)) from exc
