"""Boundary condition families for cubic spline interpolation.

Every entry point takes the target :class:`~knotspline.spline.Spline`, the
data points and the family's parameters, replaces the spline's knots on
success and returns the resulting knot count. Failures raise
:class:`~knotspline.errors.InterpolationError` and leave the spline as it was.
"""
from __future__ import annotations

import enum
import logging

import numpy as np

from .errors import InterpolationError
from .knot import EvalType, Knot, knot_eval
from .spline import Spline
from .tridiag import (
    Boundary,
    point_arrays,
    require_points,
    solve_tridiagonal,
    solve_y1,
    solve_y2,
    solve_y2_periodic,
)

logger = logging.getLogger(__name__)


class SplineType(str, enum.Enum):
    Y1 = "y1"
    Y2 = "y2"
    Y1_Y2 = "y1-y2"
    NATURAL = "natural"
    CLAMPED = "clamped"
    PERIODIC = "periodic"
    NOT_A_KNOT = "not-a-knot"


def interpolate_boundary(spline: Spline, points, boundary: Boundary) -> int:
    """Interpolate with caller-supplied first and last rows of the ``y2`` system."""

    x, y = point_arrays(points)
    y2 = solve_y2(x, y, boundary)
    return _rebuild(spline, x, y, y2, "generic")


def interpolate_y1(
    spline: Spline,
    points,
    y1_0: float,
    y1_n: float,
    *,
    unknowns: str = "y2",
) -> int:
    """Interpolate with known first derivatives at the outer knots.

    By default the curvatures are solved for directly. With
    ``unknowns="y1"`` the first derivatives at all knots are solved for
    instead and converted to curvatures; both give the same spline.
    """

    x, y = point_arrays(points)
    require_points(x, 3)
    if unknowns == "y1":
        slopes = solve_y1(x, y, Boundary(b_0=y1_0, b_n=y1_n))
        y2 = curvatures_from_slopes(x, y, slopes)
    elif unknowns == "y2":
        h_1 = x[1] - x[0]
        h_n = x[-1] - x[-2]
        b_0 = 3.0 / h_1 * ((y[1] - y[0]) / h_1 - y1_0)
        b_n = 3.0 / h_n * (y1_n - (y[-1] - y[-2]) / h_n)
        y2 = solve_y2(x, y, Boundary(e_0=0.5, c_n=0.5, b_0=b_0, b_n=b_n))
    else:
        raise ValueError(f"unknowns must be 'y1' or 'y2', got {unknowns!r}")
    return _rebuild(spline, x, y, y2, "y1")


def interpolate_y2(spline: Spline, points, y2_0: float, y2_n: float) -> int:
    """Interpolate with known second derivatives at the outer knots."""

    return _interpolate_y2(spline, points, y2_0, y2_n, "y2")


def interpolate_natural(spline: Spline, points) -> int:
    return _interpolate_y2(spline, points, 0.0, 0.0, "natural")


def interpolate_clamped(spline: Spline, points) -> int:
    return interpolate_y1(spline, points, 0.0, 0.0)


def interpolate_periodic(spline: Spline, points) -> int:
    """Interpolate with first and second derivatives wrapping around.

    The ordinates of the first and last point are expected to agree.
    """

    x, y = point_arrays(points)
    if len(x) > 2 and not np.isclose(y[0], y[-1]):
        logger.warning(
            "Periodic interpolation with differing end ordinates (%g != %g)", y[0], y[-1]
        )
    y2 = solve_y2_periodic(x, y)
    return _rebuild(spline, x, y, y2, "periodic")


def interpolate_not_a_knot(spline: Spline, points) -> int:
    """Interpolate with a continuous third derivative at the second and
    second-to-last knot.

    The inner points are solved with boundary rows that fold in the
    not-a-knot relations; the curvature at each outer knot is then read off
    the adjacent inner segment, extrapolated to the outer location.
    """

    x, y = point_arrays(points)
    require_points(x, 5)
    h = np.diff(x)
    dy = np.diff(y)
    h_0, h_1 = h[0], h[1]
    h_p, h_l = h[-2], h[-1]
    boundary = Boundary(
        d_0=(h_0 + h_1) * (h_0 + 2.0 * h_1) / h_1,
        e_0=(h_1 * h_1 - h_0 * h_0) / h_1,
        b_0=6.0 * (dy[1] / h_1 - dy[0] / h_0),
        c_n=(h_p * h_p - h_l * h_l) / h_p,
        d_n=(h_l + h_p) * (h_l + 2.0 * h_p) / h_p,
        b_n=6.0 * (dy[-1] / h_l - dy[-2] / h_p),
    )
    inner = solve_y2(x[1:-1], y[1:-1], boundary)

    first = Knot(x[1], y[1], inner[0])
    second = Knot(x[2], y[2], inner[1])
    before_last = Knot(x[-3], y[-3], inner[-2])
    last = Knot(x[-2], y[-2], inner[-1])
    y2_0 = knot_eval(first, second, EvalType.SECOND, x[0])
    y2_n = knot_eval(before_last, last, EvalType.SECOND, x[-1])

    y2 = np.concatenate(([y2_0], inner, [y2_n]))
    return _rebuild(spline, x, y, y2, "not-a-knot")


def interpolate_y1_y2(
    spline: Spline,
    points,
    y1_0: float,
    y1_n: float,
    y2_0: float,
    y2_n: float,
    r_0: float = 0.5,
    r_n: float = 0.5,
) -> int:
    """Interpolate with both first and second derivatives fixed at the ends.

    Two additional knots are placed inside the outermost intervals, at the
    ratios ``r_0`` (from the first knot) and ``r_n`` (from the last knot) of
    the interval widths. Their ordinates are free, which leaves enough
    freedom for the four end conditions; eliminating them keeps the system
    tridiagonal with modified rows next to each end. The resulting spline
    has two knots more than the number of points.
    """

    x, y = point_arrays(points)
    n = require_points(x, 5)
    if not (0.0 < r_0 < 1.0 and 0.0 < r_n < 1.0):
        raise InterpolationError(f"knot ratios must lie in (0, 1), got {r_0:g} and {r_n:g}")

    t = np.concatenate(
        (
            [x[0], x[0] + r_0 * (x[1] - x[0])],
            x[1:-1],
            [x[-1] - r_n * (x[-1] - x[-2]), x[-1]],
        )
    )
    yt = np.concatenate(([y[0], np.nan], y[1:-1], [np.nan, y[-1]]))
    k = t.size
    g = np.diff(t)
    m = k - 2

    lower = np.zeros(m - 1)
    diag = np.zeros(m)
    upper = np.zeros(m - 1)
    rhs = np.zeros(m)

    for j in range(3, k - 3):
        r = j - 1
        lower[r - 1] = g[j - 1]
        diag[r] = 2.0 * (g[j - 1] + g[j])
        upper[r] = g[j]
        rhs[r] = 6.0 * ((yt[j + 1] - yt[j]) / g[j] - (yt[j] - yt[j - 1]) / g[j - 1])

    g_0, g_1, g_2 = g[0], g[1], g[2]
    start = 6.0 * (yt[2] - yt[0] - g_0 * y1_0) / g_1
    diag[0] = 3.0 * g_0 + 2.0 * g_1 + g_0 * g_0 / g_1
    upper[0] = g_1
    rhs[0] = start - 6.0 * y1_0 - (3.0 * g_0 + 2.0 * g_0 * g_0 / g_1) * y2_0
    lower[0] = g_1 - g_0 * g_0 / g_1
    diag[1] = 2.0 * (g_1 + g_2)
    upper[1] = g_2
    rhs[1] = 6.0 * (yt[3] - yt[2]) / g_2 - start + 2.0 * g_0 * g_0 * y2_0 / g_1

    g_q, g_p, g_l = g[-3], g[-2], g[-1]
    end = 6.0 * (yt[-1] - yt[-3] - g_l * y1_n) / g_p
    lower[-2] = g_q
    diag[-2] = 2.0 * (g_q + g_p)
    upper[-1] = g_p - g_l * g_l / g_p
    rhs[-2] = end + 2.0 * g_l * g_l * y2_n / g_p - 6.0 * (yt[-3] - yt[-4]) / g_q
    lower[-1] = g_p
    diag[-1] = 2.0 * g_p + 3.0 * g_l + g_l * g_l / g_p
    rhs[-1] = 6.0 * y1_n - end - (3.0 * g_l + 2.0 * g_l * g_l / g_p) * y2_n

    try:
        inner = solve_tridiagonal(lower, diag, upper, rhs)
    except np.linalg.LinAlgError as exc:
        logger.debug("y1-y2 system for %d points is singular: %s", n, exc)
        raise InterpolationError(str(exc)) from exc

    y2 = np.concatenate(([y2_0], inner, [y2_n]))
    yt[1] = yt[0] + g_0 * y1_0 + g_0 * g_0 * (2.0 * y2[0] + y2[1]) / 6.0
    yt[-2] = yt[-1] - g_l * y1_n + g_l * g_l * (2.0 * y2[-1] + y2[-2]) / 6.0
    return _rebuild(spline, t, yt, y2, "y1-y2")


def interpolate(
    spline: Spline,
    points,
    spline_type: SplineType | str = SplineType.NATURAL,
    *,
    y1_0: float = 0.0,
    y1_n: float = 0.0,
    y2_0: float = 0.0,
    y2_n: float = 0.0,
    r_0: float = 0.5,
    r_n: float = 0.5,
) -> int:
    """Dispatch to the interpolation family named by *spline_type*."""

    spline_type = SplineType(spline_type)
    if spline_type is SplineType.Y1:
        return interpolate_y1(spline, points, y1_0, y1_n)
    if spline_type is SplineType.Y2:
        return interpolate_y2(spline, points, y2_0, y2_n)
    if spline_type is SplineType.Y1_Y2:
        return interpolate_y1_y2(spline, points, y1_0, y1_n, y2_0, y2_n, r_0, r_n)
    if spline_type is SplineType.CLAMPED:
        return interpolate_clamped(spline, points)
    if spline_type is SplineType.PERIODIC:
        return interpolate_periodic(spline, points)
    if spline_type is SplineType.NOT_A_KNOT:
        return interpolate_not_a_knot(spline, points)
    return interpolate_natural(spline, points)


def knot_slopes(points, y1_0: float, y1_n: float) -> np.ndarray:
    """First derivatives at every point of the spline with the given end slopes."""

    x, y = point_arrays(points)
    return solve_y1(x, y, Boundary(b_0=y1_0, b_n=y1_n))


def curvatures_from_slopes(x: np.ndarray, y: np.ndarray, slopes: np.ndarray) -> np.ndarray:
    """Convert knot slopes of a C2 cubic spline into knot curvatures."""

    h = np.diff(x)
    secants = np.diff(y) / h
    y2 = np.empty(len(x))
    y2[:-1] = (6.0 * secants - 4.0 * slopes[:-1] - 2.0 * slopes[1:]) / h
    y2[-1] = (2.0 * slopes[-2] + 4.0 * slopes[-1] - 6.0 * secants[-1]) / h[-1]
    return y2


def _interpolate_y2(spline: Spline, points, y2_0: float, y2_n: float, label: str) -> int:
    x, y = point_arrays(points)
    y2 = solve_y2(x, y, Boundary(b_0=y2_0, b_n=y2_n))
    return _rebuild(spline, x, y, y2, label)


def _rebuild(spline: Spline, x: np.ndarray, y: np.ndarray, y2: np.ndarray, label: str) -> int:
    count = spline.set_knots(x, y, y2)
    logger.debug("%s interpolation of %d points produced %d knots", label, len(x), count)
    return count
