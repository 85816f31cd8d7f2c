from __future__ import annotations

import logging

import numpy as np
import pytest

from knotspline.errors import InterpolationError, SplineErrorCode
from knotspline.interpolation import (
    SplineType,
    interpolate,
    interpolate_boundary,
    interpolate_clamped,
    interpolate_natural,
    interpolate_not_a_knot,
    interpolate_periodic,
    interpolate_y1,
    interpolate_y1_y2,
    interpolate_y2,
    knot_slopes,
)
from knotspline.knot import EvalType, Knot, Point, knot_eval
from knotspline.spline import Spline
from knotspline.tridiag import Boundary


def _cubic(x):
    return 0.5 * x**3 - 2.0 * x**2 + x + 1.0


def _cubic_first(x):
    return 1.5 * x**2 - 4.0 * x + 1.0


def _cubic_second(x):
    return 3.0 * x - 4.0


CUBIC_X = np.array([-1.0, -0.4, 0.3, 1.0, 2.2, 2.5, 3.4])
CUBIC_POINTS = [Point(float(x), float(_cubic(x))) for x in CUBIC_X]


def _sine_points(n: int = 11) -> np.ndarray:
    x = np.linspace(0.0, 2.0 * np.pi, n)
    y = np.sin(x)
    y[-1] = y[0]
    return np.column_stack((x, y))


def test_natural_three_point_scenario() -> None:
    spline = Spline()

    count = interpolate_natural(spline, [Point(0.0, 0.0), Point(1.0, 1.0), Point(2.0, 0.0)])

    assert count == 3
    knots = spline.knots
    assert [knot.y2 for knot in knots] == pytest.approx([0.0, -3.0, 0.0])
    expected = knot_eval(knots[0], knots[1], EvalType.BASE, 0.5)
    assert np.isclose(spline.evaluate(0.5), expected)
    assert np.isclose(spline.evaluate(0.5), 0.6875)


@pytest.mark.parametrize("spline_type", list(SplineType))
def test_two_points_fail_for_every_family(spline_type: SplineType) -> None:
    spline = Spline()
    with pytest.raises(InterpolationError) as excinfo:
        interpolate(spline, [(0.0, 0.0), (1.0, 1.0)], spline_type)
    assert excinfo.value.code is SplineErrorCode.INTERPOLATION
    assert spline.num_knots == 0


@pytest.mark.parametrize("spline_type", [SplineType.NOT_A_KNOT, SplineType.Y1_Y2])
def test_four_points_fail_for_extended_families(spline_type: SplineType) -> None:
    points = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0)]
    with pytest.raises(InterpolationError):
        interpolate(Spline(), points, spline_type)


def test_failed_interpolation_keeps_previous_knots() -> None:
    spline = Spline([Knot(0.0, 1.0), Knot(1.0, 2.0)])

    with pytest.raises(InterpolationError):
        interpolate_natural(spline, [(0.0, 0.0), (1.0, 1.0)])

    assert spline.knots == (Knot(0.0, 1.0), Knot(1.0, 2.0))


def test_interpolation_replaces_previous_knots() -> None:
    spline = Spline([Knot(-5.0, 1.0), Knot(10.0, 2.0)])

    interpolate_natural(spline, [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)])

    assert [knot.x for knot in spline.knots] == [0.0, 1.0, 2.0]


@pytest.mark.parametrize("spline_type", list(SplineType))
def test_every_family_interpolates_the_points(spline_type: SplineType) -> None:
    points = _sine_points()
    spline = Spline.from_points(points, spline_type, y1_0=1.0, y1_n=1.0)

    for x, y in points:
        assert np.isclose(spline.evaluate(x), y, atol=1e-12)


def test_natural_has_zero_end_curvature() -> None:
    spline = Spline.from_points(_sine_points(), "natural")

    assert spline.knot(0).y2 == 0.0
    assert spline.knot(-1).y2 == 0.0


def test_clamped_has_zero_end_slopes() -> None:
    spline = Spline()
    interpolate_clamped(spline, CUBIC_POINTS)

    assert np.isclose(spline.evaluate(spline.x_min, EvalType.FIRST), 0.0, atol=1e-10)
    assert np.isclose(spline.evaluate(spline.x_max, EvalType.FIRST), 0.0, atol=1e-10)


def test_y1_reproduces_cubic_with_exact_end_slopes() -> None:
    spline = Spline()
    interpolate_y1(spline, CUBIC_POINTS, _cubic_first(CUBIC_X[0]), _cubic_first(CUBIC_X[-1]))

    xs = np.linspace(CUBIC_X[0], CUBIC_X[-1], 41)
    assert np.allclose(spline.sample(xs), _cubic(xs))
    assert np.allclose(spline.sample(xs, EvalType.FIRST), _cubic_first(xs))


def test_y1_slope_and_curvature_systems_agree() -> None:
    points = _sine_points(8)
    direct = Spline()
    via_slopes = Spline()

    interpolate_y1(direct, points, 0.3, -1.2)
    interpolate_y1(via_slopes, points, 0.3, -1.2, unknowns="y1")

    _, _, y2_direct = direct.arrays()
    _, _, y2_slopes = via_slopes.arrays()
    assert np.allclose(y2_direct, y2_slopes)
    assert np.isclose(direct.evaluate(direct.x_min, EvalType.FIRST), 0.3)
    assert np.isclose(direct.evaluate(direct.x_max, EvalType.FIRST), -1.2)

    with pytest.raises(ValueError):
        interpolate_y1(Spline(), points, 0.0, 0.0, unknowns="y3")


def test_knot_slopes_match_spline_derivative() -> None:
    points = _sine_points(8)
    spline = Spline()
    interpolate_y1(spline, points, 1.0, 1.0)

    slopes = knot_slopes(points, 1.0, 1.0)

    expected = [spline.evaluate(x, EvalType.FIRST) for x in points[:, 0]]
    assert np.allclose(slopes, expected)


def test_y2_uses_given_end_curvatures() -> None:
    spline = Spline()
    interpolate_y2(spline, CUBIC_POINTS, _cubic_second(CUBIC_X[0]), _cubic_second(CUBIC_X[-1]))

    assert spline.knot(0).y2 == _cubic_second(CUBIC_X[0])
    assert spline.knot(-1).y2 == _cubic_second(CUBIC_X[-1])
    xs = np.linspace(CUBIC_X[0], CUBIC_X[-1], 41)
    assert np.allclose(spline.sample(xs), _cubic(xs))


def test_periodic_wraps_derivatives() -> None:
    spline = Spline()
    interpolate_periodic(spline, _sine_points(9))

    for eval_type in (EvalType.FIRST, EvalType.SECOND):
        start = spline.evaluate(spline.x_min, eval_type)
        end = spline.evaluate(spline.x_max, eval_type)
        assert np.isclose(start, end)


def test_periodic_three_points() -> None:
    spline = Spline()
    count = interpolate_periodic(spline, [(0.0, 1.0), (1.0, -1.0), (3.0, 1.0)])

    assert count == 3
    assert np.isclose(
        spline.evaluate(0.0, EvalType.FIRST), spline.evaluate(3.0, EvalType.FIRST)
    )
    assert np.isclose(spline.knot(0).y2, spline.knot(2).y2)


def test_periodic_warns_on_mismatched_ends(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="knotspline"):
        interpolate_periodic(Spline(), [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 2.0)])

    assert "differing end ordinates" in caplog.text


def test_not_a_knot_reproduces_cubic() -> None:
    spline = Spline()
    count = interpolate_not_a_knot(spline, CUBIC_POINTS)

    assert count == len(CUBIC_POINTS)
    xs = np.linspace(CUBIC_X[0], CUBIC_X[-1], 61)
    assert np.allclose(spline.sample(xs), _cubic(xs))
    _, _, y2 = spline.arrays()
    assert np.allclose(y2, _cubic_second(CUBIC_X))


def test_not_a_knot_has_continuous_third_derivative() -> None:
    points = _sine_points(7)
    spline = Spline()
    interpolate_not_a_knot(spline, points)

    segments = spline.segments()
    assert np.isclose(segments[0].a, segments[1].a)
    assert np.isclose(segments[-2].a, segments[-1].a)


def test_y1_y2_reproduces_cubic() -> None:
    spline = Spline()
    count = interpolate_y1_y2(
        spline,
        CUBIC_POINTS,
        _cubic_first(CUBIC_X[0]),
        _cubic_first(CUBIC_X[-1]),
        _cubic_second(CUBIC_X[0]),
        _cubic_second(CUBIC_X[-1]),
        r_0=0.25,
        r_n=0.6,
    )

    assert count == len(CUBIC_POINTS) + 2
    x_knots, y_knots, _ = spline.arrays()
    assert np.isclose(x_knots[1], CUBIC_X[0] + 0.25 * (CUBIC_X[1] - CUBIC_X[0]))
    assert np.isclose(x_knots[-2], CUBIC_X[-1] - 0.6 * (CUBIC_X[-1] - CUBIC_X[-2]))
    assert np.allclose(y_knots, _cubic(x_knots))
    xs = np.linspace(CUBIC_X[0], CUBIC_X[-1], 61)
    assert np.allclose(spline.sample(xs), _cubic(xs))


def test_y1_y2_meets_all_end_conditions() -> None:
    points = _sine_points(9)
    spline = Spline()
    interpolate_y1_y2(spline, points, 0.5, -0.25, 1.0, 2.0)

    assert np.isclose(spline.evaluate(spline.x_min, EvalType.FIRST), 0.5)
    assert np.isclose(spline.evaluate(spline.x_max, EvalType.FIRST), -0.25)
    assert np.isclose(spline.evaluate(spline.x_min, EvalType.SECOND), 1.0)
    assert np.isclose(spline.evaluate(spline.x_max, EvalType.SECOND), 2.0)
    for x, y in points:
        assert np.isclose(spline.evaluate(x), y, atol=1e-12)


@pytest.mark.parametrize("ratios", [(0.0, 0.5), (0.5, 1.0), (1.5, 0.5)])
def test_y1_y2_rejects_bad_ratios(ratios) -> None:
    with pytest.raises(InterpolationError):
        interpolate_y1_y2(Spline(), CUBIC_POINTS, 0.0, 0.0, 0.0, 0.0, *ratios)


def test_dispatch_accepts_names_and_rejects_unknown() -> None:
    spline = Spline()
    assert interpolate(spline, CUBIC_POINTS, "not-a-knot") == len(CUBIC_POINTS)
    with pytest.raises(ValueError):
        interpolate(spline, CUBIC_POINTS, "quintic")


def test_boundary_rows_reproduce_named_families() -> None:
    x = CUBIC_X
    y = _cubic(x)
    h_1 = x[1] - x[0]
    h_n = x[-1] - x[-2]
    y1_0, y1_n = 0.3, -1.2
    slope_rows = Boundary(
        e_0=0.5,
        c_n=0.5,
        b_0=3.0 / h_1 * ((y[1] - y[0]) / h_1 - y1_0),
        b_n=3.0 / h_n * (y1_n - (y[-1] - y[-2]) / h_n),
    )

    generic = Spline()
    named = Spline()
    assert interpolate_boundary(generic, CUBIC_POINTS, slope_rows) == len(CUBIC_POINTS)
    interpolate_y1(named, CUBIC_POINTS, y1_0, y1_n)
    assert np.allclose(generic.arrays()[2], named.arrays()[2])

    interpolate_boundary(generic, CUBIC_POINTS, Boundary())
    interpolate_natural(named, CUBIC_POINTS)
    assert generic.knots == named.knots


def test_boundary_rows_need_three_points() -> None:
    with pytest.raises(InterpolationError):
        interpolate_boundary(Spline(), [(0.0, 0.0), (1.0, 1.0)], Boundary())
