from __future__ import annotations

import numpy as np

from knotspline.knot import EvalType, Knot, Point, format_value, knot_eval
from knotspline.segment import Segment


def test_knot_eval_matches_closed_form() -> None:
    lo = Knot(0.0, 0.0, 0.0)
    hi = Knot(1.0, 1.0, -3.0)

    assert np.isclose(knot_eval(lo, hi, EvalType.BASE, 0.5), 0.6875)
    assert np.isclose(knot_eval(lo, hi, EvalType.FIRST, 0.5), 1.125)
    assert np.isclose(knot_eval(lo, hi, EvalType.SECOND, 0.5), -1.5)


def test_knot_eval_hits_knot_values() -> None:
    lo = Knot(1.0, 2.0, 0.4)
    hi = Knot(3.0, -1.0, 1.2)

    assert np.isclose(knot_eval(lo, hi, EvalType.BASE, 1.0), 2.0)
    assert np.isclose(knot_eval(lo, hi, EvalType.BASE, 3.0), -1.0)
    assert np.isclose(knot_eval(lo, hi, EvalType.SECOND, 1.0), 0.4)
    assert np.isclose(knot_eval(lo, hi, EvalType.SECOND, 3.0), 1.2)


def test_knot_eval_extrapolates_outside_interval() -> None:
    lo = Knot(0.0, 0.0, 2.0)
    hi = Knot(1.0, 1.0, 2.0)
    # constant curvature 2 through (0, 0) and (1, 1) is x**2
    assert np.isclose(knot_eval(lo, hi, EvalType.BASE, 2.0), 4.0)
    assert np.isclose(knot_eval(lo, hi, EvalType.FIRST, -1.0), -2.0)


def test_segment_coefficients() -> None:
    segment = Segment.from_knots(Knot(0.0, 0.0, 0.0), Knot(1.0, 1.0, -3.0))

    assert np.isclose(segment.a, -0.5)
    assert np.isclose(segment.b, 0.0)
    assert np.isclose(segment.c, 1.5)
    assert segment.d == 0.0
    assert segment.x0 == 0.0


def test_segment_evaluate_agrees_with_knot_eval() -> None:
    lo = Knot(-1.0, 0.3, 1.7)
    hi = Knot(0.5, -2.0, -0.4)
    segment = Segment.from_knots(lo, hi)

    for x in np.linspace(-1.0, 0.5, 7):
        for eval_type in EvalType:
            assert np.isclose(segment.evaluate(x, eval_type), knot_eval(lo, hi, eval_type, x))


def test_format_round_trips_values() -> None:
    knot = Knot(0.1, -2.0 / 3.0, 1e-12)
    fields = knot.format().split()

    assert [float(value) for value in fields] == [knot.x, knot.y, knot.y2]
    assert len(format_value(1.0)) == 10
    assert Point(1.0, 2.0).format().split() == ["1.0", "2.0"]
