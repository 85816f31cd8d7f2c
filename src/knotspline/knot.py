"""Points, knots and the knot-pair evaluation primitive."""
from __future__ import annotations

import enum
from dataclasses import dataclass


class EvalType(str, enum.Enum):
    """What to compute when evaluating a spline at a location."""

    BASE = "base"
    FIRST = "first"
    SECOND = "second"


@dataclass(frozen=True)
class Point:
    """An (x, y) interpolation sample."""

    x: float
    y: float

    def format(self) -> str:
        return f"{format_value(self.x)} {format_value(self.y)}"


@dataclass(frozen=True)
class Knot:
    """A spline control point with its curvature ``y2`` (second derivative)."""

    x: float
    y: float
    y2: float = 0.0

    def format(self) -> str:
        return f"{format_value(self.x)} {format_value(self.y)} {format_value(self.y2)}"


def knot_eval(knot_min: Knot, knot_max: Knot, eval_type: EvalType, x: float) -> float:
    """Evaluate the cubic defined by two adjacent knots at *x*.

    The interval bounds are neither checked nor enforced, so locations
    outside ``[knot_min.x, knot_max.x]`` extrapolate the same polynomial.
    """

    h_i = knot_max.x - knot_min.x
    a = (knot_max.x - x) / h_i
    b = (x - knot_min.x) / h_i

    if eval_type is EvalType.FIRST:
        return (
            (knot_max.y - knot_min.y) / h_i
            - 0.5 * a * a * h_i * knot_min.y2
            + 0.5 * b * b * h_i * knot_max.y2
            - (knot_max.y2 - knot_min.y2) * h_i / 6.0
        )
    if eval_type is EvalType.SECOND:
        return a * knot_min.y2 + b * knot_max.y2
    return (
        a * knot_min.y
        + b * knot_max.y
        + ((a * a * a - a) * knot_min.y2 + (b * b * b - b) * knot_max.y2) * h_i * h_i / 6.0
    )


def format_value(value: float) -> str:
    # repr keeps full precision so written knots read back unchanged
    return f"{float(value)!r:>10}"
