"""Explicit polynomial view of a single spline segment."""
from __future__ import annotations

from dataclasses import dataclass

from .knot import EvalType, Knot, format_value


@dataclass(frozen=True)
class Segment:
    """Cubic ``a*(x-x0)**3 + b*(x-x0)**2 + c*(x-x0) + d``."""

    a: float
    b: float
    c: float
    d: float
    x0: float

    @staticmethod
    def from_knots(knot_min: Knot, knot_max: Knot) -> "Segment":
        x_1 = knot_max.x - knot_min.x
        a = (knot_max.y2 - knot_min.y2) / (6.0 * x_1)
        b = 0.5 * knot_min.y2
        c = (knot_max.y - a * x_1**3 - b * x_1**2 - knot_min.y) / x_1
        return Segment(a=a, b=b, c=c, d=knot_min.y, x0=knot_min.x)

    def evaluate(self, x: float, eval_type: EvalType = EvalType.BASE) -> float:
        eval_type = EvalType(eval_type)
        dx = x - self.x0
        if eval_type is EvalType.FIRST:
            return 3.0 * self.a * dx * dx + 2.0 * self.b * dx + self.c
        if eval_type is EvalType.SECOND:
            return 6.0 * self.a * dx + 2.0 * self.b
        return self.a * dx**3 + self.b * dx * dx + self.c * dx + self.d

    def format(self) -> str:
        return " ".join(format_value(value) for value in (self.a, self.b, self.c, self.d, self.x0))
