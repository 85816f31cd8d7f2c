"""The cubic spline aggregate: knot storage, search and evaluation."""
from __future__ import annotations

import threading
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .errors import SegmentError, UndefinedError
from .knot import EvalType, Knot, knot_eval
from .search import find_segment_bisect, find_segment_linear
from .segment import Segment


class Spline:
    """Cubic spline defined by a sequence of knots sorted strictly by ``x``.

    Knots are stored internally and handed out by value: :attr:`knots` and
    :meth:`knot` return fresh :class:`Knot` instances, so no caller holds a
    reference into the storage that a later insertion or interpolation could
    relocate. All access goes through an internal re-entrant lock, which
    keeps a rebuild from interleaving with a concurrent evaluation on the
    same instance.
    """

    def __init__(self, knots: Optional[Iterable[Knot]] = None) -> None:
        self._lock = threading.RLock()
        self._x = np.zeros(0)
        self._y = np.zeros(0)
        self._y2 = np.zeros(0)
        for knot in knots or ():
            self.add_knot(knot)

    @classmethod
    def from_points(cls, points, spline_type: str = "natural", **params: float) -> "Spline":
        """Interpolate *points* into a new spline (see :mod:`knotspline.interpolation`)."""

        from .interpolation import interpolate

        spline = cls()
        interpolate(spline, points, spline_type, **params)
        return spline

    def __len__(self) -> int:
        return self._x.size

    def __iter__(self) -> Iterator[Knot]:
        return iter(self.knots)

    def __repr__(self) -> str:
        return f"Spline(num_knots={self.num_knots})"

    @property
    def num_knots(self) -> int:
        return self._x.size

    @property
    def num_segments(self) -> int:
        n = self._x.size
        return n - 1 if n > 0 else 0

    @property
    def knots(self) -> Tuple[Knot, ...]:
        with self._lock:
            return tuple(self._knot(i) for i in range(self._x.size))

    @property
    def x_min(self) -> float:
        return float(self._x[0]) if self._x.size else float("nan")

    @property
    def x_max(self) -> float:
        return float(self._x[-1]) if self._x.size else float("nan")

    def knot(self, index: int) -> Knot:
        with self._lock:
            if not -self._x.size <= index < self._x.size:
                raise IndexError(f"knot index {index} out of range")
            return self._knot(index)

    def arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Copies of the ``(x, y, y2)`` knot columns."""

        with self._lock:
            return self._x.copy(), self._y.copy(), self._y2.copy()

    def clear(self) -> None:
        with self._lock:
            self._x = np.zeros(0)
            self._y = np.zeros(0)
            self._y2 = np.zeros(0)

    def set_knots(self, x, y, y2) -> int:
        """Replace all knots at once; *x* must be strictly increasing."""

        x = np.array(x, dtype=float, ndmin=1)
        y = np.array(y, dtype=float, ndmin=1)
        y2 = np.array(y2, dtype=float, ndmin=1)
        if not x.shape == y.shape == y2.shape or x.ndim != 1:
            raise ValueError("knot columns must be 1-D arrays of equal length")
        if np.any(np.diff(x) <= 0.0):
            raise ValueError("knot abscissas must be strictly increasing")
        with self._lock:
            self._x, self._y, self._y2 = x, y, y2
            return self._x.size

    def add_knot(self, knot: Knot) -> int:
        """Insert *knot* keeping the sort order and return the knot count.

        A knot already present at the same location is overwritten in place.
        """

        with self._lock:
            n = self._x.size
            if n and self._x[-1] >= knot.x:
                try:
                    i = find_segment_bisect(self._x, knot.x)
                except UndefinedError:
                    i = -1
                if i >= 0 and self._x[i] == knot.x:
                    self._y[i] = knot.y
                    self._y2[i] = knot.y2
                    return n
                if self._x[i + 1] == knot.x:
                    self._y[i + 1] = knot.y
                    self._y2[i + 1] = knot.y2
                    return n
                position = i + 1
            else:
                position = n
            self._x = np.insert(self._x, position, knot.x)
            self._y = np.insert(self._y, position, knot.y)
            self._y2 = np.insert(self._y2, position, knot.y2)
            return self._x.size

    def segment(self, index: int) -> Segment:
        """Explicit polynomial coefficients of segment *index*."""

        with self._lock:
            if not 0 <= index < self.num_segments:
                raise SegmentError(str(index))
            return Segment.from_knots(self._knot(index), self._knot(index + 1))

    def segments(self) -> List[Segment]:
        with self._lock:
            return [self.segment(i) for i in range(self.num_segments)]

    def find_segment(self, x: float) -> int:
        return self.find_segment_bisect(x)

    def find_segment_bisect(
        self, x: float, index_min: int = 0, index_max: Optional[int] = None
    ) -> int:
        with self._lock:
            return find_segment_bisect(self._x, x, index_min, index_max)

    def find_segment_linear(self, x: float, index_start: int = 0) -> int:
        with self._lock:
            return find_segment_linear(self._x, x, index_start)

    def evaluate(self, x: float, eval_type: EvalType = EvalType.BASE) -> float:
        """Value (or derivative) at *x*, NaN where the spline is undefined."""

        return self.evaluate_bisect(x, eval_type)

    def evaluate_bisect(
        self,
        x: float,
        eval_type: EvalType = EvalType.BASE,
        index_min: int = 0,
        index_max: Optional[int] = None,
    ) -> float:
        eval_type = EvalType(eval_type)
        with self._lock:
            try:
                i = find_segment_bisect(self._x, x, index_min, index_max)
            except UndefinedError:
                return float("nan")
            return knot_eval(self._knot(i), self._knot(i + 1), eval_type, x)

    def evaluate_linear(
        self, x: float, eval_type: EvalType = EvalType.BASE, index: int = 0
    ) -> Tuple[float, int]:
        """Evaluate at *x* searching linearly from segment *index*.

        Returns ``(value, segment_index)``; feed the index back into the next
        call for sequential queries. Where the spline is undefined the value
        is NaN and the index is returned unchanged.
        """

        eval_type = EvalType(eval_type)
        with self._lock:
            try:
                i = find_segment_linear(self._x, x, index)
            except UndefinedError:
                return float("nan"), index
            return knot_eval(self._knot(i), self._knot(i + 1), eval_type, x), i

    def sample(self, xs, eval_type: EvalType = EvalType.BASE) -> np.ndarray:
        """Evaluate at every location in *xs*, reusing the search hint."""

        xs = np.asarray(xs, dtype=float)
        values = np.empty(xs.size)
        index = 0
        with self._lock:
            for k, x in enumerate(xs.ravel()):
                values[k], index = self.evaluate_linear(float(x), eval_type, index)
        return values.reshape(xs.shape)

    def _knot(self, index: int) -> Knot:
        return Knot(float(self._x[index]), float(self._y[index]), float(self._y2[index]))
