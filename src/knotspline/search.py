"""Segment locators over a sorted sequence of knot abscissas.

Both locators return the index ``i`` of the segment ``[x[i], x[i+1]]``
containing the query. A query sitting exactly on an interior knot belongs to
the segment starting there; the last knot belongs to the last segment. With
fewer than two knots every query is undefined.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .errors import UndefinedError


def find_segment_bisect(
    x_knots: Sequence[float],
    x: float,
    index_min: int = 0,
    index_max: Optional[int] = None,
) -> int:
    """Locate *x* by repeated halving of ``[index_min, index_max]``.

    The knot index range is clamped to the valid bounds. Queries outside
    ``[x_knots[index_min], x_knots[index_max]]`` are undefined. Optimal for
    random-order queries.
    """

    n = len(x_knots)
    if n > 1:
        if index_max is None:
            index_max = n - 1
        i = min(max(index_min, 0), n - 2)
        j = min(index_max, n - 1)
        if j > i and x_knots[i] <= x <= x_knots[j]:
            while j - i > 1:
                k = (i + j) >> 1
                if x_knots[k] > x:
                    j = k
                else:
                    i = k
            return i

    raise UndefinedError(f"{x:g}")


def find_segment_linear(x_knots: Sequence[float], x: float, index_start: int = 0) -> int:
    """Locate *x* by walking one knot at a time from *index_start*.

    Amortised O(1) when consecutive queries move monotonically, as the
    previous result is the natural hint for the next call.
    """

    n = len(x_knots)
    if n > 1 and x_knots[0] <= x <= x_knots[n - 1]:
        i = min(max(index_start, 0), n - 2)
        while i > 0 and x < x_knots[i]:
            i -= 1
        while i < n - 2 and x >= x_knots[i + 1]:
            i += 1
        return i

    raise UndefinedError(f"{x:g}")
