"""Line-oriented text persistence for knots and interpolation samples.

Knot files hold one ``x y y2`` row per knot; blank lines and text after a
``#`` are ignored on read. Sample files hold ``x y`` rows. ``"-"``
stands for stdin/stdout wherever a path is accepted.
"""
from __future__ import annotations

import contextlib
import io
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Sequence, TextIO

import numpy as np
import pandas as pd

from .errors import FileFormatError, FileReadError, FileWriteError
from .knot import Knot, Point, format_value
from .spline import Spline

logger = logging.getLogger(__name__)

STDIO = "-"


@contextlib.contextmanager
def _open(path: str | Path, mode: str) -> Iterator[TextIO]:
    if str(path) == STDIO:
        yield sys.stdin if mode == "r" else sys.stdout
        return
    with Path(path).open(mode, encoding="utf-8") as handle:
        yield handle


def read_knots(path: str | Path = STDIO) -> Spline:
    """Read a knot file into a new :class:`Spline`.

    Knots are inserted one by one, so unsorted files come out sorted and a
    repeated abscissa keeps the last row given for it. Text after a ``#``
    is ignored, as are fields beyond the third.

    Raises
    ------
    FileReadError
        If the file cannot be opened or read.
    FileFormatError
        On the first row that does not start with three floats.
    """

    spline = Spline()
    try:
        with _open(path, "r") as handle:
            for line_no, line in enumerate(handle, start=1):
                fields = line.split("#", 1)[0].split()
                if not fields:
                    continue
                spline.add_knot(_parse_knot(fields, path, line_no))
    except OSError as exc:
        raise FileReadError(str(path)) from exc
    logger.debug("Read %d knots from %s", spline.num_knots, path)
    return spline


def _parse_knot(fields: Sequence[str], path: str | Path, line_no: int) -> Knot:
    if len(fields) < 3:
        raise FileFormatError(f"{path}:{line_no}: expected 3 fields, got {len(fields)}")
    try:
        x, y, y2 = (float(value) for value in fields[:3])
    except ValueError as exc:
        raise FileFormatError(f"{path}:{line_no}: {exc}") from exc
    return Knot(x, y, y2)


def write_knots(spline: Spline, path: str | Path = STDIO) -> int:
    """Write one padded ``x y y2`` row per knot and return the knot count."""

    knots = spline.knots
    try:
        with _open(path, "w") as handle:
            for knot in knots:
                handle.write(knot.format() + "\n")
    except OSError as exc:
        raise FileWriteError(str(path)) from exc
    logger.debug("Wrote %d knots to %s", len(knots), path)
    return len(knots)


def read_points(path: str | Path = STDIO) -> List[Point]:
    """Read ``x y`` interpolation samples.

    Comment lines are ignored and rows whose first two fields are not
    numeric are skipped. Points are returned in file order.
    """

    try:
        with _open(path, "r") as handle:
            text = handle.read()
    except OSError as exc:
        raise FileReadError(str(path)) from exc

    frame = points_frame(text)
    points = [Point(float(x), float(y)) for x, y in frame.itertuples(index=False)]
    logger.debug("Read %d points from %s", len(points), path)
    return points


def points_frame(text: str) -> pd.DataFrame:
    """Parse whitespace separated sample rows into an ``x``/``y`` frame."""

    width = max((len(line.split("#", 1)[0].split()) for line in text.splitlines()), default=0)
    if width < 2:
        return pd.DataFrame({"x": pd.Series(dtype=float), "y": pd.Series(dtype=float)})
    raw = pd.read_csv(
        io.StringIO(text),
        sep=r"\s+",
        comment="#",
        header=None,
        names=list(range(width)),
        dtype=str,
    )
    frame = pd.DataFrame(
        {
            "x": pd.to_numeric(raw.iloc[:, 0], errors="coerce"),
            "y": pd.to_numeric(raw.iloc[:, 1], errors="coerce"),
        }
    )
    skipped = int(frame.isna().any(axis=1).sum())
    if skipped:
        logger.warning("Skipped %d unparseable sample rows", skipped)
    return frame.dropna().reset_index(drop=True)


def write_samples(xs: Sequence[float], values: Sequence[float], path: str | Path = STDIO) -> int:
    """Write ``x f(x)`` rows and return the number of rows written."""

    xs = np.asarray(xs, dtype=float)
    values = np.asarray(values, dtype=float)
    if xs.shape != values.shape:
        raise ValueError("xs and values must have the same shape")
    try:
        with _open(path, "w") as handle:
            for x, value in zip(xs, values):
                handle.write(f"{format_value(x)} {format_value(value)}\n")
    except OSError as exc:
        raise FileWriteError(str(path)) from exc
    return int(xs.size)
