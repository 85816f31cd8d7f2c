"""Univariate cubic spline interpolation and evaluation."""

from importlib.metadata import PackageNotFoundError, version

from .errors import (
    FileFormatError,
    FileReadError,
    FileWriteError,
    InterpolationError,
    SegmentError,
    SplineError,
    SplineErrorCode,
    UndefinedError,
)
from .interpolation import SplineType, interpolate
from .knot import EvalType, Knot, Point
from .knotfile import read_knots, read_points, write_knots
from .segment import Segment
from .spline import Spline

try:  # pragma: no cover - fallback when package metadata missing
    __version__ = version("knotspline")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "EvalType",
    "FileFormatError",
    "FileReadError",
    "FileWriteError",
    "InterpolationError",
    "Knot",
    "Point",
    "Segment",
    "SegmentError",
    "Spline",
    "SplineError",
    "SplineErrorCode",
    "SplineType",
    "UndefinedError",
    "interpolate",
    "read_knots",
    "read_points",
    "write_knots",
    "__version__",
]
