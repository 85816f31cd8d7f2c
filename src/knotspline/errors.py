"""Error kinds raised by the spline core."""
from __future__ import annotations

import enum
from typing import Optional


class SplineErrorCode(enum.IntEnum):
    NONE = 0
    SEGMENT = 1
    FILE_READ = 2
    FILE_FORMAT = 3
    FILE_WRITE = 4
    UNDEFINED = 5
    INTERPOLATION = 6

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    SplineErrorCode.NONE: "Success",
    SplineErrorCode.SEGMENT: "Invalid spline segment",
    SplineErrorCode.FILE_READ: "Failed to read spline from file",
    SplineErrorCode.FILE_FORMAT: "Invalid spline file format",
    SplineErrorCode.FILE_WRITE: "Failed to write spline to file",
    SplineErrorCode.UNDEFINED: "Spline undefined at value",
    SplineErrorCode.INTERPOLATION: "Spline interpolation failed",
}


class SplineError(Exception):
    """Base class for spline failures.

    ``code`` keeps the numeric error kind so callers (and the CLI exit status)
    can tell failures apart without matching on the exception type. The
    underlying cause, if any, is attached with ``raise ... from``.
    """

    code = SplineErrorCode.NONE

    def __init__(self, what: Optional[str] = None) -> None:
        self.what = what
        message = self.code.description
        if what:
            message = f"{message}: {what}"
        super().__init__(message)


class SegmentError(SplineError, IndexError):
    code = SplineErrorCode.SEGMENT


class FileReadError(SplineError):
    code = SplineErrorCode.FILE_READ


class FileFormatError(SplineError, ValueError):
    code = SplineErrorCode.FILE_FORMAT


class FileWriteError(SplineError):
    code = SplineErrorCode.FILE_WRITE


class UndefinedError(SplineError, ValueError):
    code = SplineErrorCode.UNDEFINED


class InterpolationError(SplineError, ValueError):
    code = SplineErrorCode.INTERPOLATION
