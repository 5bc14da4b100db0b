"""Status codes and error handling for tensorutils."""

from enum import IntEnum
from typing import Optional


class StatusCode(IntEnum):
    """Status codes returned by the shape validators."""

    SUCCESS = 0
    SHAPE_MISMATCH = -1
    INDEX_OUT_OF_BOUNDS = -2
    RANK_MISMATCH = -3
    INVALID_PERMUTATION = -4
    UNABLE_TO_OPEN_FILE = -5


class TensorUtilsError(Exception):
    """Base exception for tensorutils errors."""

    pass


class UnableToOpenFile(TensorUtilsError, OSError):
    """A file could not be opened for reading or writing."""

    pass


class ShapeMismatch(TensorUtilsError, ValueError):
    """An operation was called with incompatible shapes or too many indices.

    Out-of-range indices raise :class:`OutOfRange` instead, and misuse of a
    fixed-rank tensor raises :class:`RankMismatch`.
    """

    pass


class RankMismatch(TensorUtilsError, ValueError):
    """An operation would change the rank of a fixed-rank tensor."""

    pass


class OutOfRange(TensorUtilsError, IndexError):
    """An index, axis or offset component is outside its valid range."""

    pass


_ERRORS = {
    StatusCode.SHAPE_MISMATCH: ShapeMismatch,
    StatusCode.INDEX_OUT_OF_BOUNDS: OutOfRange,
    StatusCode.RANK_MISMATCH: RankMismatch,
    StatusCode.INVALID_PERMUTATION: ShapeMismatch,
    StatusCode.UNABLE_TO_OPEN_FILE: UnableToOpenFile,
}


def check_status(status: int, context: str = "", detail: Optional[str] = None) -> None:
    """Raise the exception matching ``status`` if it indicates an error.

    Args:
        status: Status code from a validator
        context: Description of the operation for the error message
        detail: Optional explanation appended to the message

    Raises:
        ShapeMismatch, RankMismatch, OutOfRange, UnableToOpenFile: According
            to ``status``.
    """
    if status != StatusCode.SUCCESS:
        code = StatusCode(status)
        msg = detail if detail else code.name
        if context:
            msg = f"{context}: {msg}"
        raise _ERRORS[code](msg)
