"""Dense N-dimensional tensors with checked indexing, contraction and file I/O.

This package provides a tensor type that owns a contiguous row-major buffer
and validates every index, shape and rank before touching it. Failures are
reported with four distinct exceptions: :class:`ShapeMismatch`,
:class:`RankMismatch`, :class:`OutOfRange` and :class:`UnableToOpenFile`.

Examples:
    >>> from tensorutils import Tensor, dot
    >>> a = Tensor.ones((2, 3))
    >>> b = Tensor.ones((3, 4))
    >>> c = dot(a, b, (1,), (0,))
    >>> c.shape
    (2, 4)
"""

import logging

from ._status import (
    OutOfRange,
    RankMismatch,
    ShapeMismatch,
    StatusCode,
    TensorUtilsError,
    UnableToOpenFile,
)
from .config import TensorUtilsConfig, get_config, set_config
from .dtypes import EXTENSIONS, SUPPORTED_DTYPES
from .ops import dot
from .serialization import load, save
from .tensor import ARBITRARY_RANK, Tensor, TensorView

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Tensor",
    "TensorView",
    "ARBITRARY_RANK",
    "dot",
    "load",
    "save",
    "EXTENSIONS",
    "SUPPORTED_DTYPES",
    "TensorUtilsConfig",
    "get_config",
    "set_config",
    "TensorUtilsError",
    "UnableToOpenFile",
    "ShapeMismatch",
    "RankMismatch",
    "OutOfRange",
    "StatusCode",
]

__version__ = "0.1.0"
