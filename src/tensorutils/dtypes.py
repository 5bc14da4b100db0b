"""Supported element types and their file extensions."""

from __future__ import annotations

from typing import Any, Dict

import numpy as np

# Extension -> element type. ``.ul``/``.ull`` and ``.l``/``.ll`` name the
# same 64-bit types.
EXTENSIONS: Dict[str, np.dtype] = {
    ".f32": np.dtype(np.float32),
    ".f64": np.dtype(np.float64),
    ".f80": np.dtype(np.longdouble),
    ".uc": np.dtype(np.uint8),
    ".sc": np.dtype(np.int8),
    ".us": np.dtype(np.uint16),
    ".u": np.dtype(np.uint32),
    ".ul": np.dtype(np.uint64),
    ".ull": np.dtype(np.uint64),
    ".s": np.dtype(np.int16),
    ".int": np.dtype(np.int32),
    ".l": np.dtype(np.int64),
    ".ll": np.dtype(np.int64),
}

SUPPORTED_DTYPES = frozenset(EXTENSIONS.values())

def normalize_dtype(dtype: Any) -> np.dtype:
    """Convert ``dtype`` to a supported numpy dtype.

    Args:
        dtype: Anything accepted by ``numpy.dtype``

    Returns:
        The normalized dtype

    Raises:
        TypeError: If the dtype is not a supported element type
    """
    dt = np.dtype(dtype)
    if dt not in SUPPORTED_DTYPES:
        raise TypeError(f"Unsupported element type: {dt}")
    return dt


def dtype_for_extension(extension: str) -> np.dtype:
    """Element type stored in binary files with ``extension``."""
    try:
        return EXTENSIONS[extension.lower()]
    except KeyError:
        raise ValueError(f"Unknown tensor file extension: {extension!r}") from None
