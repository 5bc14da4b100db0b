"""Binary and text file formats for tensors.

The file extension selects the format. Each typed extension (``.f64``,
``.int``, ...) is a binary file holding elements of that type:

    rank      uint64
    extents   rank x uint64
    elements  prod(extents) x element type, row-major

A tensor is written to and read from the typed extension of its own element
type only; any other typed extension raises ``TypeError``.

The text extension (``.txt`` unless configured otherwise) holds the rank on
the first line, the extents on the second line and one element per line
after that.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from . import shape as _shape
from ._status import ShapeMismatch, StatusCode, check_status
from .config import get_config
from .dtypes import dtype_for_extension, normalize_dtype
from .tensor import Tensor, _TensorBase

logger = logging.getLogger(__name__)

_HEADER_WIDTH = 8


def _codec(path: str) -> Optional[np.dtype]:
    """Element type of a binary file at ``path``, or None for a text file."""
    ext = os.path.splitext(path)[1].lower()
    if ext == get_config().text_extension:
        return None
    return dtype_for_extension(ext)


def _file_dtype(dtype: np.dtype) -> np.dtype:
    if dtype == np.longdouble:
        return dtype
    return dtype.newbyteorder(get_config().byteorder_char)


def _int_byteorder() -> str:
    order = get_config().byteorder
    return sys.byteorder if order == "native" else order


def _read_bytes(path: str, mode: str) -> Any:
    try:
        with open(path, mode) as f:
            return f.read()
    except OSError as exc:
        check_status(
            StatusCode.UNABLE_TO_OPEN_FILE, "read", f"unable to open {path!r}: {exc.strerror}"
        )


def _write_bytes(path: str, mode: str, payload: Any) -> None:
    try:
        with open(path, mode) as f:
            f.write(payload)
    except OSError as exc:
        check_status(
            StatusCode.UNABLE_TO_OPEN_FILE, "write", f"unable to open {path!r}: {exc.strerror}"
        )


def _check_file_type(path: str, file_dtype: np.dtype, dtype: np.dtype, context: str) -> None:
    """A typed extension only holds elements of its own type."""
    if dtype != file_dtype:
        raise TypeError(f"{context}: {path!r} holds {file_dtype} elements, not {dtype}")


def _corrupted(path: str, detail: str) -> None:
    check_status(StatusCode.SHAPE_MISMATCH, "read", f"{path!r}: {detail}")


# ----------------------------------------------------------------------
# Binary format
# ----------------------------------------------------------------------


def _encode_binary(tensor: _TensorBase, file_dtype: np.dtype) -> bytes:
    order = _int_byteorder()
    header = b"".join(
        n.to_bytes(_HEADER_WIDTH, order) for n in (tensor.ndim, *tensor.shape)
    )
    body = tensor._data.astype(_file_dtype(file_dtype)).tobytes()
    return header + body


def _decode_binary(raw: bytes, path: str, file_dtype: np.dtype) -> Tuple[Tuple[int, ...], NDArray]:
    order = _int_byteorder()
    if len(raw) < _HEADER_WIDTH:
        _corrupted(path, "truncated header")
    rank = int.from_bytes(raw[:_HEADER_WIDTH], order)
    header_size = _HEADER_WIDTH * (rank + 1)
    if len(raw) < header_size:
        _corrupted(path, f"header declares rank {rank} but the file is too short")
    shape = tuple(
        int.from_bytes(raw[i:i + _HEADER_WIDTH], order)
        for i in range(_HEADER_WIDTH, header_size, _HEADER_WIDTH)
    )
    count = _shape.element_count(shape)
    body = raw[header_size:]
    stored = _file_dtype(file_dtype)
    if len(body) != count * stored.itemsize:
        _corrupted(
            path,
            f"shape {shape} declares {count} elements but {len(body)} bytes of "
            f"{stored.itemsize}-byte data are present",
        )
    if count == 0:
        return shape, np.empty(0, dtype=file_dtype)
    return shape, np.frombuffer(body, dtype=stored).astype(file_dtype)


# ----------------------------------------------------------------------
# Text format
# ----------------------------------------------------------------------


def _encode_text(tensor: _TensorBase) -> str:
    lines: List[str] = [str(tensor.ndim), " ".join(str(n) for n in tensor.shape)]
    lines.extend(str(value) for value in tensor._data)
    return "\n".join(lines) + "\n"


def _decode_text(text: str, path: str, dtype: np.dtype) -> Tuple[Tuple[int, ...], NDArray]:
    lines = text.splitlines()
    if len(lines) < 2:
        _corrupted(path, "missing header")
    try:
        rank = int(lines[0])
        shape = tuple(int(n) for n in lines[1].split())
    except ValueError as exc:
        raise ShapeMismatch(f"read: {path!r}: malformed header") from exc
    if len(shape) != rank or any(n < 0 for n in shape):
        _corrupted(path, f"header declares rank {rank} but extents {shape}")
    count = _shape.element_count(shape)
    tokens = " ".join(lines[2:]).split()
    if len(tokens) != count:
        _corrupted(path, f"shape {shape} declares {count} elements but {len(tokens)} are present")
    try:
        data = np.array(tokens, dtype=dtype) if tokens else np.empty(0, dtype=dtype)
    except (ValueError, OverflowError) as exc:
        raise ShapeMismatch(f"read: {path!r}: unparsable element") from exc
    return shape, data


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------


def save(tensor: _TensorBase, path: str) -> None:
    """Write ``tensor`` to ``path`` in the format selected by the extension.

    A typed extension must name the tensor's own element type.

    Raises:
        UnableToOpenFile: If ``path`` cannot be opened for writing
        TypeError: If the extension belongs to another element type
        ValueError: If the extension is not a known tensor format
    """
    path = os.fspath(path)
    file_dtype = _codec(path)
    if file_dtype is None:
        _write_bytes(path, "w", _encode_text(tensor))
    else:
        _check_file_type(path, file_dtype, tensor.dtype, "write")
        _write_bytes(path, "wb", _encode_binary(tensor, file_dtype))
    logger.debug("wrote %s shape=%s to %s", type(tensor).__name__, tensor.shape, path)


def load(path: str, dtype: Any = None, rank: Optional[int] = None) -> Tensor:
    """Read the tensor stored at ``path``.

    Args:
        path: File to read; the extension selects the format
        dtype: Element type of the result. Defaults to the type of a binary
            file, or float64 for a text file. A binary file only loads into
            its own type.
        rank: Fixed rank of the result, or None

    Returns:
        New tensor

    Raises:
        UnableToOpenFile: If ``path`` cannot be opened
        ShapeMismatch: If the stored shape does not match the stored data
        RankMismatch: If ``rank`` is given and the stored rank differs
        TypeError: If ``dtype`` differs from the type of a binary file
        ValueError: If the extension is not a known tensor format
    """
    path = os.fspath(path)
    file_dtype = _codec(path)
    if dtype is not None:
        dtype = normalize_dtype(dtype)
    if file_dtype is None:
        if dtype is None:
            dtype = np.dtype(np.float64)
        shape, data = _decode_text(_read_bytes(path, "r"), path, dtype)
    else:
        if dtype is None:
            dtype = file_dtype
        _check_file_type(path, file_dtype, dtype, "read")
        shape, data = _decode_binary(_read_bytes(path, "rb"), path, file_dtype)
    logger.debug("read shape=%s dtype=%s from %s", shape, dtype, path)
    return Tensor._wrap(data, shape, rank, "read")
