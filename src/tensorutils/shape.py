"""Shape and stride arithmetic for dense row-major tensors.

All functions here are pure: they map shapes and multi-indices to offsets
into a flat buffer and decide whether shapes are compatible for a given
operation. Validators return a :class:`StatusCode` so callers can decide how
to report the failure; :func:`locate` and :func:`normalize_shape` raise
directly.
"""

from __future__ import annotations

import math
import operator
from typing import Iterable, Sequence, Tuple

from ._status import StatusCode, check_status

Shape = Tuple[int, ...]


def _as_int(value: object, what: str) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(f"{what} must be an integer, got {type(value).__name__}") from None


def normalize_shape(shape: Iterable[int]) -> Shape:
    """Convert ``shape`` to a tuple of non-negative ints.

    Args:
        shape: Sequence of per-axis extents

    Returns:
        The shape as a tuple

    Raises:
        ShapeMismatch: If an extent is negative
    """
    if isinstance(shape, int):
        shape = (shape,)
    extents = tuple(_as_int(n, "extent") for n in shape)
    if any(n < 0 for n in extents):
        check_status(StatusCode.SHAPE_MISMATCH, "shape", f"negative extent in {extents}")
    return extents


def normalize_index(index: Iterable[int]) -> Tuple[int, ...]:
    return tuple(_as_int(i, "index") for i in index)


def element_count(shape: Sequence[int]) -> int:
    """Number of elements of a tensor with ``shape`` (1 for a scalar)."""
    return math.prod(shape)


def row_major_strides(shape: Sequence[int]) -> Shape:
    """Element strides of ``shape`` with the last axis varying fastest."""
    strides = [1] * len(shape)
    for i in range(len(shape) - 2, -1, -1):
        strides[i] = strides[i + 1] * shape[i + 1]
    return tuple(strides)


def check_index(shape: Sequence[int], index: Sequence[int]) -> StatusCode:
    """Validate a full or partial ``index`` against ``shape``.

    The length is checked before the components, so an index with too many
    entries is a shape error even if some entries are also out of range.
    """
    if len(index) > len(shape):
        return StatusCode.SHAPE_MISMATCH
    for i, extent in zip(index, shape):
        if not 0 <= i < extent:
            return StatusCode.INDEX_OUT_OF_BOUNDS
    return StatusCode.SUCCESS


def linear_offset(index: Sequence[int], strides: Sequence[int]) -> int:
    """Offset of ``index`` in a flat buffer with ``strides``."""
    offset = 0
    for i, stride in zip(index, strides):
        offset += i * stride
    return offset


def locate(shape: Sequence[int], index: Sequence[int], context: str = "index") -> Tuple[int, Shape]:
    """Resolve ``index`` to a buffer offset and the residual trailing shape.

    Args:
        shape: Shape of the indexed tensor
        index: Full or partial multi-index
        context: Operation name used in error messages

    Returns:
        ``(offset, residual_shape)``. A full index yields ``()`` as residual
        shape; a partial index yields ``shape[len(index):]``, which spans a
        contiguous range of ``element_count(residual_shape)`` elements.

    Raises:
        ShapeMismatch: If ``index`` has more entries than ``shape``
        OutOfRange: If a component is outside ``[0, extent)``
    """
    index = normalize_index(index)
    status = check_index(shape, index)
    if status == StatusCode.SHAPE_MISMATCH:
        check_status(
            status, context, f"too many indices: {len(index)} given for rank {len(shape)}"
        )
    check_status(status, context, f"index {index} out of range for shape {tuple(shape)}")
    return linear_offset(index, row_major_strides(shape)), tuple(shape[len(index):])


def check_same_count(a: Sequence[int], b: Sequence[int]) -> StatusCode:
    """Element-count compatibility: shapes may differ, totals may not."""
    if element_count(a) != element_count(b):
        return StatusCode.SHAPE_MISMATCH
    return StatusCode.SUCCESS


def check_permutation(perm: Sequence[int], rank: int) -> StatusCode:
    """Check that ``perm`` is a permutation of ``0..rank-1``."""
    if len(perm) != rank or sorted(perm) != list(range(rank)):
        return StatusCode.INVALID_PERMUTATION
    return StatusCode.SUCCESS


def check_axes(axes: Sequence[int], rank: int) -> StatusCode:
    """Check a list of distinct axes of a tensor with ``rank`` axes."""
    if len(set(axes)) != len(axes):
        return StatusCode.SHAPE_MISMATCH
    for axis in axes:
        if not 0 <= axis < rank:
            return StatusCode.INDEX_OUT_OF_BOUNDS
    return StatusCode.SUCCESS


def permute_shape(shape: Sequence[int], perm: Sequence[int]) -> Shape:
    return tuple(shape[p] for p in perm)
