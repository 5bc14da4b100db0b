"""Tensor operations for tensorutils."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from . import shape as _shape
from ._status import StatusCode, check_status
from .tensor import Tensor, _TensorBase

logger = logging.getLogger(__name__)


def _check_axes(
    a_shape: Sequence[int],
    b_shape: Sequence[int],
    axes_a: Tuple[int, ...],
    axes_b: Tuple[int, ...],
    context: str,
) -> None:
    if len(axes_a) != len(axes_b):
        check_status(
            StatusCode.SHAPE_MISMATCH,
            context,
            f"axes must have the same size as the shapes: {axes_a} vs {axes_b}",
        )
    for axes, shape, name in ((axes_a, a_shape, "a"), (axes_b, b_shape, "b")):
        check_status(
            _shape.check_axes(axes, len(shape)),
            context,
            f"axes {axes} of {name} must be distinct axes of a rank-{len(shape)} tensor",
        )


def _check_extents(
    a_shape: Sequence[int],
    b_shape: Sequence[int],
    axes_a: Tuple[int, ...],
    axes_b: Tuple[int, ...],
    context: str,
) -> None:
    for i, j in zip(axes_a, axes_b):
        if a_shape[i] != b_shape[j]:
            check_status(
                StatusCode.SHAPE_MISMATCH,
                context,
                f"axis {i} of a has extent {a_shape[i]} but axis {j} of b has extent {b_shape[j]}",
            )


def _window(arr: NDArray, offsets: Sequence[int], context: str) -> NDArray:
    """Trailing block of ``arr`` starting at ``offsets`` (one per axis)."""
    offsets = _shape.normalize_index(offsets)
    if len(offsets) != arr.ndim:
        check_status(
            StatusCode.SHAPE_MISMATCH,
            context,
            f"offsets {offsets} must have one entry per axis of a rank-{arr.ndim} tensor",
        )
    check_status(
        _shape.check_index(arr.shape, offsets),
        context,
        f"offsets {offsets} out of range for shape {arr.shape}",
    )
    return arr[tuple(slice(o, None) for o in offsets)]


def dot(
    a: _TensorBase,
    b: _TensorBase,
    axes_a: Sequence[int],
    axes_b: Sequence[int],
    offsets: Optional[Sequence[int]] = None,
) -> Tensor:
    """Contract ``axes_a`` of ``a`` against ``axes_b`` of ``b``.

    Axes are paired positionally: ``axes_a[k]`` is summed together with
    ``axes_b[k]``. The result has the remaining axes of ``a`` in their
    original order followed by the remaining axes of ``b``; contracting every
    axis yields a scalar tensor. Elements are converted to ``a.dtype``.

    Args:
        a: First tensor
        b: Second tensor
        axes_a: Axes of ``a`` to contract
        axes_b: Axes of ``b`` to contract, same length as ``axes_a``
        offsets: Optional start index for every axis of ``a``. When given,
            ``a`` is replaced by its trailing block ``a[offsets[0]:,
            offsets[1]:, ...]`` before contracting, so ``b`` is contracted
            against a sub-region of ``a``.

    Returns:
        Contracted result tensor

    Raises:
        ShapeMismatch: If the axis lists differ in length, repeat an axis,
            or pair axes of different extents, or if ``offsets`` has the
            wrong length
        OutOfRange: If an axis or offset is out of range

    Examples:
        >>> # Matrix multiplication: C[i,k] = A[i,j] * B[j,k]
        >>> a = Tensor.ones((2, 3))
        >>> b = Tensor.ones((3, 4))
        >>> c = dot(a, b, (1,), (0,))
        >>> c.shape
        (2, 4)

        >>> # Inner product: sum over all indices
        >>> v1 = Tensor.from_numpy(np.array([1.0, 2.0, 3.0]))
        >>> v2 = Tensor.from_numpy(np.array([4.0, 5.0, 6.0]))
        >>> dot(v1, v2, (0,), (0,))()  # 1*4 + 2*5 + 3*6 = 32
        np.float64(32.0)
    """
    axes_a = _shape.normalize_index(axes_a)
    axes_b = _shape.normalize_index(axes_b)
    _check_axes(a.shape, b.shape, axes_a, axes_b, "dot")

    a_arr = a.to_numpy()
    if offsets is not None:
        a_arr = _window(a_arr, offsets, "dot")
    b_arr = b.to_numpy()
    _check_extents(a_arr.shape, b_arr.shape, axes_a, axes_b, "dot")

    result = np.tensordot(a_arr, b_arr, axes=(list(axes_a), list(axes_b)))
    logger.debug(
        "dot %s x %s over %s/%s -> %s", a.shape, b.shape, axes_a, axes_b, result.shape
    )
    return Tensor.from_numpy(result, dtype=a.dtype)
