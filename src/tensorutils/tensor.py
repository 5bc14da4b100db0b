"""Tensor and TensorView classes for dense row-major tensors."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from . import shape as _shape
from ._status import StatusCode, check_status
from .dtypes import normalize_dtype

logger = logging.getLogger(__name__)

ARBITRARY_RANK = -1


def _normalize_rank(rank: Optional[int]) -> Optional[int]:
    if rank is None or rank == ARBITRARY_RANK:
        return None
    if rank < 0:
        raise ValueError(f"rank must be non-negative or {ARBITRARY_RANK}, got {rank}")
    return rank


class _TensorBase:
    """Read, write and compute operations shared by tensors and views.

    ``_data`` is always a contiguous one-dimensional array holding exactly
    ``element_count(_shape)`` elements in row-major order.
    """

    __slots__ = ("_data", "_shape")

    @property
    def shape(self) -> Tuple[int, ...]:
        """Shape of the tensor."""
        return self._shape

    @property
    def ndim(self) -> int:
        """Number of axes (the rank)."""
        return len(self._shape)

    @property
    def size(self) -> int:
        """Total number of elements."""
        return self._data.size

    @property
    def dtype(self) -> np.dtype:
        """Element type."""
        return self._data.dtype

    @property
    def strides(self) -> Tuple[int, ...]:
        """Row-major strides in elements (not bytes)."""
        return _shape.row_major_strides(self._shape)

    @property
    def fixed_rank(self) -> Optional[int]:
        """The rank this tensor is constrained to, or None."""
        return None

    def __len__(self) -> int:
        """Total number of elements."""
        return self._data.size

    def __iter__(self) -> Iterator[Any]:
        """Iterate over the elements in row-major order."""
        return iter(self._data)

    def __array__(self, dtype=None, copy=None) -> NDArray:
        arr = self.to_numpy()
        return arr if dtype is None else arr.astype(dtype)

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def __call__(self, *indices: int) -> Union[Any, "TensorView"]:
        """Access an element or a sub-tensor.

        Args:
            *indices: Full index (one per axis) or partial index (leading
                axes only)

        Returns:
            The element for a full index, otherwise a :class:`TensorView`
            over the trailing axes that shares this tensor's buffer.

        Raises:
            ShapeMismatch: If more indices than axes are given
            OutOfRange: If an index is outside its axis

        Examples:
            >>> t = Tensor((2, 3, 5, 7), fill=1.0)
            >>> t(1, 2).shape
            (5, 7)
            >>> t(1, 2, 4, 6)
            np.float64(1.0)
        """
        offset, residual = _shape.locate(self._shape, indices, "index")
        if len(indices) == len(self._shape):
            return self._data[offset]
        return TensorView(self._data, offset, residual)

    def __getitem__(self, key: Union[int, Tuple[int, ...]]) -> Union[Any, "TensorView"]:
        """``t[i]`` slices along the first axis; ``t[i, j, ...]`` is ``t(i, j, ...)``."""
        if isinstance(key, tuple):
            return self(*key)
        if not self._shape:
            check_status(StatusCode.SHAPE_MISMATCH, "slice", "cannot slice a scalar tensor")
        return self(key)

    def __setitem__(self, key: Union[int, Tuple[int, ...]], value: Any) -> None:
        """Write one element (full index) or a whole sub-tensor (partial index).

        A sub-tensor is filled with a scalar ``value`` or receives the
        elements of a tensor or array with the same element count.
        """
        indices = key if isinstance(key, tuple) else (key,)
        offset, residual = _shape.locate(self._shape, indices, "setitem")
        count = _shape.element_count(residual)
        target = self._data[offset:offset + count]
        if len(indices) == len(self._shape):
            values = np.asarray(value)
            if values.size != 1:
                check_status(
                    StatusCode.SHAPE_MISMATCH,
                    "setitem",
                    f"cannot store {values.size} values in the element at {indices}",
                )
            np.copyto(target, values.reshape(-1), casting="unsafe")
        else:
            np.copyto(target, self._source_values(residual, value, "setitem"), casting="unsafe")

    def _source_values(self, target_shape: Sequence[int], value: Any, context: str) -> NDArray:
        """Flat values to copy into a region of ``target_shape``."""
        if isinstance(value, _TensorBase):
            src_shape, data = value._shape, value._data
        else:
            data = np.asarray(value)
            if data.ndim == 0:
                return data
            src_shape, data = data.shape, data.reshape(-1)
        check_status(
            _shape.check_same_count(target_shape, src_shape),
            context,
            f"cannot fit {src_shape} into {tuple(target_shape)}: element counts differ",
        )
        return data

    # ------------------------------------------------------------------
    # Element-wise arithmetic
    # ------------------------------------------------------------------

    def _inplace(self, ufunc: np.ufunc, other: Any, context: str) -> "_TensorBase":
        operand = self._source_values(self._shape, other, context)
        ufunc(self._data, operand, out=self._data, casting="unsafe")
        return self

    def __iadd__(self, other: Any) -> "_TensorBase":
        return self._inplace(np.add, other, "+=")

    def __isub__(self, other: Any) -> "_TensorBase":
        return self._inplace(np.subtract, other, "-=")

    def __imul__(self, other: Any) -> "_TensorBase":
        return self._inplace(np.multiply, other, "*=")

    def __itruediv__(self, other: Any) -> "_TensorBase":
        # Integer tensors divide in floating point and truncate toward zero.
        return self._inplace(np.divide, other, "/=")

    def __add__(self, other: Any) -> "Tensor":
        return self.copy()._inplace(np.add, other, "+")

    def __sub__(self, other: Any) -> "Tensor":
        return self.copy()._inplace(np.subtract, other, "-")

    def __mul__(self, other: Any) -> "Tensor":
        return self.copy()._inplace(np.multiply, other, "*")

    def __truediv__(self, other: Any) -> "Tensor":
        return self.copy()._inplace(np.divide, other, "/")

    __radd__ = __add__
    __rmul__ = __mul__

    # ------------------------------------------------------------------
    # Whole-tensor operations
    # ------------------------------------------------------------------

    def fill(self, value: Any) -> "_TensorBase":
        """Fill the tensor with a value (in-place).

        Args:
            value: Value to fill the tensor with, converted to :attr:`dtype`

        Returns:
            self (for method chaining)
        """
        np.copyto(self._data, np.asarray(value), casting="unsafe")
        return self

    def assign(
        self,
        source: Any,
        dest_indices: Sequence[int] = (),
        src_indices: Sequence[int] = (),
    ) -> "_TensorBase":
        """Copy a sub-tensor of ``source`` into a sub-tensor of this tensor.

        Both sides are selected by partial indices and only need the same
        number of elements; values are copied positionally in the row-major
        order of each side and converted to :attr:`dtype`.

        Args:
            source: Tensor (or array) to copy from
            dest_indices: Partial index into this tensor
            src_indices: Partial index into ``source``

        Returns:
            self (for method chaining)

        Raises:
            ShapeMismatch: If the selected sub-tensors differ in element count
                or an index is too long
            OutOfRange: If an index component is out of range

        Examples:
            >>> a = Tensor((2, 3, 5, 7), fill=1.0)
            >>> c = Tensor((6, 35), fill=2.0)
            >>> a.assign(c, (1, 2), (0,))(1, 2, 0, 0)
            np.float64(2.0)
        """
        if not isinstance(source, _TensorBase):
            source = Tensor.from_numpy(np.asarray(source))
        d_offset, d_shape = _shape.locate(self._shape, dest_indices, "assign")
        s_offset, s_shape = _shape.locate(source._shape, src_indices, "assign")
        check_status(
            _shape.check_same_count(d_shape, s_shape),
            "assign",
            f"sub-tensors of shape {d_shape} and {s_shape} have different element counts",
        )
        count = _shape.element_count(d_shape)
        np.copyto(
            self._data[d_offset:d_offset + count],
            source._data[s_offset:s_offset + count],
            casting="unsafe",
        )
        return self

    def transpose(self, perm: Sequence[int]) -> "Tensor":
        """Permute the axes (returns new tensor).

        Args:
            perm: Permutation of ``(0, 1, ..., ndim - 1)``. ``perm[i]`` is the
                axis of this tensor that becomes axis ``i`` of the result.

        Returns:
            New tensor with permuted axes

        Raises:
            ShapeMismatch: If ``perm`` is not a permutation of the axes
        """
        perm = _shape.normalize_index(perm)
        check_status(
            _shape.check_permutation(perm, self.ndim),
            "transpose",
            f"{perm} is not a permutation of (0, 1, ..., {self.ndim - 1})",
        )
        data = self._data.reshape(self._shape).transpose(perm).flatten()
        return Tensor._wrap(data, _shape.permute_shape(self._shape, perm), self.fixed_rank)

    def dot(
        self,
        other: "_TensorBase",
        axes_self: Sequence[int],
        axes_other: Sequence[int],
        offsets: Optional[Sequence[int]] = None,
    ) -> "Tensor":
        """Contract ``axes_self`` of this tensor with ``axes_other`` of ``other``.

        See :func:`tensorutils.ops.dot`.
        """
        from .ops import dot

        return dot(self, other, axes_self, axes_other, offsets)

    def copy(self) -> "Tensor":
        """Create an independent copy that owns its buffer."""
        return Tensor._wrap(self._data.copy(), self._shape, self.fixed_rank)

    def astype(self, dtype: Any) -> "Tensor":
        """Copy with elements converted to ``dtype``."""
        data = self._data.astype(normalize_dtype(dtype))
        return Tensor._wrap(data, self._shape, self.fixed_rank)

    def to_numpy(self) -> NDArray:
        """Convert to NumPy array (copies data).

        Returns:
            NumPy array with copied data in row-major order
        """
        return self._data.reshape(self._shape).copy()

    def write(self, path: str) -> None:
        """Write the tensor to ``path``; the extension selects the format.

        Raises:
            UnableToOpenFile: If ``path`` cannot be opened
            TypeError: If ``path`` has the typed extension of another element type
        """
        from .serialization import save

        save(self, path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self._shape}, dtype={self.dtype})"

    def __str__(self) -> str:
        return f"{self!r}:\n{self.to_numpy()}"


class Tensor(_TensorBase):
    """Dense tensor owning a contiguous row-major buffer.

    A tensor created with ``rank=N`` has a fixed rank: any operation that
    would give it a different number of axes raises :class:`RankMismatch`
    and leaves it unchanged. The default ``rank=-1`` allows any rank.

    Examples:
        >>> a = Tensor((2, 3), fill=1.0)
        >>> a.shape
        (2, 3)
        >>> e = Tensor((3, 5, 7), fill=1, dtype=np.int32, rank=3)
        >>> e.alloc((2, 3, 5, 7))
        Traceback (most recent call last):
            ...
        tensorutils._status.RankMismatch: alloc: tensor has fixed rank 3, got rank 4
    """

    __slots__ = ("_fixed_rank",)

    def __init__(
        self,
        shape: Optional[Sequence[int]] = None,
        fill: Any = 0,
        dtype: Any = np.float64,
        rank: Optional[int] = ARBITRARY_RANK,
    ) -> None:
        """Allocate a tensor.

        Args:
            shape: Shape of the tensor. Defaults to a scalar for arbitrary
                rank and to ``(0,) * rank`` for a fixed rank.
            fill: Initial value of every element
            dtype: Element type, one of the supported types
            rank: Fixed rank, or -1 (or None) for arbitrary rank
        """
        self._fixed_rank = _normalize_rank(rank)
        if shape is None:
            shape = () if self._fixed_rank is None else (0,) * self._fixed_rank
        self._data = np.empty(0, dtype=normalize_dtype(dtype))
        self._shape = (0,)
        self.alloc(shape, fill)

    @classmethod
    def _wrap(
        cls,
        data: NDArray,
        shape: Sequence[int],
        rank: Optional[int] = None,
        context: str = "tensor",
    ) -> Tensor:
        """Internal constructor taking ownership of a flat buffer."""
        shape = tuple(shape)
        rank = _normalize_rank(rank)
        if rank is not None and len(shape) != rank:
            check_status(
                StatusCode.RANK_MISMATCH, context, f"expected rank {rank}, got rank {len(shape)}"
            )
        normalize_dtype(data.dtype)
        t = cls.__new__(cls)
        t._fixed_rank = rank
        t._data = data.reshape(-1)
        t._shape = shape
        return t

    @classmethod
    def zeros(cls, shape: Sequence[int], dtype: Any = np.float64, rank: Optional[int] = None) -> Tensor:
        """Create a tensor filled with zeros."""
        return cls(shape, 0, dtype, rank)

    @classmethod
    def ones(cls, shape: Sequence[int], dtype: Any = np.float64, rank: Optional[int] = None) -> Tensor:
        """Create a tensor filled with ones."""
        return cls(shape, 1, dtype, rank)

    @classmethod
    def full(
        cls, shape: Sequence[int], fill: Any, dtype: Any = np.float64, rank: Optional[int] = None
    ) -> Tensor:
        """Create a tensor filled with ``fill``."""
        return cls(shape, fill, dtype, rank)

    @classmethod
    def rand(
        cls,
        shape: Sequence[int],
        dtype: Any = np.float64,
        seed: Optional[int] = None,
        rank: Optional[int] = None,
    ) -> Tensor:
        """Create a tensor with uniform random values in [0, 1).

        Args:
            shape: Shape of the tensor
            dtype: Element type
            seed: Seed for ``numpy.random.default_rng``
            rank: Fixed rank, or None

        Returns:
            New tensor with random values
        """
        shape = _shape.normalize_shape(shape)
        rng = np.random.default_rng(seed)
        data = rng.random(_shape.element_count(shape)).astype(normalize_dtype(dtype))
        return cls._wrap(data, shape, rank, "rand")

    @classmethod
    def randn(
        cls,
        shape: Sequence[int],
        dtype: Any = np.float64,
        seed: Optional[int] = None,
        rank: Optional[int] = None,
    ) -> Tensor:
        """Create a tensor with standard normal random values (mean=0, std=1)."""
        shape = _shape.normalize_shape(shape)
        rng = np.random.default_rng(seed)
        data = rng.standard_normal(_shape.element_count(shape)).astype(normalize_dtype(dtype))
        return cls._wrap(data, shape, rank, "randn")

    @classmethod
    def from_numpy(cls, arr: Any, dtype: Any = None, rank: Optional[int] = None) -> Tensor:
        """Create a tensor from a NumPy array (copies data).

        Args:
            arr: Array-like input
            dtype: Element type; defaults to the array's dtype
            rank: Fixed rank, or None

        Returns:
            New tensor with copied data
        """
        arr = np.asarray(arr)
        dt = normalize_dtype(arr.dtype if dtype is None else dtype)
        data = arr.astype(dt, order="C", copy=True).reshape(-1)
        return cls._wrap(data, arr.shape, rank, "from_numpy")

    @property
    def fixed_rank(self) -> Optional[int]:
        """The rank this tensor is constrained to, or None for arbitrary rank."""
        return self._fixed_rank

    def _check_rank(self, rank: int, context: str) -> None:
        if self._fixed_rank is not None and rank != self._fixed_rank:
            check_status(
                StatusCode.RANK_MISMATCH,
                context,
                f"tensor has fixed rank {self._fixed_rank}, got rank {rank}",
            )

    def alloc(self, shape: Sequence[int], fill: Any = 0) -> Tensor:
        """Replace the buffer with one of ``shape`` filled with ``fill``.

        Returns:
            self (for method chaining)

        Raises:
            RankMismatch: If the tensor has a fixed rank other than
                ``len(shape)``
            ShapeMismatch: If an extent is negative
        """
        shape = _shape.normalize_shape(shape)
        self._check_rank(len(shape), "alloc")
        data = np.empty(_shape.element_count(shape), dtype=self.dtype)
        np.copyto(data, np.asarray(fill), casting="unsafe")
        self._data, self._shape = data, shape
        logger.debug("alloc shape=%s dtype=%s", shape, self.dtype)
        return self

    def copy_from(self, source: Any) -> Tensor:
        """Assign ``source`` to this tensor, adopting its shape.

        Elements are converted to this tensor's dtype (floating-point values
        are truncated toward zero for integer types).

        Args:
            source: Tensor, view or array-like

        Returns:
            self (for method chaining)

        Raises:
            RankMismatch: If this tensor has a fixed rank and ``source`` has
                another rank
        """
        if isinstance(source, _TensorBase):
            src_shape, src_data = source._shape, source._data
        else:
            arr = np.asarray(source)
            src_shape, src_data = arr.shape, arr.reshape(-1)
        self._check_rank(len(src_shape), "copy_from")
        self._data = src_data.astype(self.dtype)
        self._shape = tuple(src_shape)
        return self

    def reshape(self, shape: Sequence[int]) -> Tensor:
        """Change the shape in place, keeping the elements in row-major order.

        Raises:
            RankMismatch: If the new rank violates a fixed rank
            ShapeMismatch: If the element count would change
        """
        shape = _shape.normalize_shape(shape)
        self._check_rank(len(shape), "reshape")
        check_status(
            _shape.check_same_count(self._shape, shape),
            "reshape",
            f"cannot reshape {self._shape} into {shape}: element counts differ",
        )
        self._shape = shape
        return self

    def read(self, path: str) -> Tensor:
        """Replace the contents with the tensor stored at ``path``.

        Returns:
            self (for method chaining)

        Raises:
            UnableToOpenFile: If the file cannot be opened
            ShapeMismatch: If the file is corrupted
            RankMismatch: If the stored rank violates a fixed rank
            TypeError: If a binary file holds another element type
        """
        from .serialization import load

        loaded = load(path, dtype=self.dtype, rank=self._fixed_rank)
        self._data, self._shape = loaded._data, loaded._shape
        return self

    def __repr__(self) -> str:
        if self._fixed_rank is None:
            return super().__repr__()
        return f"Tensor(shape={self._shape}, dtype={self.dtype}, rank={self._fixed_rank})"


class TensorView(_TensorBase):
    """Sub-tensor sharing a contiguous range of another tensor's buffer.

    Views are returned by partial indexing. Writing through a view writes
    into the parent; a view should not be used after its parent has been
    reallocated (by ``alloc``, ``copy_from`` or ``read``), since it keeps
    referring to the old buffer.
    """

    __slots__ = ()

    def __init__(self, buffer: NDArray, offset: int, shape: Sequence[int]) -> None:
        shape = _shape.normalize_shape(shape)
        count = _shape.element_count(shape)
        if buffer.ndim != 1:
            check_status(StatusCode.SHAPE_MISMATCH, "view", "buffer must be one-dimensional")
        if not 0 <= offset <= buffer.size - count:
            check_status(
                StatusCode.INDEX_OUT_OF_BOUNDS,
                "view",
                f"{count} elements at offset {offset} do not fit a buffer of {buffer.size}",
            )
        self._data = buffer[offset:offset + count]
        self._shape = shape
