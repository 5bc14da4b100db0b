"""Tests for element-wise arithmetic."""

import numpy as np
import pytest

from tensorutils import ShapeMismatch, Tensor


class TestCompoundOperators:
    """Tests for +=, -=, *= and /=."""

    def test_iadd_same_shape(self):
        a = Tensor((2, 3), fill=1.0)
        a += Tensor((2, 3), fill=2.0)
        assert all(v == 3.0 for v in a)

    def test_iadd_equal_count_different_shape(self):
        """Only the element count has to match."""
        a = Tensor.from_numpy(np.arange(6.0))
        b = Tensor.from_numpy(np.arange(6.0).reshape(2, 3))
        a += b
        assert a.shape == (6,)
        assert list(a) == [0.0, 2.0, 4.0, 6.0, 8.0, 10.0]

    def test_iadd_documented_shapes(self):
        a = Tensor((2, 3, 5, 7), fill=1.0)
        a += Tensor((2 * 3, 5 * 7), fill=1.0, dtype=np.float32)
        assert a.shape == (2, 3, 5, 7)
        assert all(v == 2.0 for v in a)

    def test_iadd_count_mismatch(self):
        """Tensors with different element counts cannot be added."""
        a = Tensor((2, 3, 5, 7), fill=1.0)
        b = Tensor((2, 3, 5, 8), fill=1.0)
        with pytest.raises(ShapeMismatch):
            a += b
        assert all(v == 1.0 for v in a)

    @pytest.mark.parametrize(
        "op, expected",
        [
            ("sub", [4.0, 3.0, 2.0]),
            ("mul", [5.0, 10.0, 15.0]),
            ("div", [5.0, 2.5, 5.0 / 3.0]),
        ],
    )
    def test_other_operators(self, op, expected):
        a = Tensor((3,), fill=5.0)
        b = Tensor.from_numpy(np.array([1.0, 2.0, 3.0]))
        if op == "sub":
            a -= b
        elif op == "mul":
            a *= b
        else:
            a /= b
        np.testing.assert_allclose(a.to_numpy(), expected)

    def test_scalar_operand(self):
        a = Tensor((2, 2), fill=1.0)
        a += 2
        a *= 3.0
        assert all(v == 9.0 for v in a)

    def test_numpy_operand(self):
        a = Tensor((2, 2))
        a += np.array([1.0, 2.0, 3.0, 4.0])
        assert a(1, 1) == 4.0

    def test_numpy_operand_count_mismatch(self):
        a = Tensor((2, 2))
        with pytest.raises(ShapeMismatch):
            a += np.ones(5)

    def test_mixed_types_convert_to_left_operand(self):
        a = Tensor((2,), fill=1, dtype=np.int32)
        a += Tensor((2,), fill=1.7)
        assert a.dtype == np.int32
        assert list(a) == [2, 2]

    def test_integer_division_truncates(self):
        a = Tensor.from_numpy(np.array([7, -7], dtype=np.int64))
        a /= 2
        assert list(a) == [3, -3]

    def test_inplace_on_view_updates_parent(self, counting_tensor):
        v = counting_tensor(0)
        v += 100.0
        assert counting_tensor(0, 2, 3) == 111.0
        assert counting_tensor(1, 0, 0) == 12.0

    def test_inplace_on_slice_updates_parent(self, counting_tensor):
        counting_tensor[1] *= 0.0
        assert all(v == 0.0 for v in counting_tensor(1))
        assert counting_tensor(0, 0, 1) == 1.0

    def test_self_aliasing(self):
        a = Tensor((3,), fill=2.0)
        a += a
        assert list(a) == [4.0, 4.0, 4.0]


class TestBinaryOperators:
    """Tests for operators returning new tensors."""

    def test_add_returns_new_tensor(self):
        a = Tensor((2,), fill=1.0)
        b = Tensor((2,), fill=2.0)
        c = a + b
        assert c is not a
        assert list(c) == [3.0, 3.0]
        assert list(a) == [1.0, 1.0]

    def test_chaining(self):
        a = Tensor((2,), fill=4.0)
        b = Tensor((2,), fill=2.0)
        c = (a - b) * b / 4.0
        assert list(c) == [1.0, 1.0]

    def test_reflected_scalar(self):
        a = Tensor((2,), fill=3.0)
        assert list(2 + a) == [5.0, 5.0]
        assert list(2 * a) == [6.0, 6.0]

    def test_binary_on_view_returns_owner(self, counting_tensor):
        c = counting_tensor(1) + 1.0
        assert isinstance(c, Tensor)
        assert c(0, 0) == 13.0
        assert counting_tensor(1, 0, 0) == 12.0

    def test_binary_count_mismatch(self):
        with pytest.raises(ShapeMismatch):
            Tensor((2,)) + Tensor((3,))
