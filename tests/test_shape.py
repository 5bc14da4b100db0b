"""Tests for shape and stride arithmetic."""

import itertools

import pytest

from tensorutils import OutOfRange, ShapeMismatch, StatusCode
from tensorutils import shape as S


class TestShapeBasics:
    """Tests for shapes, element counts and strides."""

    def test_element_count(self):
        assert S.element_count((2, 3, 5, 7)) == 210
        assert S.element_count((4, 0, 2)) == 0

    def test_element_count_scalar(self):
        """The empty product is 1: a scalar holds one element."""
        assert S.element_count(()) == 1

    def test_row_major_strides(self):
        assert S.row_major_strides((2, 3, 5, 7)) == (105, 35, 7, 1)
        assert S.row_major_strides((4,)) == (1,)
        assert S.row_major_strides(()) == ()

    def test_normalize_shape(self):
        assert S.normalize_shape([2, 3]) == (2, 3)
        assert S.normalize_shape(5) == (5,)

    def test_normalize_shape_negative(self):
        with pytest.raises(ShapeMismatch):
            S.normalize_shape((2, -1))

    def test_normalize_shape_non_integer(self):
        with pytest.raises(TypeError):
            S.normalize_shape((2, 1.5))


class TestIndexValidation:
    """Tests for index validation and linearization."""

    def test_check_index_ok(self):
        assert S.check_index((2, 3), (1, 2)) == StatusCode.SUCCESS
        assert S.check_index((2, 3), (1,)) == StatusCode.SUCCESS
        assert S.check_index((2, 3), ()) == StatusCode.SUCCESS

    def test_check_index_too_long(self):
        assert S.check_index((2, 3), (0, 0, 0)) == StatusCode.SHAPE_MISMATCH

    def test_too_long_takes_precedence_over_range(self):
        """An over-long index is a shape error even with bad components."""
        assert S.check_index((2, 3), (9, 9, 9)) == StatusCode.SHAPE_MISMATCH

    def test_check_index_out_of_range(self):
        assert S.check_index((2, 3), (2,)) == StatusCode.INDEX_OUT_OF_BOUNDS
        assert S.check_index((2, 3), (0, -1)) == StatusCode.INDEX_OUT_OF_BOUNDS

    def test_locate_full_index(self):
        offset, residual = S.locate((2, 3, 5, 7), (1, 2, 4, 6))
        assert offset == 105 + 70 + 28 + 6
        assert residual == ()

    def test_locate_partial_index(self):
        offset, residual = S.locate((2, 3, 5, 7), (1, 2))
        assert offset == 105 + 70
        assert residual == (5, 7)

    def test_locate_errors(self):
        with pytest.raises(ShapeMismatch, match="too many indices"):
            S.locate((2, 3, 5, 7), (0, 0, 0, 0, 0))
        with pytest.raises(OutOfRange):
            S.locate((2, 3, 5, 7), (1, 2, 4, 7))

    def test_linear_offset_is_row_major_position(self):
        shape = (2, 3, 4)
        strides = S.row_major_strides(shape)
        for offset, index in enumerate(itertools.product(*(range(n) for n in shape))):
            assert S.linear_offset(index, strides) == offset


class TestCompatibility:
    """Tests for the shape compatibility checks."""

    def test_same_count(self):
        assert S.check_same_count((6,), (2, 3)) == StatusCode.SUCCESS
        assert S.check_same_count((2, 3, 5, 7), (2, 3, 5, 8)) == StatusCode.SHAPE_MISMATCH

    @pytest.mark.parametrize("perm", [(0, 1, 2), (2, 0, 1), (1, 0, 2)])
    def test_valid_permutation(self, perm):
        assert S.check_permutation(perm, 3) == StatusCode.SUCCESS

    @pytest.mark.parametrize("perm", [(1, 3, 2), (0, 0, 1), (0, 1), (0, 1, 2, 3)])
    def test_invalid_permutation(self, perm):
        assert S.check_permutation(perm, 3) == StatusCode.INVALID_PERMUTATION

    def test_permute_shape(self):
        assert S.permute_shape((2, 3, 5), (2, 0, 1)) == (5, 2, 3)

    def test_check_axes(self):
        assert S.check_axes((0, 2), 3) == StatusCode.SUCCESS
        assert S.check_axes((0, 0), 3) == StatusCode.SHAPE_MISMATCH
        assert S.check_axes((0, 3), 3) == StatusCode.INDEX_OUT_OF_BOUNDS
