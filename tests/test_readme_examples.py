"""Tests for README.md examples.

This file verifies that the code examples in README.md actually work.
"""

import numpy as np
import pytest

from tensorutils import (
    ShapeMismatch,
    Tensor,
    TensorUtilsConfig,
    TensorView,
    dot,
    set_config,
)


class TestReadmeUsageExamples:
    """Tests for the Usage section examples."""

    def test_create_tensors(self):
        """Test tensor creation examples."""
        a = Tensor((2, 3, 5, 7), fill=1.0)
        e = Tensor((3, 5, 7), fill=1, dtype=np.int32, rank=3)
        z = Tensor.zeros((2, 3))
        r = Tensor.rand((2, 2), seed=0)

        assert a.dtype == np.float64
        assert a.fixed_rank is None
        assert e.fixed_rank == 3
        assert z.shape == (2, 3)
        assert np.all((r.to_numpy() >= 0.0) & (r.to_numpy() < 1.0))

    def test_access(self):
        """Test element and sub-tensor access examples."""
        a = Tensor((2, 3, 5, 7), fill=1.0)

        assert a(1, 2, 4, 6) == 1.0
        v = a(1, 2)
        assert isinstance(v, TensorView)
        assert v.shape == (5, 7)
        v[0, 0] = 3.0
        assert a(1, 2, 0, 0) == 3.0
        assert a[1].shape == (3, 5, 7)

    def test_arithmetic_and_assignment(self):
        """Test arithmetic, copy_from and assign examples."""
        a = Tensor((2, 3, 5, 7), fill=1.0)
        e = Tensor((3, 5, 7), fill=1, dtype=np.int32, rank=3)

        c = Tensor((6, 35), fill=2.0)
        a += c
        assert all(x == 3.0 for x in a)

        e.copy_from(Tensor((3, 5, 7), fill=2.7))
        assert all(x == 2 for x in e)

        c[0] = np.arange(35.0)
        a.assign(c, (1, 2), (0,))
        assert a(1, 2, 0, 0) == 0.0
        assert a(1, 2, 4, 6) == 34.0
        assert a(1, 1, 4, 6) == 3.0

    def test_transpose_and_dot(self):
        """Test transpose and contraction examples."""
        a = Tensor((2, 3, 5, 7), fill=1.0)
        t = a.transpose((0, 2, 1, 3))
        m = dot(Tensor.ones((2, 3)), Tensor.ones((3, 4)), (1,), (0,))

        assert t.shape == (2, 5, 3, 7)
        assert m.shape == (2, 4)

    def test_files(self, tmp_path):
        """Test the file examples."""
        a = Tensor.rand((2, 3, 5, 7), seed=1)
        a.write(tmp_path / "a.f64")
        a.write(tmp_path / "a.txt")

        b = Tensor().read(tmp_path / "a.f64")
        np.testing.assert_array_equal(b.to_numpy(), a.to_numpy())
        np.testing.assert_array_equal(Tensor().read(tmp_path / "a.txt").to_numpy(), a.to_numpy())


class TestReadmeErrors:
    """Tests for the Errors section."""

    def test_shape_mismatch(self):
        a = Tensor((2, 3, 5, 7), fill=1.0)
        with pytest.raises(ShapeMismatch):
            a += Tensor((2, 3, 5, 8))

    def test_errors_subclass_builtins(self):
        a = Tensor((2, 3))
        with pytest.raises(IndexError):
            a(2, 0)
        with pytest.raises(OSError):
            a.read("does-not-exist.f64")


class TestReadmeConfiguration:
    """Tests for the configuration note."""

    def test_config_from_toml(self, tmp_path):
        path = tmp_path / "tensorutils.toml"
        path.write_text('[tensorutils]\nbyteorder = "big"\n')
        set_config(TensorUtilsConfig.load(str(path)))

        Tensor((2,), fill=1.0).write(tmp_path / "a.f64")
        raw = (tmp_path / "a.f64").read_bytes()
        assert raw[:8] == (1).to_bytes(8, "big")


class TestReadmeFileFormats:
    """Tests for the File formats section."""

    def test_binary_extension_must_match_type(self, tmp_path):
        a = Tensor((2,), fill=1.0)
        with pytest.raises(TypeError):
            a.write(tmp_path / "a.int")

        Tensor((2,), fill=1, dtype=np.int32).write(tmp_path / "a.int")
        with pytest.raises(TypeError):
            a.read(tmp_path / "a.int")
