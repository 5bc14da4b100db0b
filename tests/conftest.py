"""Pytest configuration for tensorutils tests."""

import numpy as np
import pytest

from tensorutils import Tensor, get_config, set_config


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def counting_tensor():
    """Tensor of shape (2, 3, 4) holding 0..23 in row-major order."""
    return Tensor.from_numpy(np.arange(24, dtype=np.float64).reshape(2, 3, 4))


@pytest.fixture(autouse=True)
def restore_config():
    """Undo configuration changes made by a test."""
    previous = get_config()
    yield
    set_config(previous)
