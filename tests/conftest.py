"""Shared fixtures for the qcraft test suite."""

import numpy as np
import pytest

from qcraft import StatevectorBackend
from qcraft.config import get_limits, set_limits


@pytest.fixture(autouse=True)
def restore_limits():
    """Tests may swap the process-wide limits; restore the saved ones."""
    saved = get_limits()
    yield
    set_limits(saved)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def backend():
    return StatevectorBackend(seed=42)
