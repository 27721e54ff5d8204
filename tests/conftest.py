import numpy as np
import pytest

from chaoscrypt.core.key import Key


@pytest.fixture
def scenario_key():
    """Two uncoupled nodes, seeded on both sides of zero."""
    return Key([0.3, -0.2], [[1.0, 0.0], [0.0, 1.0]])


@pytest.fixture
def coupled_key():
    """Three weakly coupled nodes."""
    return Key(
        [0.41, -0.73, 1.25],
        [
            [1.0, 0.05, 0.0],
            [0.0, 1.0, -0.05],
            [0.05, 0.0, 1.0],
        ],
    )


@pytest.fixture
def byte_key():
    """Eight uncoupled nodes: every byte value is a symbol."""
    state = [0.31, -0.52, 0.77, -1.13, 0.24, -0.68, 1.42, -0.37]
    return Key(state, np.eye(8))
