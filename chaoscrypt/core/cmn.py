# chaoscrypt/core/cmn.py
"""
Coupled map network (CMN).

n nodes, each updated every step by the local chaotic map applied to a
weighted sum of all nodes' previous values:

    x_i(t+1) = f( sum_j C[i][j] * x_j(t) )

The update is synchronous: every node reads the pre-update state.
Encryption and decryption both walk the trajectory one step at a time, so
iterate(k) is always k single steps through the same step function.
"""

import logging
from typing import Optional

import numpy as np

from chaoscrypt.core.chaotic_map import ChaoticMap, LogarithmicMap
from chaoscrypt.core.errors import DimensionMismatchError

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.0


def binarize(state: np.ndarray, threshold: float = DEFAULT_THRESHOLD) -> int:
    """
    Convert a network state to a symbol.

    Bit i of the result is set when state[i] > threshold.

    Args:
        state: Network state vector
        threshold: Per-node sign threshold

    Returns:
        Symbol as a non-negative int (a byte for n <= 8)
    """
    symbol = 0
    for i, value in enumerate(state):
        if value > threshold:
            symbol |= (1 << i)
    return symbol


class CoupledMapNetwork:
    """
    Network state, coupling matrix and local map.

    An instance carries mutable state and must be driven by one caller at a
    time; build one network per concurrent operation.
    """

    def __init__(self, state, coupling, local_map: Optional[ChaoticMap] = None):
        initial = np.array(state, dtype=np.float64)
        matrix = np.array(coupling, dtype=np.float64)

        if initial.ndim != 1:
            raise DimensionMismatchError(f"State must be a vector, got shape {initial.shape}")
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise DimensionMismatchError(f"Coupling must be a square matrix, got shape {matrix.shape}")
        if matrix.shape[0] != initial.shape[0]:
            raise DimensionMismatchError(
                f"State length {initial.shape[0]} does not match coupling size {matrix.shape[0]}x{matrix.shape[1]}"
            )
        if initial.shape[0] == 0:
            raise DimensionMismatchError("Network must have at least one node")

        initial.setflags(write=False)
        matrix.setflags(write=False)

        self._initial = initial
        self._coupling = matrix
        self._map = local_map if local_map is not None else LogarithmicMap(0.5)
        self._state = initial.copy()

    @property
    def dimension(self) -> int:
        return self._initial.shape[0]

    @property
    def local_map(self) -> ChaoticMap:
        return self._map

    @property
    def coupling(self) -> np.ndarray:
        return self._coupling

    @property
    def state(self) -> np.ndarray:
        return self.get_state()

    def get_state(self) -> np.ndarray:
        """Return a read-only view of the current state."""
        view = self._state.view()
        view.setflags(write=False)
        return view

    def reset(self) -> None:
        """Load the initial state."""
        self._state = self._initial.copy()

    def set_state(self, state) -> None:
        vector = np.array(state, dtype=np.float64)
        if vector.shape != self._initial.shape:
            raise DimensionMismatchError(
                f"State of shape {vector.shape} does not fit a network of dimension {self.dimension}"
            )
        self._state = vector

    def _step(self) -> None:
        # new array from the old one; no node sees a partially updated state
        self._state = np.asarray(self._map(self._coupling @ self._state), dtype=np.float64)

    def iterate(self, k: int = 1) -> None:
        """
        Advance the network k synchronous steps.

        Args:
            k: Number of steps, k >= 0 (0 is a no-op)

        Raises:
            ValueError: If k is negative
        """
        if k < 0:
            raise ValueError(f"Iteration count must be non-negative, got {k}")
        for _ in range(k):
            self._step()

    def perturb_state(self, factor: float) -> None:
        """Multiply every node by factor (-1 flips the sign of the state)."""
        self._state = self._state * factor

    def symbol(self, threshold: float = DEFAULT_THRESHOLD) -> int:
        return binarize(self._state, threshold)

    def __repr__(self) -> str:
        return f"CoupledMapNetwork(dimension={self.dimension}, local_map={self._map!r})"
