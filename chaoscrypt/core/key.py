# chaoscrypt/core/key.py
"""
Text dependent encryption key: the initial state of a coupled map network
and its coupling matrix. This pair is the whole secret.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence

import numpy as np
from cryptography.hazmat.primitives import hashes

from chaoscrypt.core.errors import KeyLoadError


@dataclass(frozen=True, eq=False)
class Key:
    state: np.ndarray
    coupling: np.ndarray

    def __post_init__(self):
        # Immutable once built: private float64 copies, write-protected
        state = np.array(self.state, dtype=np.float64)
        coupling = np.array(self.coupling, dtype=np.float64)
        state.setflags(write=False)
        coupling.setflags(write=False)
        object.__setattr__(self, "state", state)
        object.__setattr__(self, "coupling", coupling)

    @classmethod
    def from_values(cls, values: Sequence[float], size: int) -> "Key":
        """
        Build a key from n + n*n reals: the state, then the coupling matrix
        in row-major order.

        Raises:
            KeyLoadError: If the number of values does not match size
        """
        if size < 1:
            raise KeyLoadError(f"Key size must be positive, got {size}")

        try:
            values = list(values)
        except TypeError as e:
            raise KeyLoadError(f"Key values must be an iterable of reals: {e}") from None

        expected = size + size * size
        if len(values) != expected:
            raise KeyLoadError(f"Key of size {size} needs {expected} values, got {len(values)}")

        try:
            flat = np.asarray(values, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise KeyLoadError(f"Key values must be reals: {e}") from None
        return cls(flat[:size], flat[size:].reshape(size, size))

    @property
    def dimension(self) -> int:
        return int(self.state.shape[0])

    def fingerprint(self) -> str:
        """SHA-256 over the key material; safe to log, identifies the key."""
        digest = hashes.Hash(hashes.SHA256())
        digest.update(self.state.astype(">f8").tobytes())
        digest.update(self.coupling.astype(">f8").tobytes())
        return digest.finalize().hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.tolist(),
            "coupling": self.coupling.tolist(),
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return (
            self.state.shape == other.state.shape
            and self.coupling.shape == other.coupling.shape
            and bool(np.array_equal(self.state, other.state))
            and bool(np.array_equal(self.coupling, other.coupling))
        )

    def __hash__(self) -> int:
        return hash(self.fingerprint())

    def __repr__(self) -> str:
        # Never print key material
        return f"Key(dimension={self.dimension}, fingerprint={self.fingerprint()[:16]})"
