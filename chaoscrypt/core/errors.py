# chaoscrypt/core/errors.py
"""Failure kinds raised by the cipher engine.

Every kind is distinct so that misuse (wrong key dimension, truncated
ciphertext) can never be mistaken for a successful decryption.
"""


class ChaosCryptError(Exception):
    """Base class for all cipher errors"""
    pass


class DimensionMismatchError(ChaosCryptError):
    """Raised when state vector and coupling matrix sizes disagree"""
    pass


class SymbolUnreachableError(ChaosCryptError):
    """Raised when a plaintext byte is not produced within the iteration ceiling"""

    def __init__(self, symbol: int, position: int, iterations: int):
        self.symbol = symbol
        self.position = position
        self.iterations = iterations
        super().__init__(
            f"Symbol 0x{symbol:02x} at position {position} unreachable "
            f"after {iterations} iterations"
        )


class CiphertextFormatError(ChaosCryptError):
    """Raised when ciphertext cannot be decoded with the configured width"""
    pass


class CiphertextOverflowError(CiphertextFormatError):
    """Raised when an iteration count does not fit the ciphertext unit width"""
    pass


class KeyLoadError(ChaosCryptError):
    """Raised when key material is unavailable or malformed"""
    pass
