# chaoscrypt/core/cipher.py
"""
Text Dependent Encryption (TDE) driven by a coupled map network.

Each plaintext byte is encoded as the number of network iterations needed
until the symbol read off the network state equals that byte. Decryption
replays the counts from the same initial state and reads the symbols back.

Both directions start from the key's initial state on every call, walk the
trajectory one synchronous step at a time and, when perturbation is on,
scale the state by the perturbation factor (-1, a sign flip, as recommended
by the authors of TDE) right after each symbol.

Ciphertext width is chosen by the codec, see chaoscrypt.core.codec. The
per-symbol iteration ceiling is a hardening addition: the reference scheme
loops forever on a symbol the dynamics never produce.
"""

import logging
import operator
from typing import Iterable, List, Optional, Union

from chaoscrypt.core import config
from chaoscrypt.core.chaotic_map import ChaoticMap, LogarithmicMap
from chaoscrypt.core.cmn import CoupledMapNetwork, binarize
from chaoscrypt.core.codec import get_codec
from chaoscrypt.core.errors import (
    CiphertextFormatError,
    DimensionMismatchError,
    SymbolUnreachableError,
)
from chaoscrypt.core.key import Key

logger = logging.getLogger(__name__)

MAX_DIMENSION = 8  # one bit per node, one byte per symbol

Plaintext = Union[bytes, bytearray, memoryview, Iterable[int]]


def _as_bytes(plaintext: Plaintext) -> bytes:
    if isinstance(plaintext, (bytes, bytearray, memoryview)):
        return bytes(plaintext)
    if isinstance(plaintext, (str, int)):
        raise TypeError(f"Plaintext must be bytes, not {type(plaintext).__name__}")
    # Element by element: a numpy array would otherwise hand over its raw buffer
    try:
        return bytes(operator.index(value) for value in plaintext)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Plaintext must be bytes or an iterable of ints in 0..255: {e}") from None


class TextDependentCipher:
    """
    TDE encryption/decryption for a given key.

    Args:
        key: Secret key (initial state and coupling matrix)
        perturb: Flip the network state after every matched symbol
        local_map: Local dynamic of the network, LogarithmicMap(0.5) by default
        threshold: Binarization threshold
        perturbation_factor: Factor applied to the state when perturbing
        max_iterations: Per-symbol ceiling; defaults to the codec's widest
            count, or MAX_ITERATIONS_PER_SYMBOL for unbounded codecs
        codec: Ciphertext encoding name or codec instance
    """

    def __init__(
        self,
        key: Key,
        perturb: bool = False,
        local_map: Optional[ChaoticMap] = None,
        *,
        threshold: float = 0.0,
        perturbation_factor: float = -1.0,
        max_iterations: Optional[int] = None,
        codec="u16le",
    ):
        self.key = key
        self.perturb = perturb
        self.threshold = threshold
        self.perturbation_factor = perturbation_factor
        self.codec = get_codec(codec) if isinstance(codec, str) else codec

        if max_iterations is None:
            max_iterations = self.codec.max_count or config.MAX_ITERATIONS_PER_SYMBOL
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        if self.codec.max_count is not None and max_iterations > self.codec.max_count:
            raise ValueError(
                f"max_iterations {max_iterations} exceeds what the '{self.codec.name}' encoding can hold"
            )
        self.max_iterations = max_iterations

        # The key is the initial state of the network and its coupling
        self.cmn = CoupledMapNetwork(
            key.state,
            key.coupling,
            local_map if local_map is not None else LogarithmicMap(0.5),
        )
        if self.cmn.dimension > MAX_DIMENSION:
            raise DimensionMismatchError(
                f"A symbol is one byte; network dimension {self.cmn.dimension} exceeds {MAX_DIMENSION}"
            )

    @property
    def symbol_count(self) -> int:
        """Number of distinct symbols the network can produce."""
        return 1 << self.cmn.dimension

    def _current_symbol(self) -> int:
        return binarize(self.cmn.get_state(), self.threshold)

    def encrypt_counts(self, plaintext: Plaintext) -> List[int]:
        """
        Encode each plaintext byte as an iteration count.

        Raises:
            SymbolUnreachableError: If a byte cannot be produced by the
                network or is not produced within max_iterations
        """
        data = _as_bytes(plaintext)
        counts = []

        self.cmn.reset()

        for position, symbol in enumerate(data):
            if symbol >= self.symbol_count:
                raise SymbolUnreachableError(symbol, position, 0)

            iterations = 0
            while True:
                self.cmn.iterate()
                iterations += 1
                if self._current_symbol() == symbol:
                    break
                if iterations >= self.max_iterations:
                    logger.warning(
                        f"Symbol 0x{symbol:02x} not reached within {self.max_iterations} iterations "
                        f"(key {self.key.fingerprint()[:16]})"
                    )
                    raise SymbolUnreachableError(symbol, position, iterations)

            counts.append(iterations)
            if self.perturb:
                self.cmn.perturb_state(self.perturbation_factor)

        logger.debug(
            f"Encrypted {len(data)} bytes with key {self.key.fingerprint()[:16]}: "
            f"{sum(counts)} iterations"
        )
        return counts

    def decrypt_counts(self, counts: Iterable[int]) -> bytes:
        """Replay iteration counts and read the symbols back."""
        plaintext = bytearray()

        self.cmn.reset()

        for position, count in enumerate(counts):
            if count < 0:
                raise CiphertextFormatError(f"Negative iteration count {count} at position {position}")
            if count > self.max_iterations:
                raise CiphertextFormatError(
                    f"Iteration count {count} at position {position} exceeds the ceiling of {self.max_iterations}"
                )
            self.cmn.iterate(count)
            plaintext.append(self._current_symbol())
            if self.perturb:
                self.cmn.perturb_state(self.perturbation_factor)

        logger.debug(f"Decrypted {len(plaintext)} bytes with key {self.key.fingerprint()[:16]}")
        return bytes(plaintext)

    def encrypt(self, plaintext: Plaintext):
        """Encrypt and encode with the configured codec."""
        return self.codec.encode(self.encrypt_counts(plaintext))

    def decrypt(self, ciphertext) -> bytes:
        """Decode with the configured codec and decrypt. Malformed input is rejected whole."""
        return self.decrypt_counts(self.codec.decode(ciphertext))

    def __repr__(self) -> str:
        return (
            f"TextDependentCipher(key={self.key!r}, perturb={self.perturb}, "
            f"local_map={self.cmn.local_map!r}, codec='{self.codec.name}')"
        )
