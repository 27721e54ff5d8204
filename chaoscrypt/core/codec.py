# chaoscrypt/core/codec.py
"""
Ciphertext encodings. One ciphertext unit per plaintext byte, each unit an
iteration count.

- "int":   a list of Python ints, no width limit.
- "u16le": two bytes per count, little-endian. Counts above 65535 are
           refused rather than wrapped modulo 65536.
"""

from typing import Dict, Iterable, List, Optional

from chaoscrypt.core.errors import CiphertextFormatError, CiphertextOverflowError


class IntegerCodec:
    name = "int"
    max_count: Optional[int] = None

    def encode(self, counts: Iterable[int]) -> List[int]:
        encoded = [int(c) for c in counts]
        for position, count in enumerate(encoded):
            if count < 0:
                raise CiphertextFormatError(f"Negative iteration count {count} at position {position}")
        return encoded

    def decode(self, ciphertext) -> List[int]:
        if isinstance(ciphertext, (bytes, bytearray, memoryview, str)):
            raise CiphertextFormatError("Integer ciphertext must be a sequence of counts")
        counts = []
        for position, unit in enumerate(ciphertext):
            if isinstance(unit, bool) or not isinstance(unit, int):
                raise CiphertextFormatError(f"Non-integer unit {unit!r} at position {position}")
            if unit < 0:
                raise CiphertextFormatError(f"Negative iteration count {unit} at position {position}")
            counts.append(unit)
        return counts


class UInt16LECodec:
    name = "u16le"
    unit_size = 2
    max_count: Optional[int] = 0xFFFF

    def encode(self, counts: Iterable[int]) -> bytes:
        out = bytearray()
        for position, count in enumerate(counts):
            if count < 0:
                raise CiphertextFormatError(f"Negative iteration count {count} at position {position}")
            if count > self.max_count:
                raise CiphertextOverflowError(
                    f"Iteration count {count} at position {position} does not fit in 16 bits"
                )
            out.append(count & 0xFF)
            out.append((count >> 8) & 0xFF)
        return bytes(out)

    def decode(self, ciphertext) -> List[int]:
        if not isinstance(ciphertext, (bytes, bytearray, memoryview)):
            raise CiphertextFormatError("16-bit ciphertext must be bytes")
        data = bytes(ciphertext)
        if len(data) % self.unit_size:
            raise CiphertextFormatError(
                f"Ciphertext length {len(data)} is not a multiple of {self.unit_size}"
            )
        return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), self.unit_size)]


_CODECS: Dict[str, type] = {
    IntegerCodec.name: IntegerCodec,
    UInt16LECodec.name: UInt16LECodec,
}

AVAILABLE_ENCODINGS = tuple(_CODECS)


def get_codec(name: str):
    """Return a codec instance by name; ValueError when unknown."""
    key = (name or "").strip().lower()
    if key not in _CODECS:
        raise ValueError(f"Unknown ciphertext encoding: {name!r}. Available: {', '.join(AVAILABLE_ENCODINGS)}")
    return _CODECS[key]()
