# chaoscrypt/core/key_loader.py
"""
Reads a key from its text form: whitespace separated reals, the initial
state (n values) followed by the coupling matrix (n*n values, row-major).
Anything after the first n + n*n tokens is ignored.
"""

import logging
from pathlib import Path
from typing import List, Union

from chaoscrypt.core.errors import KeyLoadError
from chaoscrypt.core.key import Key

logger = logging.getLogger(__name__)


def _read_reals(text: str, count: int) -> List[float]:
    tokens = text.split()
    if len(tokens) < count:
        raise KeyLoadError(f"Key material truncated: expected {count} values, found {len(tokens)}")

    values = []
    for index, token in enumerate(tokens[:count]):
        try:
            values.append(float(token))
        except ValueError:
            raise KeyLoadError(f"Non-numeric token {token[:32]!r} at position {index}") from None
    return values


def parse_key(text: str, size: int) -> Key:
    """
    Parse key material for a network of the given size.

    Raises:
        KeyLoadError: If the material is truncated or not numeric
    """
    if size < 1:
        raise KeyLoadError(f"Key size must be positive, got {size}")
    values = _read_reals(text, size + size * size)
    return Key.from_values(values, size)


def load_key(path: Union[str, Path], size: int) -> Key:
    """
    Load a key file.

    Args:
        path: Path to the key file
        size: Dimension of the network the key describes

    Returns:
        The loaded Key

    Raises:
        KeyLoadError: If the file is missing, unreadable or malformed
    """
    key_path = Path(path)
    try:
        text = key_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Key file unavailable: {key_path}: {e}")
        raise KeyLoadError(f"Key unavailable: {key_path}") from e

    try:
        key = parse_key(text, size)
    except KeyLoadError as e:
        logger.error(f"Malformed key file {key_path}: {e}")
        raise

    logger.info(f"Loaded key {key.fingerprint()[:16]} (dimension {size}) from {key_path}")
    return key
