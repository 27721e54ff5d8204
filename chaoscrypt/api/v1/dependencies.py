# chaoscrypt/api/v1/dependencies.py
import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Optional

from fastapi import HTTPException, status

from chaoscrypt.core import config
from chaoscrypt.core.chaotic_map import ChaoticMap, get_map
from chaoscrypt.core.cipher import TextDependentCipher
from chaoscrypt.core.errors import (
    CiphertextFormatError,
    DimensionMismatchError,
    KeyLoadError,
    SymbolUnreachableError,
)
from chaoscrypt.core.key import Key
from chaoscrypt.core.key_loader import load_key
from chaoscrypt.core.validation import ValidationError
from chaoscrypt.schemas.cipher import CipherOptions, KeyMaterial

logger = logging.getLogger(__name__)

@lru_cache(maxsize=1)
def get_server_key() -> Key:
    """Load the configured key file once; the Key is immutable and shared."""
    if not config.KEY_FILE:
        raise KeyLoadError("No server key configured (CHAOSCRYPT_KEY_FILE)")
    return load_key(config.KEY_FILE, config.KEY_SIZE)

def resolve_key(material: Optional[KeyMaterial]) -> Key:
    """Key from the request body, or the server key when none was sent."""
    if material is None:
        return get_server_key()
    n = len(material.state)
    if len(material.coupling) != n or any(len(row) != n for row in material.coupling):
        raise DimensionMismatchError(f"Coupling matrix must be {n}x{n} to match the state vector")
    return Key(material.state, material.coupling)

def resolve_local_map(name: Optional[str], parameter: Optional[float]) -> ChaoticMap:
    """Requested local map, falling back to the configured one."""
    map_name = name or config.LOCAL_MAP
    if parameter is None and map_name == config.LOCAL_MAP:
        parameter = config.MAP_PARAMETER
    # otherwise None selects the map's own default
    return get_map(map_name, parameter)

def build_cipher(key: Key, options: CipherOptions) -> TextDependentCipher:
    """
    Build a fresh cipher (and so a fresh network) for one request.
    Network state is never shared between requests.
    """
    perturb = config.PERTURB if options.perturb is None else options.perturb
    encoding = options.encoding or config.ENCODING
    max_iterations = config.MAX_ITERATIONS_PER_SYMBOL
    if encoding == "u16le":
        max_iterations = min(max_iterations, 0xFFFF)

    return TextDependentCipher(
        key,
        perturb,
        resolve_local_map(options.local_map, options.map_parameter),
        threshold=config.THRESHOLD,
        perturbation_factor=config.PERTURBATION_FACTOR,
        max_iterations=max_iterations,
        codec=encoding,
    )

@contextmanager
def cipher_errors(operation: str):
    """Translate cipher failures into HTTP errors; each kind keeps its own status."""
    try:
        yield
    except HTTPException:
        raise
    except ValidationError as e:
        logger.warning(f"{operation}: validation failed: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CiphertextFormatError as e:
        logger.warning(f"{operation}: malformed ciphertext: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (DimensionMismatchError, SymbolUnreachableError) as e:
        logger.warning(f"{operation}: {e}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except KeyLoadError as e:
        logger.error(f"{operation}: key unavailable: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Key unavailable")
    except Exception as e:
        logger.error(f"Unexpected error in {operation}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
