# chaoscrypt/core/config.py
import os
import logging
from typing import Optional
from dotenv import load_dotenv

from chaoscrypt.core.chaotic_map import AVAILABLE_MAPS
from chaoscrypt.core.codec import AVAILABLE_ENCODINGS

load_dotenv()

logger = logging.getLogger(__name__)

class ConfigError(Exception):
    """Raised when cipher configuration is invalid"""
    pass

def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")

def _parse_float(name: str, value: Optional[str], default: float) -> float:
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a real number")

def _parse_int(name: str, value: Optional[str], default: int) -> int:
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be a valid integer")

def validate_key_size(size_str: Optional[str]) -> int:
    """A symbol is one byte, so a network has between 1 and 8 nodes"""
    size = _parse_int("CHAOSCRYPT_KEY_SIZE", size_str, 8)
    if not 1 <= size <= 8:
        raise ConfigError("CHAOSCRYPT_KEY_SIZE must be between 1 and 8")
    return size

def validate_local_map(name: Optional[str]) -> str:
    if not name:
        return "logarithmic"  # Validated default with threshold 0
    name = name.strip().lower()
    if name not in AVAILABLE_MAPS:
        raise ConfigError(f"Unsupported local map: {name}")
    if name != "logarithmic":
        logger.warning(f"Local map '{name}' selected; check the binarization threshold for forbidden symbols")
    return name

def validate_encoding(name: Optional[str]) -> str:
    if not name:
        return "u16le"
    name = name.strip().lower()
    if name not in AVAILABLE_ENCODINGS:
        raise ConfigError(f"Unsupported ciphertext encoding: {name}")
    return name

def validate_max_iterations(value: Optional[str]) -> int:
    max_iterations = _parse_int("MAX_ITERATIONS_PER_SYMBOL", value, 0xFFFF)
    if max_iterations < 1:
        raise ConfigError("MAX_ITERATIONS_PER_SYMBOL must be positive")
    if max_iterations > 10_000_000:
        logger.warning("MAX_ITERATIONS_PER_SYMBOL is very large, requests may take long")
    return max_iterations

# Key material
KEY_FILE = os.getenv("CHAOSCRYPT_KEY_FILE") or None

try:
    KEY_SIZE = validate_key_size(os.getenv("CHAOSCRYPT_KEY_SIZE"))

    # Scheme parameters (validated defaults: logarithmic map b=0.5, threshold 0, factor -1)
    LOCAL_MAP = validate_local_map(os.getenv("CHAOSCRYPT_LOCAL_MAP"))
    MAP_PARAMETER = _parse_float("CHAOSCRYPT_MAP_PARAMETER", os.getenv("CHAOSCRYPT_MAP_PARAMETER"), 0.5)
    THRESHOLD = _parse_float("CHAOSCRYPT_THRESHOLD", os.getenv("CHAOSCRYPT_THRESHOLD"), 0.0)
    PERTURBATION_FACTOR = _parse_float(
        "CHAOSCRYPT_PERTURBATION_FACTOR", os.getenv("CHAOSCRYPT_PERTURBATION_FACTOR"), -1.0
    )
    PERTURB = _parse_bool(os.getenv("CHAOSCRYPT_PERTURB"), False)
    ENCODING = validate_encoding(os.getenv("CHAOSCRYPT_ENCODING"))

    # Hardening: per-symbol iteration ceiling
    MAX_ITERATIONS_PER_SYMBOL = validate_max_iterations(os.getenv("MAX_ITERATIONS_PER_SYMBOL"))
    ANALYSIS_PROBE_STEPS = _parse_int("ANALYSIS_PROBE_STEPS", os.getenv("ANALYSIS_PROBE_STEPS"), 20000)

    # Service settings
    MAX_PLAINTEXT_BYTES = _parse_int("MAX_PLAINTEXT_BYTES", os.getenv("MAX_PLAINTEXT_BYTES"), 1024 * 1024)
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = _parse_int("PORT", os.getenv("PORT"), 8000)
    IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"

    if PERTURBATION_FACTOR == 0.0:
        raise ConfigError("CHAOSCRYPT_PERTURBATION_FACTOR must not be 0")

    logger.info("Cipher configuration validated successfully")

except ConfigError as e:
    logger.error(f"Cipher configuration error: {e}")
    raise
except Exception as e:
    logger.error(f"Unexpected configuration error: {e}")
    raise ConfigError(f"Configuration validation failed: {e}")

# Security headers configuration
SECURITY_HEADERS = {
    "Cache-Control": "no-store, private",
    "Referrer-Policy": "no-referrer",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains" if IS_PRODUCTION else None,
}

# Rate limiting configuration
RATE_LIMITS = {
    "encrypt": os.getenv("RATE_LIMIT_ENCRYPT", "30/minute"),
    "decrypt": os.getenv("RATE_LIMIT_DECRYPT", "30/minute"),
    "analyze": os.getenv("RATE_LIMIT_ANALYZE", "10/minute"),
    "default": "100/minute"
}
