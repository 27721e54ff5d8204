"""
Centralized validation utilities for cipher request payloads
"""
import base64
import binascii
import logging

from chaoscrypt.core.codec import AVAILABLE_ENCODINGS

logger = logging.getLogger(__name__)

class ValidationError(Exception):
    """Custom validation error"""
    pass

def decode_base64_payload(value: str, field_name: str = "payload") -> bytes:
    """
    Decode a base64 request field strictly

    Args:
        value: Base64 text
        field_name: Name of the field for error messages

    Returns:
        Decoded bytes

    Raises:
        ValidationError: If the value is not valid base64
    """
    if value is None:
        raise ValidationError(f"{field_name} is required")

    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        logger.warning(f"Invalid base64 in field {field_name}")
        raise ValidationError(f"{field_name} is not valid base64")

def encode_base64_payload(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")

def validate_payload_size(size: int, max_bytes: int) -> bool:
    """
    Validate payload size

    Args:
        size: Payload size in bytes
        max_bytes: Maximum allowed size

    Returns:
        True if valid

    Raises:
        ValidationError: If the payload is too large
    """
    if size > max_bytes:
        logger.warning(f"Payload size {size} exceeds limit {max_bytes}")
        raise ValidationError(f"Payload exceeds maximum allowed size of {max_bytes} bytes")

    return True

def validate_encoding(name: str) -> str:
    """
    Validate ciphertext encoding name against the supported list

    Raises:
        ValidationError: If the encoding is unknown
    """
    normalized = (name or "").strip().lower()
    if normalized not in AVAILABLE_ENCODINGS:
        logger.warning(f"Rejected unknown ciphertext encoding: {name!r}")
        raise ValidationError(f"Encoding not supported. Supported: {', '.join(AVAILABLE_ENCODINGS)}")
    return normalized
