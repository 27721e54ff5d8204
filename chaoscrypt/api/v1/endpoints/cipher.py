# chaoscrypt/api/v1/endpoints/cipher.py
"""
Text dependent encryption endpoints.

Handlers are plain functions: the work is CPU bound, FastAPI runs them in
its threadpool. Each request gets its own cipher and network.
"""
import logging
from fastapi import APIRouter, HTTPException, Request, status

from chaoscrypt.api.v1.dependencies import build_cipher, cipher_errors, resolve_key
from chaoscrypt.core.config import MAX_PLAINTEXT_BYTES, RATE_LIMITS
from chaoscrypt.core.limiter import limiter
from chaoscrypt.core.validation import (
    ValidationError,
    decode_base64_payload,
    encode_base64_payload,
    validate_payload_size,
)
from chaoscrypt.schemas.cipher import (
    DecryptRequest,
    DecryptResponse,
    EncryptRequest,
    EncryptResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

def _check_size(size: int) -> None:
    try:
        validate_payload_size(size, MAX_PLAINTEXT_BYTES)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e))

@router.post("/encrypt", response_model=EncryptResponse)
@limiter.limit(RATE_LIMITS["encrypt"])
def encrypt(request: Request, payload: EncryptRequest):
    """Encrypt a base64 plaintext into iteration counts."""
    with cipher_errors("encrypt"):
        plaintext = decode_base64_payload(payload.plaintext_b64, "plaintext_b64")
        _check_size(len(plaintext))

        key = resolve_key(payload.key)
        cipher = build_cipher(key, payload.options)
        ciphertext = cipher.encrypt(plaintext)

    fingerprint = key.fingerprint()
    logger.info(f"Encrypted {len(plaintext)} bytes with key {fingerprint[:16]} ({cipher.codec.name})")

    if cipher.codec.name == "int":
        return EncryptResponse(
            encoding="int", length=len(plaintext), counts=ciphertext, key_fingerprint=fingerprint
        )
    return EncryptResponse(
        encoding=cipher.codec.name,
        length=len(plaintext),
        ciphertext_b64=encode_base64_payload(ciphertext),
        key_fingerprint=fingerprint,
    )

@router.post("/decrypt", response_model=DecryptResponse)
@limiter.limit(RATE_LIMITS["decrypt"])
def decrypt(request: Request, payload: DecryptRequest):
    """Decrypt counts (int encoding) or base64 ciphertext (u16le encoding)."""
    with cipher_errors("decrypt"):
        key = resolve_key(payload.key)
        cipher = build_cipher(key, payload.options)

        if cipher.codec.name == "int":
            if payload.counts is None:
                raise ValidationError("counts is required for the int encoding")
            ciphertext = payload.counts
            _check_size(len(ciphertext))
        else:
            ciphertext = decode_base64_payload(payload.ciphertext_b64, "ciphertext_b64")
            _check_size(len(ciphertext) // 2)

        plaintext = cipher.decrypt(ciphertext)

    logger.info(f"Decrypted {len(plaintext)} bytes with key {key.fingerprint()[:16]} ({cipher.codec.name})")
    return DecryptResponse(plaintext_b64=encode_base64_payload(plaintext), length=len(plaintext))
