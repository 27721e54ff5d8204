# chaoscrypt/schemas/cipher.py
from pydantic import BaseModel, Field
from typing import List, Optional

class KeyMaterial(BaseModel):
    """Initial network state and coupling matrix (row-major rows)."""
    state: List[float] = Field(..., min_length=1, max_length=8)
    coupling: List[List[float]] = Field(..., min_length=1, max_length=8)

class CipherOptions(BaseModel):
    perturb: Optional[bool] = None  # server default when omitted
    local_map: Optional[str] = Field(
        default=None,
        description="Local dynamic: logarithmic, logistic, tent",
        pattern="^(logarithmic|logistic|tent)$"
    )
    map_parameter: Optional[float] = None
    encoding: Optional[str] = Field(
        default=None,
        description="Ciphertext encoding: u16le (2 bytes per symbol) or int",
        pattern="^(u16le|int)$"
    )

class EncryptRequest(BaseModel):
    plaintext_b64: str
    key: Optional[KeyMaterial] = None  # server key when omitted
    options: CipherOptions = Field(default_factory=CipherOptions)

class EncryptResponse(BaseModel):
    encoding: str
    length: int
    ciphertext_b64: Optional[str] = None  # u16le
    counts: Optional[List[int]] = None  # int
    key_fingerprint: str

class DecryptRequest(BaseModel):
    ciphertext_b64: Optional[str] = None
    counts: Optional[List[int]] = None
    key: Optional[KeyMaterial] = None
    options: CipherOptions = Field(default_factory=CipherOptions)

class DecryptResponse(BaseModel):
    plaintext_b64: str
    length: int

class AnalyzeRequest(BaseModel):
    key: Optional[KeyMaterial] = None
    local_map: Optional[str] = Field(default=None, pattern="^(logarithmic|logistic|tent)$")
    map_parameter: Optional[float] = None
    probe_steps: Optional[int] = Field(default=None, ge=1, le=1_000_000)

class AnalyzeResponse(BaseModel):
    dimension: int
    fingerprint: str
    spectral_radius: float
    probe_steps: int
    symbol_coverage: float
    missing_symbols: List[int]
    mean_symbol_gap: Optional[float] = None
    warnings: List[str]
    is_usable: bool

    class Config:
        extra = "ignore"
