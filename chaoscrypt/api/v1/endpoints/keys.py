# chaoscrypt/api/v1/endpoints/keys.py
import logging
from fastapi import APIRouter, Request

from chaoscrypt.api.v1.dependencies import cipher_errors, resolve_key, resolve_local_map
from chaoscrypt.core import config
from chaoscrypt.core.analysis import analyze_key
from chaoscrypt.core.limiter import limiter
from chaoscrypt.schemas.cipher import AnalyzeRequest, AnalyzeResponse

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/analyze", response_model=AnalyzeResponse)
@limiter.limit(config.RATE_LIMITS["analyze"])
def analyze(request: Request, payload: AnalyzeRequest):
    """Report symbol coverage of a key under the chosen local map."""
    with cipher_errors("analyze"):
        key = resolve_key(payload.key)
        report = analyze_key(
            key,
            resolve_local_map(payload.local_map, payload.map_parameter),
            probe_steps=payload.probe_steps or config.ANALYSIS_PROBE_STEPS,
            threshold=config.THRESHOLD,
        )

    logger.info(f"Analyzed key {report['fingerprint'][:16]}: coverage {report['symbol_coverage']:.3f}")
    return AnalyzeResponse(**report)
