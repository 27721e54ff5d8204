# -*- coding: utf-8 -*-
"""
Key analysis.

Runs the network from the key's initial state and reports how well its
symbol stream covers the 2**n possible symbols. A symbol never seen within
the probe horizon is likely forbidden by the dynamics (wrong map/threshold
pairing or a badly generated key) and would make encryption of that byte
fail with SymbolUnreachableError.
"""

import logging
from typing import Optional

import numpy as np

from chaoscrypt.core.chaotic_map import ChaoticMap
from chaoscrypt.core.cipher import MAX_DIMENSION
from chaoscrypt.core.cmn import CoupledMapNetwork, binarize
from chaoscrypt.core.errors import DimensionMismatchError
from chaoscrypt.core.key import Key

logger = logging.getLogger(__name__)


def analyze_key(
    key: Key,
    local_map: Optional[ChaoticMap] = None,
    probe_steps: int = 20000,
    threshold: float = 0.0,
) -> dict:
    """
    Analyze a key for use with text dependent encryption.

    Args:
        key: Key to analyze (not modified)
        local_map: Local dynamic; LogarithmicMap(0.5) when None
        probe_steps: Number of iterations to observe
        threshold: Binarization threshold

    Returns:
        dict: Analysis report
    """
    if probe_steps < 1:
        raise ValueError("probe_steps must be positive")

    cmn = CoupledMapNetwork(key.state, key.coupling, local_map)
    n = cmn.dimension
    if n > MAX_DIMENSION:
        raise DimensionMismatchError(f"A symbol is one byte; network dimension {n} exceeds {MAX_DIMENSION}")
    symbol_space = 1 << n

    counts = np.zeros(symbol_space, dtype=np.int64)
    non_finite_at = None
    for step in range(probe_steps):
        cmn.iterate()
        state = cmn.get_state()
        if not np.all(np.isfinite(state)):
            non_finite_at = step + 1
            break
        counts[binarize(state, threshold)] += 1

    observed = int(np.count_nonzero(counts))
    missing = [int(s) for s in np.flatnonzero(counts == 0)]
    spectral_radius = float(np.max(np.abs(np.linalg.eigvals(key.coupling))))

    analysis = {
        "dimension": n,
        "fingerprint": key.fingerprint(),
        "spectral_radius": spectral_radius,
        "probe_steps": probe_steps,
        "symbol_coverage": observed / symbol_space,
        "missing_symbols": missing,
        "mean_symbol_gap": None,
        "warnings": [],
    }

    # Expected gap between occurrences of one symbol, from the observed frequencies
    if observed:
        frequencies = counts[counts > 0] / counts.sum()
        analysis["mean_symbol_gap"] = float(np.mean(1.0 / frequencies))

    if non_finite_at is not None:
        analysis["warnings"].append(f"State became non-finite after {non_finite_at} iterations")
    if missing:
        preview = ", ".join(f"0x{s:02x}" for s in missing[:8])
        more = "..." if len(missing) > 8 else ""
        analysis["warnings"].append(
            f"{len(missing)} of {symbol_space} symbols not observed in {probe_steps} iterations: {preview}{more}"
        )

    for warning in analysis["warnings"]:
        logger.warning(f"Key {analysis['fingerprint'][:16]}: {warning}")

    analysis["is_usable"] = not analysis["warnings"]
    return analysis
