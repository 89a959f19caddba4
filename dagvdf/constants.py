"""
VDF constants.

This module centralizes:
- Hash-to-prime search knobs (Miller–Rabin rounds, iteration cap, seed modulus)
- Precision-bound clamps for the Lambert-W estimate
- Prover cancellation polling intervals
- Consensus defaults for the VDF sortition (mirrored by ``dagvdf.config``)

Networks may override the operational knobs via :class:`dagvdf.config.VdfConfig`;
code that needs stable defaults imports them from here.
"""

from __future__ import annotations

# -----------------------------
# Hash-to-prime
# -----------------------------
# Probabilistic primality test rounds for accepted candidates.
MILLER_RABIN_ROUNDS: int = 30

# Upper bound on candidate draws before giving up.
MAX_PRIME_SEARCH_ITER: int = 10_000

# Largest prime below 2^64; the candidate generator is seeded from input mod this.
SEED_MODULUS: int = (1 << 64) - 59

# Candidates are mapped to 6k±1, so the drawn range is bound // 6.
CANDIDATE_DENSITY_DIVISOR: int = 6

# -----------------------------
# Precision bound (Lambert W)
# -----------------------------
MIN_PRECISION_BITS: int = 64
MAX_PRECISION_BITS: int = 8192

# Safety margin applied to |W(-2^-lambda)| before clamping.
PRECISION_SAFETY_FACTOR: float = 1.1

# Newton/Halley iteration cap and divergence guard.
LAMBERT_MAX_ITER: int = 32
LAMBERT_DIVERGENCE_LIMIT: int = 1000

# -----------------------------
# Prover polling
# -----------------------------
# Iteration counts up to this value poll every clamp(T // 100, 1, 10000) steps.
NATIVE_COUNTER_MAX: int = (1 << 64) - 1
MIN_CHECK_INTERVAL: int = 1
MAX_CHECK_INTERVAL: int = 10_000
CHECK_INTERVAL_DIVISOR: int = 100

# Fixed poll interval for iteration counts beyond NATIVE_COUNTER_MAX.
LARGE_CHECK_INTERVAL: int = 100_000

# -----------------------------
# Sortition defaults
# -----------------------------
DEFAULT_LAMBDA_BOUND: int = 1500
DEFAULT_DIFFICULTY_MIN: int = 0
DEFAULT_DIFFICULTY_MAX: int = 1
DEFAULT_DIFFICULTY_STALE: int = 0

# VRF thresholds are scaled by this factor before difficulty bucketing.
THRESHOLD_CORRECTION: int = 10

# Practical ceiling for time_bits (iterations = 2^time_bits).
MAX_PRACTICAL_TIME_BITS: int = 63

__all__ = [
    "MILLER_RABIN_ROUNDS",
    "MAX_PRIME_SEARCH_ITER",
    "SEED_MODULUS",
    "CANDIDATE_DENSITY_DIVISOR",
    "MIN_PRECISION_BITS",
    "MAX_PRECISION_BITS",
    "PRECISION_SAFETY_FACTOR",
    "LAMBERT_MAX_ITER",
    "LAMBERT_DIVERGENCE_LIMIT",
    "NATIVE_COUNTER_MAX",
    "MIN_CHECK_INTERVAL",
    "MAX_CHECK_INTERVAL",
    "CHECK_INTERVAL_DIVISOR",
    "LARGE_CHECK_INTERVAL",
    "DEFAULT_LAMBDA_BOUND",
    "DEFAULT_DIFFICULTY_MIN",
    "DEFAULT_DIFFICULTY_MAX",
    "DEFAULT_DIFFICULTY_STALE",
    "THRESHOLD_CORRECTION",
    "MAX_PRACTICAL_TIME_BITS",
]
