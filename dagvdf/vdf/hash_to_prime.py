"""
dagvdf.vdf.hash_to_prime
========================

Deterministic map from an integer to a bounded-size probable prime. This is
the Fiat–Shamir challenge of the Wesolowski proof: prover and verifier both
derive the prime ℓ from ``x || y`` and must land on the same value.

Construction
------------
- The candidate ceiling ``B(lambda) = 2^k`` is estimated from the Lambert W
  function, ``k ≈ 1.1 · |W₋₁(-2^-lambda)|``, evaluated with MPFR floats whose
  mantissa grows with lambda (1024/2048/4096 bits). Any numerical failure
  degrades to ``k = 64``.
- Candidates are drawn from ``[0, B // 6)`` with a GMP random state seeded by
  ``input mod (2^64 - 59)`` and mapped to ``6c ± 1``, so every accepted prime
  is ``≡ 1 or 5 (mod 6)``.
- Nothing depends on wall-clock time or system entropy: the same
  ``(lambda, input)`` always yields the same prime.

Interop
-------
The Rust node narrows the draw range to 32 bits (``min(bitlen(B // 6), 32)``)
while this module draws from the full ``[0, B // 6)``. With identical seeding
and GMP random state the two still pick different primes, so proofs made here
do not verify on a Rust node and vice versa.

Bounds are memoized per lambda in a :class:`PrecisionBoundCache`. The cache is
a pure optimization; a contended writer skips storing rather than waiting.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Callable, Dict, Optional

import gmpy2
from gmpy2 import mpfr, mpz

from ..constants import (
    CANDIDATE_DENSITY_DIVISOR,
    LAMBERT_DIVERGENCE_LIMIT,
    LAMBERT_MAX_ITER,
    MAX_PRECISION_BITS,
    MAX_PRIME_SEARCH_ITER,
    MILLER_RABIN_ROUNDS,
    MIN_PRECISION_BITS,
    PRECISION_SAFETY_FACTOR,
    SEED_MODULUS,
)
from ..errors import PrimeSearchExhausted
from ..metrics import METRICS, Metrics

logger = logging.getLogger(__name__)

_U32_MAX = (1 << 32) - 1


# ---------------------------------------------------------------------------
# Precision bound (Lambert W)
# ---------------------------------------------------------------------------

def working_precision(lambda_: int) -> int:
    """MPFR mantissa bits used for the Lambert W evaluation at *lambda_*."""
    if lambda_ > 1000:
        return 4096
    if lambda_ > 500:
        return 2048
    return 1024


def _lambert_w_lower(lambda_: int, precision: int) -> mpfr:
    """
    Approximate W₋₁(-2^-lambda) by Newton/Halley iteration.

    Must run inside a gmpy2 context of the given precision. May return a
    non-finite value; the caller decides what to do with it.
    """
    x_abs = mpfr(2) ** (-lambda_)
    x = -x_abs

    # Asymptotic start: L1 - L2 + L2/L1 with L1 = ln(2^-lambda), L2 = ln(-L1)
    l1 = gmpy2.log(x_abs)
    l2 = gmpy2.log(-l1)
    w = l1 - l2 + l2 / l1

    tolerance = mpfr(2) ** (-min(200, precision // 4)) * 10

    for _ in range(LAMBERT_MAX_ITER):
        e = gmpy2.exp(w)
        t = e * w - x
        p = w + 1
        if w >= 0:
            t = t / (e * p)
        else:
            t = t / (e * p - (p + 1) * t / p * mpfr("0.5"))

        if abs(t) <= tolerance:
            break
        w = w - t
        if abs(w) > LAMBERT_DIVERGENCE_LIMIT:
            break
    return w


def _bits_from_w(w: mpfr) -> Optional[int]:
    if not gmpy2.is_finite(w) or gmpy2.is_zero(w):
        return None
    magnitude = float(abs(w))
    if not math.isfinite(magnitude) or magnitude <= 0.0:
        return None
    scaled = math.ceil(magnitude * PRECISION_SAFETY_FACTOR)
    return min(max(scaled, MIN_PRECISION_BITS), MAX_PRECISION_BITS)


def compute_precision_bound(lambda_: int) -> mpz:
    """
    Return the power-of-two candidate ceiling ``2^k`` for security level *lambda_*.

    ``k`` is ``ceil(1.1 · |W₋₁(-2^-lambda)|)`` clamped to [64, 8192]. Failures
    anywhere in the float pipeline return ``2^64``.
    """
    precision = working_precision(lambda_)
    try:
        with gmpy2.context(precision=precision):
            w = _lambert_w_lower(lambda_, precision)
            bits = _bits_from_w(w)
    except (ArithmeticError, ValueError) as e:
        logger.debug("precision bound failed for lambda=%d: %s", lambda_, e)
        bits = None

    if bits is None:
        logger.debug("precision bound for lambda=%d fell back to %d bits", lambda_, MIN_PRECISION_BITS)
        bits = MIN_PRECISION_BITS
    return mpz(1) << bits


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class PrecisionBoundCache:
    """
    Process-wide ``lambda → bound`` memo.

    Reads take the lock; the bound is computed outside it. Stores use a
    non-blocking acquire, so under contention the value is simply not cached
    and a later call recomputes it. Entries are never evicted.
    """

    def __init__(
        self,
        compute: Callable[[int], mpz] = compute_precision_bound,
        *,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self._compute = compute
        self._metrics = metrics or METRICS
        self._bounds: Dict[int, mpz] = {}
        self._lock = threading.Lock()

    def get(self, lambda_: int) -> mpz:
        with self._lock:
            cached = self._bounds.get(lambda_)
        if cached is not None:
            self._metrics.record_cache("hit")
            return cached

        computed = self._compute(lambda_)
        if self._lock.acquire(blocking=False):
            try:
                self._bounds[lambda_] = computed
            finally:
                self._lock.release()
            logger.debug("precision bound cached lambda=%d bits=%d", lambda_, computed.bit_length() - 1)
            self._metrics.record_cache("miss")
        else:
            logger.debug("precision cache busy; not storing lambda=%d", lambda_)
            self._metrics.record_cache("skipped")
        return computed

    def __contains__(self, lambda_: object) -> bool:
        with self._lock:
            return lambda_ in self._bounds

    def __len__(self) -> int:
        with self._lock:
            return len(self._bounds)


_DEFAULT_CACHE = PrecisionBoundCache()


def default_cache() -> PrecisionBoundCache:
    """The shared cache used when a HashToPrime is built without one."""
    return _DEFAULT_CACHE


# ---------------------------------------------------------------------------
# HashToPrime
# ---------------------------------------------------------------------------

class HashToPrime:
    """
    Deterministic integer → probable prime, parameterized by *lambda_*.

    Args:
        lambda_: Security parameter (unsigned 32-bit).
        cache: Bound cache; defaults to the process-wide instance.
        rounds: Miller–Rabin rounds required to accept a candidate.
        max_iter: Candidate draws before :class:`PrimeSearchExhausted`.
    """

    __slots__ = ("_lambda", "_bound", "_max_int", "_rounds", "_max_iter")

    def __init__(
        self,
        lambda_: int,
        *,
        cache: Optional[PrecisionBoundCache] = None,
        rounds: int = MILLER_RABIN_ROUNDS,
        max_iter: int = MAX_PRIME_SEARCH_ITER,
    ) -> None:
        if not isinstance(lambda_, int) or isinstance(lambda_, bool):
            raise TypeError("lambda must be an int")
        if not 0 <= lambda_ <= _U32_MAX:
            raise ValueError(f"lambda must fit in 32 unsigned bits (got {lambda_})")
        if rounds < 1:
            raise ValueError("rounds must be >= 1")
        if max_iter < 1:
            raise ValueError("max_iter must be >= 1")

        bound = (cache or default_cache()).get(lambda_)
        self._lambda = lambda_
        self._bound = bound
        self._max_int = bound // CANDIDATE_DENSITY_DIVISOR
        self._rounds = rounds
        self._max_iter = max_iter

    @property
    def lambda_(self) -> int:
        return self._lambda

    @property
    def bound_bits(self) -> int:
        """``k`` in the precision bound ``2^k``."""
        return int(self._bound.bit_length()) - 1

    @property
    def max_int(self) -> mpz:
        """Exclusive ceiling of the raw candidate draw (``bound // 6``)."""
        return self._max_int

    def hash_to_prime(self, value: int) -> mpz:
        """
        Derive a probable prime from a non-negative integer.

        Raises:
            PrimeSearchExhausted: no candidate passed within ``max_iter`` draws.
        """
        value = mpz(value)
        if value < 0:
            raise ValueError("hash_to_prime input must be non-negative")
        seed = mpz(1) if value == 0 else value % SEED_MODULUS
        state = gmpy2.random_state(int(seed))

        for _ in range(self._max_iter):
            candidate = gmpy2.mpz_random(state, self._max_int)
            sign = 2 * gmpy2.mpz_random(state, 2) - 1
            candidate = 6 * candidate + sign
            if candidate < 2:
                continue
            if gmpy2.is_prime(candidate, self._rounds):
                return candidate

        raise PrimeSearchExhausted(
            lambda_=self._lambda,
            iterations=self._max_iter,
            bound_bits=int(self._max_int.bit_length()),
        )

    __call__ = hash_to_prime


__all__ = [
    "working_precision",
    "compute_precision_bound",
    "PrecisionBoundCache",
    "default_cache",
    "HashToPrime",
]
