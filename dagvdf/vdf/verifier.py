"""
dagvdf.vdf.verifier
===================

Wesolowski verifier used for consensus checks on network-delivered proofs.

Check performed:

    ℓ = HashToPrime(x · 2^bitlen(N) + y)
    r = 2^T mod ℓ
    y ≟ x^r · π^ℓ  (mod N)

This costs one hash-to-prime plus two modular exponentiations, i.e.
``O(log T)`` group operations regardless of the delay ``T``.

The verifier never raises on malformed input: zero or out-of-range fields and
hash-to-prime failures simply yield ``False``, so a corrupted or adversarial
proof cannot destabilize a verifying node. Use :meth:`verify_with_report` to
get a short reason label for logs and metrics.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import gmpy2

from ..errors import PrimeSearchExhausted
from ..metrics import METRICS, Metrics
from ..utils.bytes import be_to_int
from .wesolowski import Solution, WesolowskiVdf

logger = logging.getLogger(__name__)

# Reason labels returned by verify_with_report
REASON_OK = "ok"
REASON_ZERO_FIELD = "zero_field"
REASON_OUT_OF_RANGE = "out_of_range"
REASON_HASH_FAILED = "hash_failed"
REASON_MISMATCH = "equation_mismatch"

_MALFORMED = frozenset({REASON_ZERO_FIELD, REASON_OUT_OF_RANGE, REASON_HASH_FAILED})


class WesolowskiVerifier:
    """Stateless verifier bound to one :class:`WesolowskiVdf`."""

    def __init__(self, vdf: WesolowskiVdf, *, metrics: Optional[Metrics] = None) -> None:
        self._vdf = vdf
        self._metrics = metrics or METRICS

    @property
    def vdf(self) -> WesolowskiVdf:
        return self._vdf

    def verify(self, solution: Solution) -> bool:
        ok, _ = self.verify_with_report(solution)
        return ok

    def verify_with_report(self, solution: Solution) -> Tuple[bool, str]:
        """
        Verify *solution* and return ``(ok, reason)``.

        ``reason`` is ``"ok"`` on success, otherwise one of ``zero_field``,
        ``out_of_range``, ``hash_failed`` or ``equation_mismatch``.
        """
        with self._metrics.verify_timer():
            reason = self._check(solution)
        ok = reason == REASON_OK
        if ok:
            self._metrics.record_verification("accepted")
        elif reason in _MALFORMED:
            self._metrics.record_verification("malformed")
        else:
            self._metrics.record_verification("rejected")
        return ok, reason

    def _check(self, solution: Solution) -> str:
        vdf = self._vdf
        N = vdf.modulus
        x = vdf.base

        pi = be_to_int(solution.proof)
        y = be_to_int(solution.output)

        if pi == 0 or y == 0:
            return REASON_ZERO_FIELD
        if pi >= N or y >= N:
            return REASON_OUT_OF_RANGE

        try:
            p = vdf.challenge(y)
        except PrimeSearchExhausted as e:
            logger.debug("rejecting solution: %s", e)
            return REASON_HASH_FAILED

        r = gmpy2.powmod(2, vdf.iterations, p)
        candidate = gmpy2.powmod(x, r, N) * gmpy2.powmod(pi, p, N) % N
        return REASON_OK if candidate == y else REASON_MISMATCH


__all__ = [
    "WesolowskiVerifier",
    "REASON_OK",
    "REASON_ZERO_FIELD",
    "REASON_OUT_OF_RANGE",
    "REASON_HASH_FAILED",
    "REASON_MISMATCH",
]
