"""
Prometheus metrics for the VDF prover and verifier.

Instruments:
  • proofs_total            — finished prove() calls per outcome
  • verifications_total     — verify() calls per outcome
  • precision_cache_total   — precision-bound cache lookups per result
  • prove_seconds           — wall time of prove() (the enforced delay)
  • verify_seconds          — wall time of verify()

Label vocabularies are small and fixed; unknown labels are folded into a
catch-all so a buggy caller cannot blow up series cardinality.

Usage
-----
    from dagvdf.metrics import METRICS

    with METRICS.verify_timer():
        ok = verifier.verify(solution)
    METRICS.record_verification("accepted" if ok else "rejected")

Construct your own :class:`Metrics` with a separate registry for tests.
"""

from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Iterable

from prometheus_client import Counter, Histogram, REGISTRY


_PROOF_OUTCOMES = (
    "ok",           # proof and output produced
    "cancelled",    # token fired before completion
    "hash_failed",  # hash-to-prime exhausted its search
)

_VERIFY_OUTCOMES = (
    "accepted",     # candidate matched the output
    "rejected",     # well-formed but wrong
    "malformed",    # zero / out-of-range fields or hashing failure
)

_CACHE_RESULTS = (
    "hit",
    "miss",
    "skipped",      # computed but lock busy, not stored
)

# Proving spans milliseconds (tests) to minutes (production time_bits).
_PROVE_BUCKETS = (
    0.01, 0.05, 0.1, 0.5,
    1.0, 5.0, 10.0, 30.0,
    60.0, 120.0, 300.0, 600.0,
)

# Verification is O(log T); sub-second is the norm.
_VERIFY_BUCKETS = (
    0.0005, 0.001, 0.005, 0.01,
    0.025, 0.05, 0.1, 0.25,
    0.5, 1.0, 2.5,
)


class Metrics:
    """
    Container for the VDF Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem.
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "dagvdf",
        subsystem: str = "vdf",
        registry = REGISTRY,
        prove_buckets: Iterable[float] = _PROVE_BUCKETS,
        verify_buckets: Iterable[float] = _VERIFY_BUCKETS,
    ) -> None:
        self.proofs_total = Counter(
            "proofs_total",
            "Number of prove() calls finished, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.verifications_total = Counter(
            "verifications_total",
            "Number of verify() calls, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.precision_cache_total = Counter(
            "precision_cache_total",
            "Precision-bound cache lookups, labeled by result.",
            labelnames=("result",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

        self.prove_seconds = Histogram(
            "prove_seconds",
            "Time spent producing VDF proofs (seconds).",
            buckets=tuple(prove_buckets),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.verify_seconds = Histogram(
            "verify_seconds",
            "Time spent verifying VDF proofs (seconds).",
            buckets=tuple(verify_buckets),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    # ----- Recording helpers -------------------------------------------------

    def record_proof(self, outcome: str) -> None:
        if outcome not in _PROOF_OUTCOMES:
            outcome = "hash_failed"
        self.proofs_total.labels(outcome=outcome).inc()

    def record_verification(self, outcome: str) -> None:
        if outcome not in _VERIFY_OUTCOMES:
            outcome = "malformed"
        self.verifications_total.labels(outcome=outcome).inc()

    def record_cache(self, result: str) -> None:
        if result not in _CACHE_RESULTS:
            result = "miss"
        self.precision_cache_total.labels(result=result).inc()

    # ----- Context managers --------------------------------------------------

    @contextmanager
    def prove_timer(self):
        start = perf_counter()
        try:
            yield
        finally:
            self.prove_seconds.observe(perf_counter() - start)

    @contextmanager
    def verify_timer(self):
        """
        Time a verification block.

            with METRICS.verify_timer():
                verifier.verify(solution)
        """
        start = perf_counter()
        try:
            yield
        finally:
            self.verify_seconds.observe(perf_counter() - start)


# Singleton used by the prover, verifier and cache
METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
    "_PROOF_OUTCOMES",
    "_VERIFY_OUTCOMES",
    "_CACHE_RESULTS",
]
