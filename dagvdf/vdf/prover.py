"""
dagvdf.vdf.prover
=================

Wesolowski prover over an RSW puzzle.

Steps
-----
1) ``y = x^(2^T) mod N`` by ``T`` sequential squarings (the enforced delay).
2) ``ℓ = HashToPrime(x · 2^bitlen(N) + y)``.
3) A second ``T``-step pass builds ``π = x^⌊2^T/ℓ⌋ mod N`` by long division of
   ``2^T`` by ``ℓ`` one bit at a time, never materializing ``2^T``.
4) Return ``Solution(proof=π, output=y)``.

Both passes are driven by :class:`StepCounter`, which polls the cancellation
token every ``check_interval(T)`` steps. A cancelled poll returns
:meth:`Solution.empty`. For ``T`` beyond 64 bits the poll interval is a fixed
100000 steps.

The result is fully deterministic in the VDF parameters.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, Optional

from gmpy2 import mpz

from ..constants import (
    CHECK_INTERVAL_DIVISOR,
    LARGE_CHECK_INTERVAL,
    MAX_CHECK_INTERVAL,
    MIN_CHECK_INTERVAL,
    NATIVE_COUNTER_MAX,
)
from ..errors import PrimeSearchExhausted
from ..metrics import METRICS, Metrics
from ..utils.bytes import int_to_be
from .cancel import CancellationToken
from .wesolowski import Solution, WesolowskiVdf

logger = logging.getLogger(__name__)


def check_interval(iterations: int) -> int:
    """Squarings between cancellation polls for an iteration count of *iterations*."""
    if iterations <= NATIVE_COUNTER_MAX:
        return min(max(iterations // CHECK_INTERVAL_DIVISOR, MIN_CHECK_INTERVAL), MAX_CHECK_INTERVAL)
    return LARGE_CHECK_INTERVAL


class StepCounter:
    """
    Iterate ``1..T`` and stop early when a poll finds the token cancelled.

    Polls happen before step ``i`` whenever ``i % interval == 0``. After the
    loop, :attr:`cancelled` tells whether all ``T`` steps ran.
    """

    __slots__ = ("iterations", "interval", "cancelled", "_token")

    def __init__(self, iterations: int, token: CancellationToken) -> None:
        self.iterations = int(iterations)
        self.interval = check_interval(self.iterations)
        self.cancelled = False
        self._token = token

    def __iter__(self) -> Iterator[int]:
        interval = self.interval
        token = self._token
        for i in range(1, self.iterations + 1):
            if i % interval == 0 and token.is_cancelled():
                self.cancelled = True
                return
            yield i


class WesolowskiProver:
    """Stateless prover bound to one :class:`WesolowskiVdf`."""

    def __init__(self, vdf: WesolowskiVdf, *, metrics: Optional[Metrics] = None) -> None:
        self._vdf = vdf
        self._metrics = metrics or METRICS

    @property
    def vdf(self) -> WesolowskiVdf:
        return self._vdf

    def prove(self, token: Optional[CancellationToken] = None) -> Solution:
        """
        Produce ``(π, y)`` for the bound VDF.

        Returns :meth:`Solution.empty` if *token* is cancelled mid-run.

        Raises:
            PrimeSearchExhausted: the challenge prime could not be derived.
        """
        token = token if token is not None else CancellationToken()
        try:
            with self._metrics.prove_timer():
                solution = self._prove(token)
        except PrimeSearchExhausted:
            self._metrics.record_proof("hash_failed")
            raise
        self._metrics.record_proof("cancelled" if solution.is_empty else "ok")
        return solution

    def _prove(self, token: CancellationToken) -> Solution:
        vdf = self._vdf
        N = vdf.modulus
        x = vdf.base
        T = vdf.iterations

        # y = x^(2^T) mod N
        steps = StepCounter(T, token)
        y = mpz(x)
        for _ in steps:
            y = y * y % N
        if steps.cancelled:
            logger.debug("proof cancelled during evaluation (T=%d)", int(T))
            return Solution.empty()

        p = vdf.challenge(y)

        # π = x^⌊2^T/p⌋ mod N; r tracks 2^i mod p
        steps = StepCounter(T, token)
        r = mpz(1)
        pi = mpz(1)
        for _ in steps:
            pi = pi * pi % N
            r <<= 1
            if r >= p:
                r -= p
                pi = pi * x % N
        if steps.cancelled:
            logger.debug("proof cancelled during proof construction (T=%d)", int(T))
            return Solution.empty()

        return Solution(proof=int_to_be(pi), output=int_to_be(y))


@dataclass
class ProofJob:
    """Handle for a proof running on a worker thread."""

    future: "Future[Solution]"
    token: CancellationToken

    def cancel(self) -> None:
        """Ask the running proof to stop at its next poll."""
        self.token.cancel()

    def result(self, timeout: Optional[float] = None) -> Solution:
        return self.future.result(timeout=timeout)


def prove_in_background(
    vdf: WesolowskiVdf,
    *,
    executor: Optional[ThreadPoolExecutor] = None,
    flag: Optional[threading.Event] = None,
    metrics: Optional[Metrics] = None,
) -> ProofJob:
    """
    Start ``prove()`` on a worker thread and return a cancellable handle.

    With *flag*, the proof listens to a caller-owned event instead of a fresh
    token. Without *executor*, a one-shot single-worker pool is used and shut
    down once the proof finishes.
    """
    token = CancellationToken.from_external(flag) if flag is not None else CancellationToken()
    prover = WesolowskiProver(vdf, metrics=metrics)

    if executor is not None:
        return ProofJob(future=executor.submit(prover.prove, token), token=token)

    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="vdf-prove")
    future = pool.submit(prover.prove, token)
    future.add_done_callback(lambda _f: pool.shutdown(wait=False))
    return ProofJob(future=future, token=token)


__all__ = [
    "check_interval",
    "StepCounter",
    "WesolowskiProver",
    "ProofJob",
    "prove_in_background",
]
