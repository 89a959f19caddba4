"""
dagvdf.vdf
==========

Wesolowski VDF over an RSW time-lock puzzle.

Design
------
- :class:`WesolowskiVdf` is the immutable unit both sides operate on.
- :class:`WesolowskiProver` and :class:`WesolowskiVerifier` are stateless and
  may be built per call; several may run in parallel on worker threads.
- The only shared mutable state is the precision-bound cache behind
  :class:`HashToPrime`.

Usage
-----
>>> from dagvdf.vdf import WesolowskiVdf, CancellationToken, prove, verify
>>> vdf = WesolowskiVdf(128, 4, b"\\x02", b"\\x01\\x01")
>>> sol = prove(vdf, CancellationToken())
>>> verify(vdf, sol)
True
"""

from __future__ import annotations

from typing import Optional

from .cancel import CancellationToken
from .hash_to_prime import HashToPrime, PrecisionBoundCache, compute_precision_bound, default_cache
from .prover import ProofJob, WesolowskiProver, prove_in_background
from .puzzle import RswPuzzle
from .verifier import WesolowskiVerifier
from .wesolowski import Solution, WesolowskiVdf


def prove(vdf: WesolowskiVdf, token: Optional[CancellationToken] = None) -> Solution:
    """Shorthand for ``WesolowskiProver(vdf).prove(token)``."""
    return WesolowskiProver(vdf).prove(token)


def verify(vdf: WesolowskiVdf, solution: Solution) -> bool:
    """Shorthand for ``WesolowskiVerifier(vdf).verify(solution)``."""
    return WesolowskiVerifier(vdf).verify(solution)


__all__ = [
    "CancellationToken",
    "HashToPrime",
    "PrecisionBoundCache",
    "compute_precision_bound",
    "default_cache",
    "ProofJob",
    "WesolowskiProver",
    "prove_in_background",
    "RswPuzzle",
    "WesolowskiVerifier",
    "Solution",
    "WesolowskiVdf",
    "prove",
    "verify",
]
