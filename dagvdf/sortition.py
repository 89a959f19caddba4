"""
VDF sortition: turning a VRF threshold into a delay, and checking it.

A proposer's VRF output yields a *threshold* (lower is luckier). The
threshold is bucketed into a difficulty in ``[difficulty_min, difficulty_max]``;
thresholds at or above ``vrf.threshold_upper`` get ``difficulty_stale``. The
difficulty is then the VDF's ``time_bits``, so luckier proposers wait less.

VRF evaluation itself lives outside this package; callers pass the threshold
they derived.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .config import SortitionParams
from .constants import THRESHOLD_CORRECTION
from .errors import InvalidVdfSortition
from .utils.bytes import BytesLike
from .vdf import CancellationToken, Solution, WesolowskiProver, WesolowskiVdf, WesolowskiVerifier
from .vdf.hash_to_prime import PrecisionBoundCache

logger = logging.getLogger(__name__)


def calculate_difficulty(threshold: int, params: SortitionParams) -> int:
    """
    Map a VRF threshold to a VDF difficulty (time_bits).

    ``threshold * THRESHOLD_CORRECTION`` is compared with ``threshold_upper``;
    below it, the range is split into equal buckets, one per difficulty.
    """
    if threshold < 0:
        raise ValueError("threshold must be non-negative")
    vdf = params.vdf
    corrected = threshold * THRESHOLD_CORRECTION
    upper = params.vrf.threshold_upper
    if corrected >= upper:
        return vdf.difficulty_stale
    bucket = max(upper // vdf.number_of_difficulties, 1)
    return min(vdf.difficulty_min + corrected // bucket, vdf.difficulty_max)


def is_stale(difficulty: int, params: SortitionParams) -> bool:
    return difficulty == params.vdf.difficulty_stale


def make_vdf(
    params: SortitionParams,
    difficulty: int,
    vdf_input: BytesLike,
    modulus: BytesLike,
    *,
    cache: Optional[PrecisionBoundCache] = None,
) -> WesolowskiVdf:
    """Build the VDF a sortition at *difficulty* runs: ``lambda_bound`` and ``2^difficulty`` squarings."""
    return WesolowskiVdf(
        params.vdf.lambda_bound,
        difficulty,
        vdf_input,
        modulus,
        cache=cache,
        **params.vdf.hash_options(),
    )


@dataclass
class VdfSortition:
    """
    A proposer's sortition record: difficulty plus the VDF solution.

    ``computation_time_ms`` is local bookkeeping and is not serialized.
    """

    difficulty: int
    solution: Solution = field(default_factory=Solution.empty)
    computation_time_ms: int = 0

    @classmethod
    def from_threshold(cls, params: SortitionParams, threshold: int) -> "VdfSortition":
        return cls(difficulty=calculate_difficulty(threshold, params))

    def is_stale(self, params: SortitionParams) -> bool:
        return is_stale(self.difficulty, params)

    def compute(
        self,
        params: SortitionParams,
        vdf_input: BytesLike,
        modulus: BytesLike,
        token: Optional[CancellationToken] = None,
    ) -> Solution:
        """
        Run the prover for this record's difficulty and store the solution.

        A cancelled run stores (and returns) the empty solution.
        """
        vdf = make_vdf(params, self.difficulty, vdf_input, modulus)
        started = time.monotonic()
        self.solution = WesolowskiProver(vdf).prove(token)
        self.computation_time_ms = int((time.monotonic() - started) * 1000)
        logger.debug(
            "vdf sortition computed difficulty=%d in %d ms (cancelled=%s)",
            self.difficulty,
            self.computation_time_ms,
            self.solution.is_empty,
        )
        return self.solution

    def verify(
        self,
        params: SortitionParams,
        threshold: int,
        vdf_input: BytesLike,
        modulus: BytesLike,
    ) -> None:
        """
        Check the claimed difficulty against *threshold* and verify the VDF.

        Raises:
            InvalidVdfSortition: wrong difficulty or a failing solution.
        """
        expected = calculate_difficulty(threshold, params)
        if self.difficulty != expected:
            raise InvalidVdfSortition(
                reason="difficulty-mismatch", difficulty=self.difficulty, expected=expected
            )
        vdf = make_vdf(params, self.difficulty, vdf_input, modulus)
        ok, why = WesolowskiVerifier(vdf).verify_with_report(self.solution)
        if not ok:
            logger.debug("vdf sortition rejected: %s", why)
            raise InvalidVdfSortition(reason="vdf-verify-failed", difficulty=self.difficulty)

    # ----- Serialization -----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = dict(self.solution.to_dict())
        d["difficulty"] = self.difficulty
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "VdfSortition":
        return cls(difficulty=int(d["difficulty"]), solution=Solution.from_dict(d))


__all__ = [
    "calculate_difficulty",
    "is_stale",
    "make_vdf",
    "VdfSortition",
]
