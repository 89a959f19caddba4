"""
VDF errors.

A small, typed hierarchy of exceptions raised by the VDF pipeline. Callers can
catch the base :class:`VdfError` to handle every recoverable VDF failure, or
the concrete subclasses for finer control.

Cancellation is deliberately *not* an error: a cancelled proof is returned as
an empty :class:`~dagvdf.vdf.wesolowski.Solution`. Likewise the verifier never
raises on malformed proofs, it simply returns ``False``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class VdfError(Exception):
    """Base class for all VDF pipeline errors."""
    pass


@dataclass(eq=False)
class PrimeSearchExhausted(VdfError):
    """
    Raised when hash-to-prime finds no probable prime within its draw cap.

    The search is deterministic in its input, so retrying with the same
    ``(lambda, input)`` fails the same way; vary the input or lambda instead.

    Attributes:
        lambda_: Security parameter of the failing HashToPrime.
        iterations: Number of candidate draws attempted.
        bound_bits: Bit length of the candidate search ceiling.
    """
    lambda_: int
    iterations: int
    bound_bits: int

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return (
            f"PrimeSearchExhausted: no prime within {self.iterations} draws "
            f"(lambda={self.lambda_}, bound_bits={self.bound_bits})"
        )


@dataclass(eq=False)
class InvalidVdfSortition(VdfError):
    """
    Raised when a VDF sortition record fails verification.

    Attributes:
        reason: Short tag, one of 'difficulty-mismatch' or 'vdf-verify-failed'.
        difficulty: Difficulty claimed by the record.
        expected: Difficulty the verifier derived, when relevant.
    """
    reason: str
    difficulty: int
    expected: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        base = f"InvalidVdfSortition: {self.reason} difficulty={self.difficulty}"
        return f"{base} expected={self.expected}" if self.expected is not None else base


__all__ = [
    "VdfError",
    "PrimeSearchExhausted",
    "InvalidVdfSortition",
]
