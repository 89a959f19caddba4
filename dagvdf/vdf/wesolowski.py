"""
dagvdf.vdf.wesolowski
=====================

The Wesolowski VDF instance and its solution type.

A :class:`WesolowskiVdf` bundles the RSW puzzle (what to square, how often,
in which group) with the hash-to-prime challenge. It is immutable and shared
by reference between :class:`~dagvdf.vdf.prover.WesolowskiProver` and
:class:`~dagvdf.vdf.verifier.WesolowskiVerifier`; neither mutates it.

Wire format
-----------
A :class:`Solution` is ``(proof, output)`` = ``(π, y)``, each a minimal
big-endian unsigned magnitude with no fixed width. Both fields empty means the
proof was cancelled and there is no solution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from gmpy2 import mpz

from ..utils.bytes import BytesLike, as_bytes, from_hex, to_hex
from .hash_to_prime import HashToPrime, PrecisionBoundCache
from .puzzle import RswPuzzle


@dataclass(frozen=True)
class Solution:
    """
    Proof/output pair produced by the prover.

    Fields:
      proof:  π = x^⌊2^T/ℓ⌋ mod N, big-endian
      output: y = x^(2^T) mod N, big-endian
    """

    proof: bytes
    output: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "proof", as_bytes(self.proof))
        object.__setattr__(self, "output", as_bytes(self.output))

    @classmethod
    def empty(cls) -> "Solution":
        """The "no solution" marker returned by a cancelled prover."""
        return cls(b"", b"")

    @property
    def is_empty(self) -> bool:
        return not self.proof and not self.output

    def to_dict(self) -> Dict[str, str]:
        """JSON-friendly form; ``sol1`` is the proof and ``sol2`` the output."""
        return {"sol1": to_hex(self.proof), "sol2": to_hex(self.output)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Solution":
        return cls(proof=from_hex(d.get("sol1", "")), output=from_hex(d.get("sol2", "")))


class WesolowskiVdf:
    """
    One VDF instance: ``(lambda, time_bits, input, modulus)``.

    Args:
        lambda_: Hash-to-prime security parameter.
        time_bits: Delay exponent; the prover performs ``2^time_bits`` squarings.
        input: Round seed/commitment, big-endian bytes (reduced mod ``modulus``).
        modulus: RSA-type modulus from a trusted setup, big-endian bytes.
        cache: Optional precision-bound cache for the hash-to-prime step.
    """

    __slots__ = ("_puzzle", "_hash")

    def __init__(
        self,
        lambda_: int,
        time_bits: int,
        input: BytesLike,
        modulus: BytesLike,
        *,
        cache: Optional[PrecisionBoundCache] = None,
        **hash_opts: int,
    ) -> None:
        self._puzzle = RswPuzzle(time_bits, input, modulus)
        self._hash = HashToPrime(lambda_, cache=cache, **hash_opts)

    @property
    def puzzle(self) -> RswPuzzle:
        return self._puzzle

    @property
    def lambda_(self) -> int:
        return self._hash.lambda_

    @property
    def time_bits(self) -> int:
        return self._puzzle.time_bits

    @property
    def base(self) -> mpz:
        return self._puzzle.base

    @property
    def modulus(self) -> mpz:
        return self._puzzle.modulus

    @property
    def iterations(self) -> mpz:
        return self._puzzle.iterations

    def hash_to_prime(self, value: int) -> mpz:
        return self._hash.hash_to_prime(value)

    def challenge(self, output: int) -> mpz:
        """
        Fiat–Shamir prime for output *y*: ``HashToPrime(x · 2^bitlen(N) + y)``.

        Shared by prover and verifier so both concatenate ``x || y`` the same way.
        """
        x = self._puzzle.base
        return self.hash_to_prime((x << self._puzzle.modulus.bit_length()) + output)

    def __repr__(self) -> str:
        return f"WesolowskiVdf(lambda={self.lambda_}, {self._puzzle!r})"


__all__ = ["Solution", "WesolowskiVdf"]
