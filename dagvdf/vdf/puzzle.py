"""
RSW time-lock puzzle parameters.

An :class:`RswPuzzle` fixes the group (``Z/NZ`` for an RSA-type modulus of
unknown factorization), the base ``x`` and the delay ``T = 2^time_bits``.
Solving it means computing ``x^(2^T) mod N`` with ``T`` sequential squarings.
"""

from __future__ import annotations

from gmpy2 import mpz

from ..utils.bytes import BytesLike, be_to_int


class RswPuzzle:
    """
    Immutable puzzle built from raw big-endian byte strings.

    ``base`` is the decoded input reduced modulo ``modulus``, so
    ``0 <= base < modulus`` always holds.
    """

    __slots__ = ("_time_bits", "_base", "_modulus", "_iterations")

    def __init__(self, time_bits: int, input_bytes: BytesLike, modulus_bytes: BytesLike) -> None:
        if not isinstance(time_bits, int) or isinstance(time_bits, bool) or time_bits < 0:
            raise ValueError(f"time_bits must be a non-negative int (got {time_bits!r})")
        modulus = be_to_int(modulus_bytes)
        if modulus <= 0:
            raise ValueError("modulus must be a positive integer")

        self._time_bits = time_bits
        self._modulus = modulus
        self._iterations = mpz(1) << time_bits
        self._base = be_to_int(input_bytes) % modulus

    @property
    def time_bits(self) -> int:
        return self._time_bits

    @property
    def base(self) -> mpz:
        return self._base

    @property
    def modulus(self) -> mpz:
        return self._modulus

    @property
    def iterations(self) -> mpz:
        return self._iterations

    def __repr__(self) -> str:
        return (
            f"RswPuzzle(time_bits={self._time_bits}, "
            f"modulus_bits={self._modulus.bit_length()})"
        )


__all__ = ["RswPuzzle"]
