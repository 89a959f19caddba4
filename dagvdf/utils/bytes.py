"""
dagvdf.utils.bytes
==================

Codecs between raw byte strings, hex text and unsigned big integers.

The VDF wire format is a pair of *minimal* big-endian unsigned magnitudes:
no sign byte, no fixed width, and zero encodes as the empty string. Readers
must know the modulus width to bound-check values.

Highlights
----------
- :func:`be_to_int` / :func:`int_to_be` for the wire encoding.
- :func:`to_hex` / :func:`from_hex` with strict validation (CLI and JSON).
- :func:`as_bytes` to normalize bytes-like values.
"""

from __future__ import annotations

import re
from typing import Union

from gmpy2 import mpz

BytesLike = Union[bytes, bytearray, memoryview]

__all__ = [
    "BytesLike",
    "as_bytes",
    "be_to_int",
    "int_to_be",
    "is_hex",
    "from_hex",
    "to_hex",
]


def as_bytes(x: BytesLike) -> bytes:
    """Normalize bytes-like to immutable :class:`bytes`."""
    if isinstance(x, bytes):
        return x
    if isinstance(x, (bytearray, memoryview)):
        return bytes(x)
    raise TypeError(f"expected bytes-like, got {type(x)!r}")


def be_to_int(data: BytesLike) -> mpz:
    """Decode a big-endian unsigned magnitude. The empty string decodes to 0."""
    return mpz(int.from_bytes(as_bytes(data), "big", signed=False))


def int_to_be(value: int) -> bytes:
    """
    Encode a non-negative integer as a minimal big-endian magnitude.

    Zero yields ``b""``, matching the wire format where an empty field means
    "no value".
    """
    v = int(value)
    if v < 0:
        raise ValueError("cannot encode a negative integer")
    return v.to_bytes((v.bit_length() + 7) // 8, "big", signed=False)


_HEX_RE = re.compile(r"^(?:0[xX])?[0-9a-fA-F]*$")


def is_hex(s: str) -> bool:
    """True if *s* is hex with an optional ``0x`` prefix and an even nibble count."""
    if not isinstance(s, str) or not _HEX_RE.match(s):
        return False
    body = s[2:] if s.startswith(("0x", "0X")) else s
    return len(body) % 2 == 0


def from_hex(s: str) -> bytes:
    """
    Convert a hex string (with optional ``0x``) to bytes.

    Odd-length input is rejected rather than silently left-padded; ``""`` and
    ``"0x"`` both decode to ``b""``.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a str")
    if not _HEX_RE.match(s):
        raise ValueError("invalid hex string (characters or whitespace)")
    body = s[2:] if s.startswith(("0x", "0X")) else s
    if len(body) % 2 != 0:
        raise ValueError("hex string must have an even number of nibbles")
    return bytes.fromhex(body)


def to_hex(b: BytesLike, *, prefix: str = "0x") -> str:
    """Encode bytes as lowercase hex, ``0x``-prefixed by default."""
    return (prefix or "") + as_bytes(b).hex()
