"""
Cooperative cancellation for long-running proofs.

A :class:`CancellationToken` wraps a :class:`threading.Event`. The prover
polls it between whole squaring steps; nothing is interrupted mid-operation.

Two ways to build one:

    token = CancellationToken()                  # owns a fresh flag
    token = CancellationToken.from_external(ev)  # shares a caller-owned Event

The shared form lets an external scheduler abort an in-flight proof (e.g. a
faster competing proof for the same round already arrived) by setting the
event it owns, without holding a reference to the token itself.
"""

from __future__ import annotations

import threading


class CancellationToken:
    """Monotonic stop flag: once cancelled, always cancelled."""

    __slots__ = ("_flag", "_external")

    def __init__(self) -> None:
        self._flag = threading.Event()
        self._external = False

    @classmethod
    def from_external(cls, flag: threading.Event) -> "CancellationToken":
        """Bind to a flag owned by the caller. Cancelling either side is visible to both."""
        if not isinstance(flag, threading.Event):
            raise TypeError("external flag must be a threading.Event")
        token = cls.__new__(cls)
        token._flag = flag
        token._external = True
        return token

    @property
    def is_external(self) -> bool:
        return self._external

    @property
    def flag(self) -> threading.Event:
        return self._flag

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._flag.set()

    def is_cancelled(self) -> bool:
        """Non-blocking poll."""
        return self._flag.is_set()

    def __repr__(self) -> str:
        kind = "external" if self._external else "owned"
        return f"CancellationToken({kind}, cancelled={self.is_cancelled()})"


__all__ = ["CancellationToken"]
