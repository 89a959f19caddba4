"""
dagvdf — Wesolowski verifiable delay function for DAG consensus rounds.

This package provides the RSW time-lock puzzle, the hash-to-prime challenge,
the Wesolowski prover/verifier pair, and the VDF-sortition helpers used to
pace block proposals.

Only light, stable exports are surfaced here to avoid import cycles. Import
the concrete types from :mod:`dagvdf.vdf`.
"""

from __future__ import annotations

from .version import __version__

__all__ = ["__version__"]
