"""
VDF / sortition configuration.

This file defines typed configuration objects and helpers for:
- VDF parameters (lambda bound, difficulty range, hash-to-prime knobs)
- VRF sortition threshold ceiling
- The combined :class:`SortitionParams` used to pick a round's difficulty

It provides:
- Dataclass-based configs with validation
- Loading from environment variables (prefix configurable)
- Loading from a JSON or YAML file

Difficulty is used directly as ``time_bits``: a VDF at difficulty ``d`` runs
``2^d`` sequential squarings.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict

import yaml

from .constants import (
    DEFAULT_DIFFICULTY_MAX,
    DEFAULT_DIFFICULTY_MIN,
    DEFAULT_DIFFICULTY_STALE,
    DEFAULT_LAMBDA_BOUND,
    MAX_PRACTICAL_TIME_BITS,
    MAX_PRIME_SEARCH_ITER,
    MILLER_RABIN_ROUNDS,
)

_U16_MAX = 0xFFFF


# -------------------------
# Sub-configs
# -------------------------


@dataclass
class VdfConfig:
    """
    VDF parameters for the sortition.

    difficulty_min / difficulty_max: inclusive range of time_bits handed out
        to eligible proposers.
    difficulty_stale: time_bits used when the VRF output is above threshold
        (the proposer is "stale" and must run the slow VDF).
    lambda_bound: hash-to-prime security parameter.
    miller_rabin_rounds / max_prime_search_iter: hash-to-prime search knobs.
    """

    difficulty_min: int = DEFAULT_DIFFICULTY_MIN
    difficulty_max: int = DEFAULT_DIFFICULTY_MAX
    difficulty_stale: int = DEFAULT_DIFFICULTY_STALE
    lambda_bound: int = DEFAULT_LAMBDA_BOUND
    miller_rabin_rounds: int = MILLER_RABIN_ROUNDS
    max_prime_search_iter: int = MAX_PRIME_SEARCH_ITER

    def validate(self) -> None:
        for name in ("difficulty_min", "difficulty_max", "difficulty_stale", "lambda_bound"):
            v = getattr(self, name)
            if not 0 <= v <= _U16_MAX:
                raise ValueError(f"{name} must be in [0, {_U16_MAX}]")
        if self.difficulty_min > self.difficulty_max:
            raise ValueError("difficulty_min must be <= difficulty_max")
        for name in ("difficulty_max", "difficulty_stale"):
            if getattr(self, name) > MAX_PRACTICAL_TIME_BITS:
                raise ValueError(f"{name} must be <= {MAX_PRACTICAL_TIME_BITS} (time_bits)")
        if self.miller_rabin_rounds < 1:
            raise ValueError("miller_rabin_rounds must be >= 1")
        if self.max_prime_search_iter < 1:
            raise ValueError("max_prime_search_iter must be >= 1")

    @property
    def number_of_difficulties(self) -> int:
        return self.difficulty_max - self.difficulty_min + 1

    def hash_options(self) -> Dict[str, int]:
        """Keyword arguments for :class:`~dagvdf.vdf.hash_to_prime.HashToPrime`."""
        return {"rounds": self.miller_rabin_rounds, "max_iter": self.max_prime_search_iter}


@dataclass
class VrfConfig:
    """
    threshold_upper: VRF outputs (scaled) at or above this value are stale.
    """

    threshold_upper: int = 0

    def validate(self) -> None:
        if not 0 <= self.threshold_upper <= _U16_MAX:
            raise ValueError(f"threshold_upper must be in [0, {_U16_MAX}]")


# -------------------------
# Top-level config
# -------------------------


@dataclass
class SortitionParams:
    """VRF + VDF parameters; see :mod:`dagvdf.sortition`."""

    vrf: VrfConfig = field(default_factory=VrfConfig)
    vdf: VdfConfig = field(default_factory=VdfConfig)

    def validate(self) -> None:
        self.vrf.validate()
        self.vdf.validate()

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SortitionParams":
        """Build from a nested dict. Unknown keys are ignored."""
        vrf_d = data.get("vrf") or {}
        vdf_d = data.get("vdf") or {}
        defaults = VdfConfig()
        params = SortitionParams(
            vrf=VrfConfig(threshold_upper=int(vrf_d.get("threshold_upper", 0))),
            vdf=VdfConfig(
                difficulty_min=int(vdf_d.get("difficulty_min", defaults.difficulty_min)),
                difficulty_max=int(vdf_d.get("difficulty_max", defaults.difficulty_max)),
                difficulty_stale=int(vdf_d.get("difficulty_stale", defaults.difficulty_stale)),
                lambda_bound=int(vdf_d.get("lambda_bound", defaults.lambda_bound)),
                miller_rabin_rounds=int(
                    vdf_d.get("miller_rabin_rounds", defaults.miller_rabin_rounds)
                ),
                max_prime_search_iter=int(
                    vdf_d.get("max_prime_search_iter", defaults.max_prime_search_iter)
                ),
            ),
        )
        params.validate()
        return params

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "DAGVDF_") -> "SortitionParams":
        """
        Load configuration from environment variables. All variables are optional.

        Supported keys:
          - DAGVDF_VRF_THRESHOLD_UPPER=4096
          - DAGVDF_DIFFICULTY_MIN=16
          - DAGVDF_DIFFICULTY_MAX=21
          - DAGVDF_DIFFICULTY_STALE=23
          - DAGVDF_LAMBDA_BOUND=1500
          - DAGVDF_MILLER_RABIN_ROUNDS=30
          - DAGVDF_MAX_PRIME_SEARCH_ITER=10000
        """

        def _get(name: str, default: int) -> int:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None:
                return default
            try:
                return int(raw, 0)
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        d = VdfConfig()
        params = SortitionParams(
            vrf=VrfConfig(threshold_upper=_get("VRF_THRESHOLD_UPPER", 0)),
            vdf=VdfConfig(
                difficulty_min=_get("DIFFICULTY_MIN", d.difficulty_min),
                difficulty_max=_get("DIFFICULTY_MAX", d.difficulty_max),
                difficulty_stale=_get("DIFFICULTY_STALE", d.difficulty_stale),
                lambda_bound=_get("LAMBDA_BOUND", d.lambda_bound),
                miller_rabin_rounds=_get("MILLER_RABIN_ROUNDS", d.miller_rabin_rounds),
                max_prime_search_iter=_get("MAX_PRIME_SEARCH_ITER", d.max_prime_search_iter),
            ),
        )
        params.validate()
        return params

    @staticmethod
    def from_file(path: str) -> "SortitionParams":
        """
        Load configuration from a JSON or YAML file. Keys mirror the dataclass
        structure. Example (YAML):

            vrf:
              threshold_upper: 4096
            vdf:
              difficulty_min: 16
              difficulty_max: 21
              difficulty_stale: 23
              lambda_bound: 1500
        """
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        data = _parse_json_or_yaml(text, path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping at the top level")
        return SortitionParams.from_dict(data)


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e


DEFAULT: SortitionParams = SortitionParams()


__all__ = [
    "VdfConfig",
    "VrfConfig",
    "SortitionParams",
    "DEFAULT",
]
