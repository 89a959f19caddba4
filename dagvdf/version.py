"""
Version lookup for dagvdf.

Resolution order:
1) the installed distribution metadata (``pip install dagvdf`` / editable),
2) ``git describe`` when running from a checkout,
3) the static :data:`BASE_VERSION` with a ``+local`` marker.

Results are normalized to PEP 440 and cached for the process lifetime.
"""
from __future__ import annotations

import re
import subprocess
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path
from typing import Optional

# Bump on source-level releases.
BASE_VERSION = "0.3.0"

DIST_NAME = "dagvdf"

_DESCRIBE_RE = re.compile(
    r"^v(?P<tag>\d+\.\d+\.\d+)-(?P<distance>\d+)-g(?P<sha>[0-9a-f]+)(?P<dirty>-dirty)?$"
)


def _checkout_root() -> Optional[Path]:
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents[:3]):
        if (candidate / ".git").exists():
            return candidate
    return None


def version_from_describe(described: str) -> Optional[str]:
    """
    Turn ``git describe --long --dirty`` output into a PEP 440 string.

    ``v0.3.0-0-gabc123`` maps to ``0.3.0``; anything past a tag becomes
    ``{tag}.post{distance}+g{sha}`` with ``.dirty`` appended when needed.
    """
    m = _DESCRIBE_RE.match(described.strip())
    if not m:
        return None
    tag, distance, dirty = m.group("tag"), int(m.group("distance")), bool(m.group("dirty"))
    if distance == 0 and not dirty:
        return tag
    local = "+g" + m.group("sha") + (".dirty" if dirty else "")
    return f"{tag}.post{distance}{local}"


def _git_version() -> Optional[str]:
    root = _checkout_root()
    if root is None:
        return None
    try:
        out = subprocess.check_output(
            ["git", "-C", str(root), "describe", "--tags", "--long", "--dirty", "--match", "v*"],
            stderr=subprocess.DEVNULL,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return version_from_describe(out)


@lru_cache(maxsize=1)
def get_version() -> str:
    try:
        return _dist_version(DIST_NAME)
    except PackageNotFoundError:
        pass
    return _git_version() or f"{BASE_VERSION}+local"


__version__ = get_version()
__all__ = ["__version__", "get_version", "version_from_describe", "BASE_VERSION"]
