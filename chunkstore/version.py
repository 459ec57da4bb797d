"""
Version helpers for chunkstore.
We keep a static __version__ (PEP 440) and expose a small structured view.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

# Bump this when publishing
__version__ = os.environ.get("CHUNKSTORE_VERSION") or "0.1.0"

#: Version tag written into every reference (`v="..."`) by this package.
PROTOCOL_VERSION = "0.0.1"


@dataclass(frozen=True)
class VersionInfo:
    package: str
    protocol: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.package} (refs v{self.protocol})"


def _parse_semver(v: str) -> Tuple[int, int, int]:
    parts = v.lstrip("v").split(".")[:3]
    try:
        major, minor, patch = (int(p.split("+")[0]) for p in parts)
    except ValueError:
        return (0, 0, 0)
    return (major, minor, patch)


version_tuple: Tuple[int, int, int] = _parse_semver(__version__)


def version_info() -> VersionInfo:
    return VersionInfo(package=__version__, protocol=PROTOCOL_VERSION)


__all__ = ["__version__", "PROTOCOL_VERSION", "VersionInfo", "version_info", "version_tuple"]
