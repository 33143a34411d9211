"""Permission sources and the secure protocol."""
from __future__ import annotations

from rbac_algebra.evaluation.source import (
    PermissionSource,
    SecureResult,
    guarded,
    secure,
    try_secure,
)

__all__ = [
    "PermissionSource",
    "SecureResult",
    "guarded",
    "secure",
    "try_secure",
]
