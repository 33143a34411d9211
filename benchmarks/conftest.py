"""Shared bootstrap for rbac-algebra benchmarks."""
from __future__ import annotations

import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).parent.parent
_SRC = _REPO_ROOT / "src"
_BENCHMARKS = _REPO_ROOT / "benchmarks"

for _path in [str(_SRC), str(_BENCHMARKS)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from rbac_algebra.evaluation.source import PermissionSource, secure
from rbac_algebra.permissions.permissible import NamedOperation
from rbac_algebra.resources.resource import ResourceNode, ResourceOperation
from rbac_algebra.roles.role import ResourceRole, Role

__all__ = [
    "NamedOperation",
    "PermissionSource",
    "ResourceNode",
    "ResourceOperation",
    "ResourceRole",
    "Role",
    "secure",
]
