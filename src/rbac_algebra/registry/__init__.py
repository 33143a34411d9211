"""In-memory user registry guarded by role management."""
from __future__ import annotations

from rbac_algebra.registry.user_registry import UserOperation, UserRegistry

__all__ = ["UserOperation", "UserRegistry"]
