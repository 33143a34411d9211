"""Roles, role management and users.

Example
-------
::

    from rbac_algebra.roles import Role, User

    reader = Role.for_operations(read)
    alice = User("alice", reader)
    assert alice.can(read)
"""
from __future__ import annotations

from rbac_algebra.roles.management import (
    RecursiveRoleManagementPermission,
    RecursiveRoleManagementRole,
    RoleManagement,
    RoleManagementPermission,
    RoleManagementRole,
)
from rbac_algebra.roles.role import (
    NO_ROLE,
    SUPER_USER_ROLE,
    NoRole,
    PermissionsRole,
    ResourceRole,
    Role,
    Roles,
    SuperUserRole,
)
from rbac_algebra.roles.user import User

__all__ = [
    # Roles
    "NO_ROLE",
    "SUPER_USER_ROLE",
    "NoRole",
    "PermissionsRole",
    "ResourceRole",
    "Role",
    "Roles",
    "SuperUserRole",
    # Role management
    "RecursiveRoleManagementPermission",
    "RecursiveRoleManagementRole",
    "RoleManagement",
    "RoleManagementPermission",
    "RoleManagementRole",
    # Users
    "User",
]
