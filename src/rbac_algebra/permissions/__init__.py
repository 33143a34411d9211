"""Permissibles and the permission lattice.

Example
-------
::

    from rbac_algebra.permissions import NamedOperation, Permission

    read = NamedOperation("read")
    write = NamedOperation("write")
    editor = Permission.to(read, write)
    assert editor.permits(write)
    assert read.permission < editor
"""
from __future__ import annotations

from rbac_algebra.permissions.management import (
    ManagementOperation,
    PermissionManagement,
    PermissionManagementPermission,
    PermissionOperation,
    RecursivePermissionManagementPermission,
    RoleOperation,
)
from rbac_algebra.permissions.permissible import (
    AllOf,
    AnyOf,
    NamedOperation,
    Operation,
    Permissible,
    PermissibleSet,
    all_of,
    any_of,
)
from rbac_algebra.permissions.permission import (
    ALL_PERMISSIONS,
    NO_PERMISSIONS,
    AllPermissions,
    NoPermissions,
    Permission,
    PermissionDifference,
    PermissionSet,
    SimplePermission,
    SinglePermission,
    TypePermission,
    compare_by_difference,
)

__all__ = [
    # Permissibles
    "AllOf",
    "AnyOf",
    "NamedOperation",
    "Operation",
    "Permissible",
    "PermissibleSet",
    "all_of",
    "any_of",
    # Lattice
    "ALL_PERMISSIONS",
    "NO_PERMISSIONS",
    "AllPermissions",
    "NoPermissions",
    "Permission",
    "PermissionDifference",
    "PermissionSet",
    "SimplePermission",
    "SinglePermission",
    "TypePermission",
    "compare_by_difference",
    # Management
    "ManagementOperation",
    "PermissionManagement",
    "PermissionManagementPermission",
    "PermissionOperation",
    "RecursivePermissionManagementPermission",
    "RoleOperation",
]
