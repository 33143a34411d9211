"""Permissions for managing permissions.

A :class:`PermissionManagement` permissible is a request to perform a
management operation (grant, retrieve) on some permission. A
:class:`PermissionManagementPermission` allows such requests for every
permission up to a ceiling; its recursive variant additionally allows
managing management permissions themselves.

Ordering
--------
``PermissionManagementPermission(level, ops)`` values are ordered
componentwise on ``(level, ops)``. A recursive management permission is
strictly greater than its non-recursive counterpart with the same
arguments, and nested management targets are unwrapped before comparing.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rbac_algebra.ordering import Comparison, compare_componentwise, negate, verdict_over
from rbac_algebra.permissions.permissible import Operation, Permissible
from rbac_algebra.permissions.permission import (
    Permission,
    PermissionSet,
    SimplePermission,
)


class PermissionOperation(Operation):
    """Operations that can be applied to a permission."""


class RoleOperation(Operation):
    """Operations that can be applied to a role."""


class ManagementOperation(PermissionOperation, RoleOperation, Enum):
    """Operations valid on both permissions and roles."""

    GRANT = "grant"
    RETRIEVE = "retrieve"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PermissionManagement(Permissible):
    """Request to apply ``operation`` to ``permissions``."""

    permissions: Permission
    operation: PermissionOperation

    def __str__(self) -> str:
        return f"PermissionManagement({self.permissions}, {self.operation})"


@dataclass(frozen=True)
class PermissionManagementPermission(SimplePermission):
    """Permits managing any permission at or below ``permissions_level``.

    Parameters
    ----------
    permissions_level:
        Ceiling: only permissions ``<=`` this one may be managed.
    operations_permission:
        Which management operations are allowed.

    Example
    -------
    ::

        admin = PermissionManagementPermission(
            Permission.to(read, write),
            Permission.to(ManagementOperation.GRANT),
        )
        admin.permits(PermissionManagement(read.permission, ManagementOperation.GRANT))
    """

    permissions_level: Permission
    operations_permission: Permission

    def permits(self, permissible: Permissible) -> bool:
        if not isinstance(permissible, PermissionManagement):
            return False
        return (
            permissible.permissions <= self.permissions_level
            and self.operations_permission.permits(permissible.operation)
        )

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if isinstance(other, RecursivePermissionManagementPermission):
            return negate(other.try_compare_to(self))
        if isinstance(other, PermissionManagementPermission):
            return compare_componentwise(
                self.permissions_level.try_compare_to(other.permissions_level),
                self.operations_permission.try_compare_to(other.operations_permission),
            )
        return SimplePermission.try_compare_to(self, other)

    def __str__(self) -> str:
        return (
            f"PermissionManagementPermission({self.permissions_level}, "
            f"{self.operations_permission})"
        )


@dataclass(frozen=True)
class RecursivePermissionManagementPermission(PermissionManagementPermission):
    """Like :class:`PermissionManagementPermission`, but may also manage
    management permissions whose own ceiling is within reach.

    ``RecursivePermissionManagementPermission(p, ops)`` permits
    ``PermissionManagement(PermissionManagementPermission(p, ops), op)`` for
    ``op`` in ``ops``, which the non-recursive form does not.
    """

    def permits(self, permissible: Permissible) -> bool:
        if not isinstance(permissible, PermissionManagement):
            return False
        request = PermissionManagementPermission(
            permissible.permissions, Permission.to(permissible.operation)
        )
        return self >= request

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if isinstance(other, RecursivePermissionManagementPermission):
            forward = self._compare_management(
                other.permissions_level, other.operations_permission
            )
            backward = other._compare_management(
                self.permissions_level, self.operations_permission
            )
            if forward == 1 and backward == 1:
                return 0
            return forward
        if isinstance(other, PermissionManagementPermission):
            return self._compare_management(
                other.permissions_level, other.operations_permission
            )
        return SimplePermission.try_compare_to(self, other)

    def _compare_management(self, level: Permission, operations: Permission) -> Comparison:
        """Compare against a non-recursive management permission over ``(level, operations)``."""
        if isinstance(level, PermissionManagementPermission):
            return self._compare_management(
                level.permissions_level,
                operations.union(level.operations_permission),
            )
        if isinstance(level, PermissionSet):
            verdict = verdict_over(
                [self._compare_management(member, operations) for member in level.members]
            )
            if verdict is not None:
                return verdict
        flat = compare_componentwise(
            self.permissions_level.try_compare_to(level),
            self.operations_permission.try_compare_to(operations),
        )
        # Recursive beats its non-recursive counterpart.
        return 1 if flat == 0 else flat

    def __str__(self) -> str:
        return (
            f"RecursivePermissionManagementPermission({self.permissions_level}, "
            f"{self.operations_permission})"
        )
