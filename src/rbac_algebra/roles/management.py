"""Permissions and roles for managing roles.

Mirrors :mod:`rbac_algebra.permissions.management` one level up: a
:class:`RoleManagement` request applies an operation to a role, and a
:class:`RoleManagementPermission` allows it for every role up to a
ceiling. The recursive variant can also manage roles that themselves
carry role-management authority within reach.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rbac_algebra.ordering import Comparison, compare_componentwise, negate, verdict_over
from rbac_algebra.permissions.management import RoleOperation
from rbac_algebra.permissions.permissible import Permissible
from rbac_algebra.permissions.permission import (
    Permission,
    PermissionSet,
    SimplePermission,
)
from rbac_algebra.roles.role import PermissionsRole, Role, Roles


@dataclass(frozen=True)
class RoleManagement(Permissible):
    """Request to apply ``operation`` to ``role``."""

    role: Role
    operation: RoleOperation

    def __str__(self) -> str:
        return f"RoleManagement({self.role}, {self.operation})"


@dataclass(frozen=True)
class RoleManagementPermission(SimplePermission):
    """Permits managing any role at or below ``role``.

    Parameters
    ----------
    role:
        Ceiling: only roles ``<=`` this one may be managed.
    operations_permission:
        Which role operations are allowed.
    """

    role: Role
    operations_permission: Permission

    def permits(self, permissible: Permissible) -> bool:
        if not isinstance(permissible, RoleManagement):
            return False
        return permissible.role <= self.role and self.operations_permission.permits(
            permissible.operation
        )

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if isinstance(other, RecursiveRoleManagementPermission):
            return negate(other.try_compare_to(self))
        if isinstance(other, RoleManagementPermission):
            return compare_componentwise(
                self.role.try_compare_to(other.role),
                self.operations_permission.try_compare_to(other.operations_permission),
            )
        return SimplePermission.try_compare_to(self, other)

    def __str__(self) -> str:
        return f"RoleManagementPermission({self.role}, {self.operations_permission})"


@dataclass(frozen=True)
class RecursiveRoleManagementPermission(RoleManagementPermission):
    """Like :class:`RoleManagementPermission`, but also permits managing
    role-management roles whose ceiling is within reach.

    Example
    -------
    ::

        admin = RecursiveRoleManagementPermission(editor, Permission.to(GRANT))
        admin.permits(RoleManagement(RoleManagementRole(editor, GRANT), GRANT))
    """

    def permits(self, permissible: Permissible) -> bool:
        if not isinstance(permissible, RoleManagement):
            return False
        request = RoleManagementPermission(
            permissible.role, Permission.to(permissible.operation)
        )
        return self >= request

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if isinstance(other, RecursiveRoleManagementPermission):
            forward = self._compare_management(other.role, other.operations_permission)
            backward = other._compare_management(self.role, self.operations_permission)
            if forward == 1 and backward == 1:
                return 0
            return forward
        if isinstance(other, RoleManagementPermission):
            return self._compare_management(other.role, other.operations_permission)
        return SimplePermission.try_compare_to(self, other)

    def _compare_management(self, role: Role, operations: Permission) -> Comparison:
        """Compare against a non-recursive role management permission over ``(role, operations)``."""
        if isinstance(role, PermissionsRole):
            inner = role.permissions
            if isinstance(inner, RoleManagementPermission):
                return self._compare_management(
                    inner.role, operations.union(inner.operations_permission)
                )
            if isinstance(inner, PermissionSet) and any(
                isinstance(member, RoleManagementPermission) for member in inner.members
            ):
                verdict = self._compare_over(
                    [PermissionsRole(member) for member in inner.members], operations
                )
                if verdict is not None:
                    return verdict
        if isinstance(role, Roles):
            verdict = self._compare_over(role.members, operations)
            if verdict is not None:
                return verdict
        flat = compare_componentwise(
            self.role.try_compare_to(role),
            self.operations_permission.try_compare_to(operations),
        )
        # Recursive beats its non-recursive counterpart.
        return 1 if flat == 0 else flat

    def _compare_over(self, roles: Iterable[Role], operations: Permission) -> Comparison:
        return verdict_over([self._compare_management(role, operations) for role in roles])

    def __str__(self) -> str:
        return f"RecursiveRoleManagementPermission({self.role}, {self.operations_permission})"


class RoleManagementRole(PermissionsRole):
    """A role allowing ``operations`` on every role up to ``role``."""

    def __init__(self, role: Role, *operations: RoleOperation) -> None:
        self.managed_role = role
        super().__init__(RoleManagementPermission(role, Permission.to(*operations)))


class RecursiveRoleManagementRole(PermissionsRole):
    """Recursive counterpart of :class:`RoleManagementRole`."""

    def __init__(self, role: Role, *operations: RoleOperation) -> None:
        self.managed_role = role
        super().__init__(RecursiveRoleManagementPermission(role, Permission.to(*operations)))
