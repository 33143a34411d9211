"""Roles: named bundles of permissions that can be joined and ordered.

A role answers ``can(permissible)``. Roles join with ``+`` into a
:class:`Roles` composite and are partially ordered by the authority they
grant, with :data:`SUPER_USER_ROLE` on top and :data:`NO_ROLE` at the
bottom.

Example
-------
::

    reader = Role.of(read.permission)
    writer = Role.of(write.permission)
    staff = reader + writer
    assert staff.can(read) and staff.can(write)
    assert reader < staff
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import ClassVar

from rbac_algebra.exceptions import PermissionConstructionError
from rbac_algebra.ordering import Comparison, PartiallyOrdered, at_least, at_most, negate
from rbac_algebra.permissions.permissible import (
    Operation,
    Permissible,
    PermissibleSet,
)
from rbac_algebra.permissions.permission import (
    ALL_PERMISSIONS,
    NO_PERMISSIONS,
    Permission,
)
from rbac_algebra.resources.resource import (
    PermissibleResource,
    ResourceOperationPermission,
)


class Role(PartiallyOrdered, ABC):
    """Base class for all roles."""

    @abstractmethod
    def can(self, permissible: Permissible) -> bool:
        """Return True if this role allows ``permissible``."""

    def can_set(self, permissibles: PermissibleSet) -> bool:
        """Evaluate an ``AllOf``/``AnyOf`` recursively against :meth:`can`."""
        return permissibles.is_satisfied_by(self.can)

    def __add__(self, other: object) -> Role:
        if not isinstance(other, Role):
            return NotImplemented
        return Role.join(self, other)

    def try_compare_to(self, other: object) -> Comparison:
        if other is SUPER_USER_ROLE:
            return 0 if self is SUPER_USER_ROLE else -1
        if other is NO_ROLE:
            return 0 if self is NO_ROLE else 1
        if isinstance(other, (Roles, PermissionsRole)):
            return negate(other.try_compare_to(self))
        return None

    # -- factories ----------------------------------------------------------

    @staticmethod
    def join(*roles: Role | Iterable[Role]) -> Role:
        """Join roles into the simplest equivalent role.

        Composites are flattened, :data:`NO_ROLE` is dropped, the presence
        of :data:`SUPER_USER_ROLE` collapses the result to it, an empty
        input yields :data:`NO_ROLE` and a single survivor is returned
        unwrapped.
        """
        if len(roles) == 1 and not isinstance(roles[0], Role):
            members = list(roles[0])
        else:
            members = list(roles)
        if any(member is SUPER_USER_ROLE for member in members):
            return SUPER_USER_ROLE
        flat: set[Role] = set()
        for member in members:
            if isinstance(member, Roles):
                flat.update(member.members)
            else:
                flat.add(member)
        flat.discard(NO_ROLE)
        if not flat:
            return NO_ROLE
        if len(flat) == 1:
            return next(iter(flat))
        return Roles(flat)

    @staticmethod
    def of(*permissions: Permission | Iterable[Permission]) -> Role:
        """A :class:`PermissionsRole` over the union of ``permissions``."""
        return PermissionsRole(Permission.of(*permissions))

    @staticmethod
    def for_operations(*permissibles: Permissible) -> Role:
        """A :class:`PermissionsRole` permitting exactly ``permissibles``."""
        return PermissionsRole(Permission.to(*permissibles))


class PermissionsRole(Role):
    """A role granting exactly what ``permissions`` permits.

    Equality and hashing look only at ``permissions``, so subclasses that
    wrap the same permission compare equal.
    """

    def __init__(self, permissions: Permission) -> None:
        self.permissions = permissions

    def can(self, permissible: Permissible) -> bool:
        return self.permissions.permits(permissible)

    def try_compare_to(self, other: object) -> Comparison:
        if other is SUPER_USER_ROLE:
            return 0 if self.permissions is ALL_PERMISSIONS else -1
        if other is NO_ROLE:
            return 0 if self.permissions is NO_PERMISSIONS else 1
        if isinstance(other, PermissionsRole):
            return self.permissions.try_compare_to(other.permissions)
        return Role.try_compare_to(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionsRole):
            return NotImplemented
        return self.permissions == other.permissions

    def __hash__(self) -> int:
        return hash(self.permissions)

    def __str__(self) -> str:
        return f"PermissionsRole({self.permissions})"

    __repr__ = __str__


class SuperUserRole(Role):
    """Top role: can do anything. The single instance is :data:`SUPER_USER_ROLE`."""

    _instance: ClassVar[SuperUserRole | None] = None

    def __new__(cls) -> SuperUserRole:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def can(self, permissible: Permissible) -> bool:
        return True

    def try_compare_to(self, other: object) -> Comparison:
        if other is self:
            return 0
        if isinstance(other, PermissionsRole) and other.permissions is ALL_PERMISSIONS:
            return 0
        if isinstance(other, Role):
            return 1
        return None

    def __repr__(self) -> str:
        return "SuperUserRole"


class NoRole(Role):
    """Bottom role: can do nothing. The single instance is :data:`NO_ROLE`."""

    _instance: ClassVar[NoRole | None] = None

    def __new__(cls) -> NoRole:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def can(self, permissible: Permissible) -> bool:
        return False

    def try_compare_to(self, other: object) -> Comparison:
        if other is self:
            return 0
        if isinstance(other, PermissionsRole) and other.permissions is NO_PERMISSIONS:
            return 0
        if isinstance(other, Role):
            return -1
        return None

    def __repr__(self) -> str:
        return "NoRole"


SUPER_USER_ROLE = SuperUserRole()
NO_ROLE = NoRole()


class ResourceRole(PermissionsRole):
    """A role allowing ``operations`` on ``resource`` and its subtree."""

    def __init__(self, resource: PermissibleResource, *operations: Operation) -> None:
        self.resource = resource
        self.operations = frozenset(operations)
        super().__init__(ResourceOperationPermission(resource, Permission.to(*operations)))


class Roles(Role):
    """Join of two or more roles, none of them composite or a role bound.

    Use :meth:`Role.join` (or ``+``) to build one.

    Raises
    ------
    PermissionConstructionError
        If fewer than two members are given, or a member is a ``Roles``,
        :data:`SUPER_USER_ROLE` or :data:`NO_ROLE`.
    """

    def __init__(self, members: Iterable[Role]) -> None:
        roles = frozenset(members)
        if len(roles) < 2:
            raise PermissionConstructionError(
                f"Roles needs at least two members, got {len(roles)}; use Role.join."
            )
        for role in roles:
            if isinstance(role, (Roles, SuperUserRole, NoRole)):
                raise PermissionConstructionError(
                    f"Roles cannot contain {role!r}; use Role.join."
                )
        self._members = roles

    @property
    def members(self) -> frozenset[Role]:
        return self._members

    def can(self, permissible: Permissible) -> bool:
        return any(role.can(permissible) for role in self._members)

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if isinstance(other, Roles):
            # Every member on one side dominated by some member on the other.
            covers = all(
                any(at_least(mine.try_compare_to(theirs)) for mine in self._members)
                for theirs in other.members
            )
            covered = all(
                any(at_least(theirs.try_compare_to(mine)) for theirs in other.members)
                for mine in self._members
            )
            if covers and covered:
                return 0
            if covers:
                return 1
            if covered:
                return -1
            return None
        if other is SUPER_USER_ROLE or other is NO_ROLE:
            return Role.try_compare_to(self, other)
        if isinstance(other, Role):
            if other in self._members:
                return 1
            if any(at_least(role.try_compare_to(other)) for role in self._members):
                return 1
            if all(at_most(role.try_compare_to(other)) for role in self._members):
                return -1
            return None
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Roles):
            return NotImplemented
        return self._members == other.members

    def __hash__(self) -> int:
        return hash(self._members)

    def __str__(self) -> str:
        return "Roles(" + ", ".join(sorted(str(role) for role in self._members)) + ")"

    __repr__ = __str__
