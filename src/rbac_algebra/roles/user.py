"""Users: named bearers of a role."""
from __future__ import annotations

from dataclasses import dataclass, field, replace

from rbac_algebra.permissions.permissible import Permissible, PermissibleSet
from rbac_algebra.roles.role import NO_ROLE, Role


@dataclass(frozen=True)
class User:
    """A principal identified by ``name`` and holding ``roles``.

    Users are immutable; :meth:`with_roles` returns an updated copy.
    """

    name: str
    roles: Role = field(default=NO_ROLE)

    def can(self, permissible: Permissible) -> bool:
        return self.roles.can(permissible)

    def can_set(self, permissibles: PermissibleSet) -> bool:
        return self.roles.can_set(permissibles)

    def with_roles(self, *roles: Role) -> User:
        """Return a copy whose role is the join of the current role and ``roles``."""
        return replace(self, roles=Role.join(self.roles, *roles))

    def __str__(self) -> str:
        return f"User({self.name})"
