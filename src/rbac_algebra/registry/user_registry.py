"""Thread-safe in-memory user store guarded by role management.

Every mutating or reading call takes an explicit ``source`` and is secured
against a :class:`~rbac_algebra.roles.management.RoleManagement` request:
adding or removing a user requires authority over the user's role,
granting a role requires authority over the granted role, and fetching a
user requires authority over that user's role.

Example
-------
::

    registry = UserRegistry()
    admin = RecursiveRoleManagementRole(SUPER_USER_ROLE, *UserOperation)
    registry.add_user(User("alice", editor), source=admin)
    user = registry.authenticate("alice")
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from rbac_algebra.evaluation.source import PermissionSource, secure
from rbac_algebra.exceptions import (
    FailedAuthenticationError,
    MissingCredentialsError,
    UnknownUserError,
)
from rbac_algebra.permissions.management import RoleOperation
from rbac_algebra.permissions.permission import Permission
from rbac_algebra.roles.management import RoleManagement
from rbac_algebra.roles.role import Role
from rbac_algebra.roles.user import User

if TYPE_CHECKING:
    from rbac_algebra.config.role_loader import RoleCatalog

logger = logging.getLogger(__name__)

Bearer = PermissionSource | Permission | Role | User


class UserOperation(RoleOperation, Enum):
    """Role operations a user registry is guarded by."""

    ADD_USER = "add_user"
    GET_USER = "get_user"
    REMOVE_USER = "remove_user"
    GRANT_ROLE = "grant_role"

    def __str__(self) -> str:
        return self.value


class UserRegistry:
    """Thread-safe in-memory user store.

    Parameters
    ----------
    users:
        Optional initial users, stored without any authority check.
    """

    def __init__(self, users: list[User] | None = None) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, User] = {user.name: user for user in users or []}

    @classmethod
    def from_catalog(cls, catalog: RoleCatalog) -> UserRegistry:
        """Seed a registry with every user declared in ``catalog``."""
        registry = cls(list(catalog.users.values()))
        logger.info("Seeded user registry with %d users", len(registry))
        return registry

    # ------------------------------------------------------------------
    # Guarded operations
    # ------------------------------------------------------------------

    def add_user(self, user: User, *, source: Bearer) -> User:
        """Register ``user``; requires ``ADD_USER`` over the user's role.

        Raises
        ------
        ValueError
            If a user with the same name already exists.
        """

        def _add() -> User:
            with self._lock:
                if user.name in self._users:
                    raise ValueError(f"User {user.name!r} already exists")
                self._users[user.name] = user
            logger.info("Added user %s", user.name)
            return user

        return secure(RoleManagement(user.roles, UserOperation.ADD_USER), _add, source)

    def get_user(self, name: str, *, source: Bearer) -> User:
        """Fetch a user; requires ``GET_USER`` over that user's role.

        Raises
        ------
        UnknownUserError
            If no user is registered under ``name``.
        """
        return self._secure_current(name, UserOperation.GET_USER, lambda user: user, source)

    def remove_user(self, name: str, *, source: Bearer) -> User:
        """Remove and return a user; requires ``REMOVE_USER`` over that user's role."""
        removed = self._secure_current(
            name, UserOperation.REMOVE_USER, lambda user: self._users.pop(name), source
        )
        logger.info("Removed user %s", name)
        return removed

    def grant(self, name: str, role: Role, *, source: Bearer) -> User:
        """Join ``role`` into a user's roles; requires ``GRANT_ROLE`` over ``role``."""

        def _grant() -> User:
            with self._lock:
                current = self._users.get(name)
                if current is None:
                    raise UnknownUserError(name)
                updated = current.with_roles(role)
                self._users[name] = updated
            logger.info("Granted %s to user %s", role, name)
            return updated

        return secure(RoleManagement(role, UserOperation.GRANT_ROLE), _grant, source)

    # ------------------------------------------------------------------
    # Authentication and bookkeeping
    # ------------------------------------------------------------------

    def authenticate(self, name: str | None) -> User:
        """Resolve a credential (here, a user name) to a user.

        Raises
        ------
        MissingCredentialsError
            If ``name`` is ``None`` or empty.
        FailedAuthenticationError
            If no user is registered under ``name``.
        """
        if not name:
            raise MissingCredentialsError("No credentials supplied")
        with self._lock:
            user = self._users.get(name)
        if user is None:
            logger.debug("Authentication failed for %s", name)
            raise FailedAuthenticationError(f"Unknown user: {name!r}")
        return user

    def list_users(self, *, source: Bearer) -> list[str]:
        """Return the sorted names of users whose role ``source`` may ``GET_USER``."""
        resolved = PermissionSource.of(source)
        with self._lock:
            users = list(self._users.values())
        return sorted(
            user.name
            for user in users
            if resolved.permits(RoleManagement(user.roles, UserOperation.GET_USER))
        )

    def _secure_current(
        self,
        name: str,
        operation: UserOperation,
        action: Callable[[User], User],
        source: Bearer,
    ) -> User:
        """Secure ``operation`` over the stored user's role, then apply ``action``.

        ``action`` runs under the lock and only if the stored user is still
        the one whose role was checked. If the user was replaced while the
        check ran, the check is repeated against the new role.
        """
        while True:
            user = self._lookup(name)

            def _apply(checked: User = user) -> tuple[bool, User]:
                with self._lock:
                    if self._users.get(name) is not checked:
                        return False, checked
                    return True, action(checked)

            applied, result = secure(RoleManagement(user.roles, operation), _apply, source)
            if applied:
                return result
            logger.debug("User %s changed during %s; checking again", name, operation)

    def _lookup(self, name: str) -> User:
        with self._lock:
            user = self._users.get(name)
        if user is None:
            raise UnknownUserError(name)
        return user

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._users
