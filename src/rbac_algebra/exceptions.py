"""Exception hierarchy for rbac-algebra.

All library errors derive from :class:`RbacError`. Authorization failures
(policy evaluation said no) and authentication failures (no usable
credential before evaluation) are disjoint branches so adapters can tell
them apart.

Hierarchy
---------
::

    RbacError
    ├── AuthorizationError
    │   ├── UnpermittedOperationError
    │   └── UnpermittedOperationsError
    ├── AuthenticationError
    │   ├── MissingCredentialsError
    │   └── FailedAuthenticationError
    ├── PermissionConstructionError
    ├── ResourceHierarchyError
    ├── RoleConfigError
    └── UnknownUserError
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rbac_algebra.permissions.permissible import Permissible, PermissibleSet


class RbacError(Exception):
    """Base class for every error raised by rbac-algebra."""


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------


class AuthorizationError(RbacError):
    """Raised when a permission source denies a guarded operation."""


class UnpermittedOperationError(AuthorizationError):
    """Raised when a single permissible is denied.

    Attributes
    ----------
    permissible:
        The permissible that was attempted.
    source_description:
        Display string of the permission source that denied it.
    """

    def __init__(self, permissible: Permissible, source_description: str) -> None:
        self.permissible = permissible
        self.source_description = source_description
        super().__init__(
            f"Unpermitted operation: {permissible}; "
            f"permission source: {source_description}"
        )


class UnpermittedOperationsError(AuthorizationError):
    """Raised when a permissible set (``AllOf``/``AnyOf``) is denied.

    Attributes
    ----------
    permissibles:
        The permissible set that was attempted.
    combinator:
        ``"all"`` or ``"any"``, naming how the members had to be satisfied.
    members:
        The members of the set, sorted by their string form.
    source_description:
        Display string of the permission source that denied it.
    """

    def __init__(self, permissibles: PermissibleSet, source_description: str) -> None:
        self.permissibles = permissibles
        self.combinator = permissibles.combinator
        self.members = sorted(permissibles.members, key=str)
        self.source_description = source_description
        listing = ", ".join(str(member) for member in self.members)
        super().__init__(
            f"Unpermitted operations: {self.combinator} of the following: {listing}; "
            f"permission source: {source_description}"
        )


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class AuthenticationError(RbacError):
    """Raised when a bearer could not be established before evaluation."""


class MissingCredentialsError(AuthenticationError):
    """Raised when no credential was supplied at all."""


class FailedAuthenticationError(AuthenticationError):
    """Raised when a supplied credential does not identify a bearer."""


# ---------------------------------------------------------------------------
# Construction and configuration
# ---------------------------------------------------------------------------


class PermissionConstructionError(RbacError):
    """Raised when a ``PermissionSet`` or ``Roles`` invariant is violated.

    Callers going through ``Permission.of`` or ``Role.join`` never see this;
    it indicates a defect in a combinator.
    """


class ResourceHierarchyError(RbacError, ValueError):
    """Raised for a self-parenting resource or a cyclic parent chain."""


class RoleConfigError(RbacError, ValueError):
    """Raised when a role catalog config is malformed or invalid.

    Attributes
    ----------
    config_path:
        The path to the config file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class UnknownUserError(RbacError, KeyError):
    """Raised when a user id is not present in a user registry.

    Attributes
    ----------
    user_id:
        The id that was looked up.
    """

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"Unknown user: {user_id!r}")

    def __str__(self) -> str:
        return str(self.args[0])
