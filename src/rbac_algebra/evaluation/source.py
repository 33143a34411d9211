"""Permission sources and the secure protocol.

A :class:`PermissionSource` is the authority a guarded block is evaluated
against: a predicate over permissibles plus a human-readable description.
It is always passed explicitly, never looked up from ambient state.

:func:`secure` runs a block only if the source permits the target and
raises an :class:`~rbac_algebra.exceptions.AuthorizationError` otherwise.
:func:`try_secure` does the same but returns a :class:`SecureResult`.

Example
-------
::

    source = PermissionSource.from_user(alice)
    report = secure(read_report, lambda: load_report(), source)

    result = try_secure(delete_report, lambda: drop_report(), source)
    if not result:
        logger.warning("Denied: %s", result.error)
"""
from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from rbac_algebra.exceptions import (
    AuthorizationError,
    UnpermittedOperationError,
    UnpermittedOperationsError,
)
from rbac_algebra.permissions.permissible import Permissible, PermissibleSet
from rbac_algebra.permissions.permission import Permission, SimplePermission
from rbac_algebra.roles.role import Role
from rbac_algebra.roles.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PermissionSource(SimplePermission):
    """A permission defined by a predicate, with a display description.

    Parameters
    ----------
    predicate:
        Decides whether a single permissible is allowed.
    description:
        Shown in denial errors and logs.
    """

    def __init__(self, predicate: Callable[[Permissible], bool], description: str) -> None:
        self._predicate = predicate
        self.description = description

    def permits(self, permissible: Permissible | PermissibleSet) -> bool:
        if isinstance(permissible, PermissibleSet):
            return permissible.is_satisfied_by(self._predicate)
        return self._predicate(permissible)

    @classmethod
    def from_permission(cls, permission: Permission) -> PermissionSource:
        return cls(permission.permits, str(permission))

    @classmethod
    def from_role(cls, role: Role) -> PermissionSource:
        return cls(role.can, str(role))

    @classmethod
    def from_user(cls, user: User) -> PermissionSource:
        return cls(user.can, str(user))

    @classmethod
    def of(cls, bearer: PermissionSource | Permission | Role | User) -> PermissionSource:
        """Adapt a permission, role or user into a permission source.

        Raises
        ------
        TypeError
            If ``bearer`` is none of the supported kinds.
        """
        if isinstance(bearer, PermissionSource):
            return bearer
        if isinstance(bearer, Permission):
            return cls.from_permission(bearer)
        if isinstance(bearer, Role):
            return cls.from_role(bearer)
        if isinstance(bearer, User):
            return cls.from_user(bearer)
        raise TypeError(
            f"Cannot use {type(bearer).__name__} as a permission source; "
            "expected a Permission, Role or User."
        )

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"PermissionSource({self.description!r})"


@dataclass(frozen=True)
class SecureResult(Generic[T]):
    """Outcome of :func:`try_secure`.

    Attributes
    ----------
    value:
        The block's return value when the target was permitted.
    error:
        The authorization error when it was not.
    """

    value: T | None = None
    error: AuthorizationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return the value, or raise the stored authorization error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Secure protocol
# ---------------------------------------------------------------------------


def _denial(target: Permissible | PermissibleSet, source: PermissionSource) -> AuthorizationError:
    if isinstance(target, PermissibleSet):
        return UnpermittedOperationsError(target, source.description)
    return UnpermittedOperationError(target, source.description)


def _is_permitted(target: Permissible | PermissibleSet, source: PermissionSource) -> bool:
    permitted = source.permits(target)
    logger.debug("Secure %s: target=%s source=%s", "allow" if permitted else "deny", target, source)
    return permitted


def secure(
    target: Permissible | PermissibleSet,
    block: Callable[[], T],
    source: PermissionSource | Permission | Role | User,
) -> T:
    """Run ``block`` if ``source`` permits ``target``.

    The block runs at most once, and only after the check passes.

    Parameters
    ----------
    target:
        The permissible or permissible set being attempted.
    block:
        Zero-argument callable producing the guarded value.
    source:
        The authority to evaluate against. Permissions, roles and users are
        adapted with :meth:`PermissionSource.of`.

    Returns
    -------
    T
        Whatever ``block`` returns.

    Raises
    ------
    UnpermittedOperationError
        If ``target`` is a single permissible and is denied.
    UnpermittedOperationsError
        If ``target`` is a permissible set and is denied.
    """
    resolved = PermissionSource.of(source)
    if not _is_permitted(target, resolved):
        raise _denial(target, resolved)
    return block()


def try_secure(
    target: Permissible | PermissibleSet,
    block: Callable[[], T],
    source: PermissionSource | Permission | Role | User,
) -> SecureResult[T]:
    """Like :func:`secure` but report a denial as a :class:`SecureResult`.

    Only the authorization failure is captured; exceptions raised by
    ``block`` itself propagate unchanged.
    """
    resolved = PermissionSource.of(source)
    if not _is_permitted(target, resolved):
        return SecureResult(error=_denial(target, resolved))
    return SecureResult(value=block())


def guarded(target: Permissible | PermissibleSet) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator that secures every call of a function behind ``target``.

    The decorated function must be called with a keyword-only ``source``
    argument. If the wrapped function itself declares a ``source``
    parameter, the source is passed through so nested calls can secure
    their own targets.

    Example
    -------
    ::

        @guarded(ResourceOperation(reports, READ))
        def load_report(report_id: str) -> Report:
            ...

        load_report("q3", source=PermissionSource.from_user(alice))
    """

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        forwards_source = "source" in inspect.signature(fn).parameters

        @functools.wraps(fn)
        def wrapper(*args: Any, source: Any, **kwargs: Any) -> T:
            if forwards_source:
                kwargs["source"] = source
            return secure(target, lambda: fn(*args, **kwargs), source)

        return wrapper

    return decorator
