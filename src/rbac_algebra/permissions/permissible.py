"""Permissibles and boolean sets of them.

A :class:`Permissible` is anything a policy can permit: an operation, a
resource, an operation on a resource, a management request. Permissibles
carry no behaviour of their own beyond combination and the ``secure``
entry points; whether one is allowed is decided by a
:class:`~rbac_algebra.permissions.permission.Permission`.

Combining permissibles with ``&`` and ``|`` builds :class:`AllOf` and
:class:`AnyOf` sets, which a permission evaluates recursively.

Example
-------
::

    from rbac_algebra.permissions.permissible import NamedOperation

    read = NamedOperation("read")
    write = NamedOperation("write")
    either = read | write          # AnyOf({read, write})
    both = read & write            # AllOf({read, write})
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, TypeVar

if TYPE_CHECKING:
    from rbac_algebra.evaluation.source import PermissionSource, SecureResult
    from rbac_algebra.permissions.permission import Permission

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Permissible
# ---------------------------------------------------------------------------


class Permissible:
    """Marker base for anything that can be permitted.

    Subclasses are usually frozen dataclasses or enums so that equality and
    hashing are structural. Permissibles are stored in frozensets, so they
    must be hashable.
    """

    def and_(self, other: Permissible | PermissibleSet) -> PermissibleSet:
        """Return an :class:`AllOf` over ``self`` and ``other``."""
        return AllOf.combine(self, other)

    def or_(self, other: Permissible | PermissibleSet) -> PermissibleSet:
        """Return an :class:`AnyOf` over ``self`` and ``other``."""
        return AnyOf.combine(self, other)

    def __and__(self, other: object) -> PermissibleSet:
        if not isinstance(other, (Permissible, PermissibleSet)):
            return NotImplemented
        return self.and_(other)

    def __or__(self, other: object) -> PermissibleSet:
        if not isinstance(other, (Permissible, PermissibleSet)):
            return NotImplemented
        return self.or_(other)

    @property
    def permission(self) -> Permission:
        """The permission that permits exactly this permissible."""
        from rbac_algebra.permissions.permission import SinglePermission

        return SinglePermission(self)

    def secure(self, block: Callable[[], T], source: object) -> T:
        """Run ``block`` if ``source`` permits this permissible.

        See :func:`rbac_algebra.evaluation.source.secure`.
        """
        from rbac_algebra.evaluation.source import secure

        return secure(self, block, source)

    def try_secure(self, block: Callable[[], T], source: object) -> SecureResult[T]:
        """Like :meth:`secure` but return a ``SecureResult`` instead of raising.

        See :func:`rbac_algebra.evaluation.source.try_secure`.
        """
        from rbac_algebra.evaluation.source import try_secure

        return try_secure(self, block, source)


class Operation(Permissible):
    """A permissible representing an action, e.g. ``read`` or ``delete``."""


@dataclass(frozen=True)
class NamedOperation(Operation):
    """An operation identified only by its name.

    Used by the role catalog loader, where operations are declared in YAML.
    """

    name: str

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Permissible sets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PermissibleSet(ABC):
    """A boolean combination of permissibles.

    Members may themselves be permissible sets. Two sets are equal when
    they have the same combinator and the same members.
    """

    members: frozenset[Permissible | PermissibleSet]

    combinator: ClassVar[str]
    symbol: ClassVar[str]

    @abstractmethod
    def is_satisfied_by(self, predicate: Callable[[Permissible], bool]) -> bool:
        """Evaluate the set against ``predicate``, recursing into nested sets."""

    @classmethod
    def combine(
        cls,
        left: Permissible | PermissibleSet,
        right: Permissible | PermissibleSet,
    ) -> PermissibleSet:
        """Merge two operands into one set of this combinator.

        An operand already of this combinator contributes its members; any
        other operand (including a set of the other combinator) is added as
        a single member.
        """
        members: set[Permissible | PermissibleSet] = set()
        for operand in (left, right):
            if isinstance(operand, cls):
                members.update(operand.members)
            else:
                members.add(operand)
        return cls(frozenset(members))

    def and_(self, other: Permissible | PermissibleSet) -> PermissibleSet:
        return AllOf.combine(self, other)

    def or_(self, other: Permissible | PermissibleSet) -> PermissibleSet:
        return AnyOf.combine(self, other)

    def __and__(self, other: object) -> PermissibleSet:
        if not isinstance(other, (Permissible, PermissibleSet)):
            return NotImplemented
        return self.and_(other)

    def __or__(self, other: object) -> PermissibleSet:
        if not isinstance(other, (Permissible, PermissibleSet)):
            return NotImplemented
        return self.or_(other)

    def __str__(self) -> str:
        joiner = f" {self.symbol} "
        return "(" + joiner.join(sorted(str(member) for member in self.members)) + ")"

    def secure(self, block: Callable[[], T], source: object) -> T:
        """Run ``block`` if ``source`` permits this set."""
        from rbac_algebra.evaluation.source import secure

        return secure(self, block, source)

    def try_secure(self, block: Callable[[], T], source: object) -> SecureResult[T]:
        """Like :meth:`secure` but return a ``SecureResult`` instead of raising."""
        from rbac_algebra.evaluation.source import try_secure

        return try_secure(self, block, source)


def _satisfies(
    member: Permissible | PermissibleSet,
    predicate: Callable[[Permissible], bool],
) -> bool:
    if isinstance(member, PermissibleSet):
        return member.is_satisfied_by(predicate)
    return predicate(member)


@dataclass(frozen=True)
class AllOf(PermissibleSet):
    """Satisfied when every member is satisfied."""

    combinator: ClassVar[str] = "all"
    symbol: ClassVar[str] = "&"

    def is_satisfied_by(self, predicate: Callable[[Permissible], bool]) -> bool:
        return all(_satisfies(member, predicate) for member in self.members)


@dataclass(frozen=True)
class AnyOf(PermissibleSet):
    """Satisfied when at least one member is satisfied."""

    combinator: ClassVar[str] = "any"
    symbol: ClassVar[str] = "|"

    def is_satisfied_by(self, predicate: Callable[[Permissible], bool]) -> bool:
        return any(_satisfies(member, predicate) for member in self.members)


def all_of(*permissibles: Permissible | PermissibleSet) -> AllOf:
    """Build an :class:`AllOf` from explicit members."""
    return AllOf(frozenset(permissibles))


def any_of(*permissibles: Permissible | PermissibleSet) -> AnyOf:
    """Build an :class:`AnyOf` from explicit members."""
    return AnyOf(frozenset(permissibles))
