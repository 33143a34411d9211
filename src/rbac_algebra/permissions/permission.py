"""The permission lattice.

A :class:`Permission` is a predicate over permissibles that also forms a
lattice: permissions can be unioned (``|``), differenced (``-``) and
partially ordered (``<``, ``<=``, ``>``, ``>=``), where ``a <= b`` means
``b`` permits at least everything ``a`` permits.

Variants
--------
- :data:`ALL_PERMISSIONS` and :data:`NO_PERMISSIONS`: top and bottom.
- :class:`SimplePermission`: open base for domain permissions.
- :class:`SinglePermission`: permits exactly one permissible.
- :class:`TypePermission`: permits every instance of a permissible type.
- :class:`PermissionSet`: union of two or more non-set permissions.
- :class:`PermissionDifference`: ``base`` minus ``excluded``.

Build unions with :meth:`Permission.of` rather than constructing a
:class:`PermissionSet` directly; ``of`` flattens nested sets and collapses
trivial cases.

Example
-------
::

    from rbac_algebra.permissions.permission import Permission
    from rbac_algebra.permissions.permissible import NamedOperation

    read = NamedOperation("read")
    write = NamedOperation("write")
    editor = Permission.to(read, write)
    viewer = read.permission
    assert viewer < editor
    assert (editor - viewer).permits(write)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from rbac_algebra.exceptions import PermissionConstructionError
from rbac_algebra.ordering import Comparison, PartiallyOrdered, at_least, at_most, negate
from rbac_algebra.permissions.permissible import (
    AllOf,
    AnyOf,
    Permissible,
    PermissibleSet,
)

if TYPE_CHECKING:
    from rbac_algebra.roles.role import Role


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class Permission(PartiallyOrdered, ABC):
    """Base class for all permissions."""

    @abstractmethod
    def permits(self, permissible: Permissible) -> bool:
        """Return True if this permission allows ``permissible``."""

    def permits_set(self, permissibles: PermissibleSet) -> bool:
        """Evaluate an ``AllOf``/``AnyOf`` recursively against :meth:`permits`."""
        return permissibles.is_satisfied_by(self.permits)

    @abstractmethod
    def union(self, other: Permission) -> Permission:
        """Return a permission permitting what either operand permits."""

    @abstractmethod
    def diff(self, other: Permission) -> Permission:
        """Return a permission permitting what ``self`` permits and ``other`` does not."""

    def __or__(self, other: object) -> Permission:
        if not isinstance(other, Permission):
            return NotImplemented
        return self.union(other)

    def __sub__(self, other: object) -> Permission:
        if not isinstance(other, Permission):
            return NotImplemented
        return self.diff(other)

    def try_compare_to(self, other: object) -> Comparison:
        return compare_by_difference(self, other)

    def to_role(self) -> Role:
        """Wrap this permission in a ``PermissionsRole``."""
        from rbac_algebra.roles.role import PermissionsRole

        return PermissionsRole(self)

    def _standard_union(self, other: Permission) -> Permission | None:
        # Shortcuts every variant takes before its own union logic.
        if other == self:
            return self
        if other is ALL_PERMISSIONS:
            return ALL_PERMISSIONS
        if other is NO_PERMISSIONS:
            return self
        return None

    def _standard_diff(self, other: Permission) -> Permission | None:
        if other == self:
            return NO_PERMISSIONS
        if other is ALL_PERMISSIONS:
            return NO_PERMISSIONS
        if other is NO_PERMISSIONS:
            return self
        return None

    # -- factories ----------------------------------------------------------

    @staticmethod
    def of(*permissions: Permission | Iterable[Permission]) -> Permission:
        """Union any number of permissions into the simplest equivalent form.

        Accepts either varargs or a single iterable. Nested sets are
        flattened, ``NO_PERMISSIONS`` members are dropped, the presence of
        ``ALL_PERMISSIONS`` collapses the result to ``ALL_PERMISSIONS``,
        an empty input yields ``NO_PERMISSIONS`` and a single survivor is
        returned unwrapped.

        Parameters
        ----------
        permissions:
            Permissions to union.

        Returns
        -------
        Permission
            ``ALL_PERMISSIONS``, ``NO_PERMISSIONS``, a single permission,
            or a :class:`PermissionSet` of two or more members.
        """
        members = _unpack(permissions, Permission)
        if any(member is ALL_PERMISSIONS for member in members):
            return ALL_PERMISSIONS
        flat = _flatten(members)
        if not flat:
            return NO_PERMISSIONS
        if len(flat) == 1:
            return next(iter(flat))
        return PermissionSet(flat)

    @staticmethod
    def to(*permissibles: Permissible | AnyOf | Iterable[Permissible]) -> Permission:
        """Union of :class:`SinglePermission` over each permissible.

        An :class:`AnyOf` argument contributes one single permission per
        member, since permitting any of them is the same as a union.

        Raises
        ------
        ValueError
            If an :class:`AllOf` is passed; a conjunction has no
            permission equivalent.
        """
        singles: list[Permission] = []
        for permissible in _unpack(permissibles, (Permissible, PermissibleSet)):
            singles.extend(_singles_for(permissible))
        return Permission.of(singles)


def _unpack(args: tuple, item_type: type | tuple[type, ...]) -> list:
    if len(args) == 1 and not isinstance(args[0], item_type) and isinstance(args[0], Iterable):
        return list(args[0])
    return list(args)


def _singles_for(permissible: Permissible | PermissibleSet) -> list[Permission]:
    if isinstance(permissible, AllOf):
        raise ValueError(
            f"Cannot build a permission from a conjunction: {permissible}. "
            "Use an AnyOf or individual permissibles."
        )
    if isinstance(permissible, AnyOf):
        singles: list[Permission] = []
        for member in permissible.members:
            singles.extend(_singles_for(member))
        return singles
    return [SinglePermission(permissible)]


def _flatten(permissions: Iterable[Permission]) -> frozenset[Permission]:
    flat: set[Permission] = set()
    for permission in permissions:
        if isinstance(permission, PermissionSet):
            flat.update(permission.members)
        else:
            flat.add(permission)
    flat.discard(NO_PERMISSIONS)
    return frozenset(flat)


def compare_by_difference(left: Permission, right: object) -> Comparison:
    """Order two permissions by inspecting ``left - right`` and ``right - left``.

    This is the fallback every variant uses when it has no structural rule
    for ``right``:

    - ``left - right == left`` means nothing was removed, so ``left`` is Greater;
    - ``left - right`` is ``NO_PERMISSIONS`` means ``left`` is Less;
    - a :class:`PermissionDifference` result is resolved by the reverse
      difference, and stays incomparable if that is also a difference.
    """
    if left == right:
        return 0
    if not isinstance(right, Permission):
        return None
    remainder = left.diff(right)
    if remainder == left:
        return 1
    if remainder is NO_PERMISSIONS:
        return -1
    if isinstance(remainder, PermissionDifference):
        reverse = right.diff(left)
        if reverse == right:
            return -1
        if reverse is NO_PERMISSIONS:
            return 1
        return None
    return 1


# ---------------------------------------------------------------------------
# Top and bottom
# ---------------------------------------------------------------------------


class AllPermissions(Permission):
    """Top of the lattice: permits every permissible.

    There is exactly one instance, :data:`ALL_PERMISSIONS`.
    """

    _instance: ClassVar[AllPermissions | None] = None

    def __new__(cls) -> AllPermissions:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def permits(self, permissible: Permissible) -> bool:
        return True

    def union(self, other: Permission) -> Permission:
        return self

    def diff(self, other: Permission) -> Permission:
        if other is self:
            return NO_PERMISSIONS
        if other is NO_PERMISSIONS:
            return self
        return PermissionDifference(self, other)

    def try_compare_to(self, other: object) -> Comparison:
        if other is self:
            return 0
        if isinstance(other, Permission):
            return 1
        return None

    def __repr__(self) -> str:
        return "AllPermissions"


class NoPermissions(Permission):
    """Bottom of the lattice: permits nothing.

    There is exactly one instance, :data:`NO_PERMISSIONS`.
    """

    _instance: ClassVar[NoPermissions | None] = None

    def __new__(cls) -> NoPermissions:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def permits(self, permissible: Permissible) -> bool:
        return False

    def union(self, other: Permission) -> Permission:
        return other

    def diff(self, other: Permission) -> Permission:
        return self

    def try_compare_to(self, other: object) -> Comparison:
        if other is self:
            return 0
        # A difference may be empty in disguise, so it is not ordered here.
        if isinstance(other, PermissionDifference):
            return None
        if isinstance(other, Permission):
            return -1
        return None

    def __repr__(self) -> str:
        return "NoPermissions"


ALL_PERMISSIONS = AllPermissions()
NO_PERMISSIONS = NoPermissions()


# ---------------------------------------------------------------------------
# Simple permissions
# ---------------------------------------------------------------------------


class SimplePermission(Permission):
    """Base class for domain permissions.

    Subclasses implement :meth:`permits` and get lattice behaviour for free:
    unions with other simple permissions become a :class:`PermissionSet`,
    differences become a :class:`PermissionDifference`. Two distinct simple
    permissions are incomparable unless a subclass says otherwise.
    """

    def union(self, other: Permission) -> Permission:
        standard = self._standard_union(other)
        if standard is not None:
            return standard
        if isinstance(other, SimplePermission):
            return Permission.of(self, other)
        return other.union(self)

    def diff(self, other: Permission) -> Permission:
        standard = self._standard_diff(other)
        if standard is not None:
            return standard
        if isinstance(other, PermissionSet) and self in other.members:
            return NO_PERMISSIONS
        return PermissionDifference(self, other)

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if not isinstance(other, Permission) or isinstance(other, SimplePermission):
            return None
        return negate(other.try_compare_to(self))


@dataclass(frozen=True)
class SinglePermission(SimplePermission):
    """Permits exactly one permissible, by equality."""

    permissible: Permissible

    def permits(self, permissible: Permissible) -> bool:
        return self.permissible == permissible

    def try_compare_to(self, other: object) -> Comparison:
        if isinstance(other, TypePermission):
            return negate(other.try_compare_to(self))
        return SimplePermission.try_compare_to(self, other)

    def __str__(self) -> str:
        return f"SinglePermission({self.permissible})"


@dataclass(frozen=True)
class TypePermission(SimplePermission):
    """Permits every permissible that is an instance of ``permissible_type``.

    Type permissions are ordered by the subclass relation, and a type
    permission dominates a :class:`SinglePermission` for one of its
    instances.
    """

    permissible_type: type

    def permits(self, permissible: Permissible) -> bool:
        return isinstance(permissible, self.permissible_type)

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if isinstance(other, TypePermission):
            if issubclass(self.permissible_type, other.permissible_type):
                return -1
            if issubclass(other.permissible_type, self.permissible_type):
                return 1
            return None
        if isinstance(other, SinglePermission):
            return 1 if self.permits(other.permissible) else None
        return SimplePermission.try_compare_to(self, other)

    def __str__(self) -> str:
        return f"TypePermission({self.permissible_type.__name__})"


# ---------------------------------------------------------------------------
# Composite permissions
# ---------------------------------------------------------------------------


class PermissionSet(Permission):
    """Union of two or more permissions, none of them a set or a lattice bound.

    Use :meth:`Permission.of` to build one.

    Raises
    ------
    PermissionConstructionError
        If, after flattening, fewer than two members remain or one of them
        is ``ALL_PERMISSIONS``.
    """

    def __init__(self, members: Iterable[Permission]) -> None:
        flat = _flatten(members)
        if ALL_PERMISSIONS in flat:
            raise PermissionConstructionError(
                "A PermissionSet cannot contain ALL_PERMISSIONS; use Permission.of."
            )
        if len(flat) < 2:
            raise PermissionConstructionError(
                f"A PermissionSet needs at least two members, got {len(flat)}; "
                "use Permission.of."
            )
        self._members = flat

    @property
    def members(self) -> frozenset[Permission]:
        return self._members

    def permits(self, permissible: Permissible) -> bool:
        return any(member.permits(permissible) for member in self._members)

    def union(self, other: Permission) -> Permission:
        standard = self._standard_union(other)
        if standard is not None:
            return standard
        if isinstance(other, PermissionSet):
            return Permission.of(self._members | other.members)
        if isinstance(other, PermissionDifference):
            return other.union(self)
        return Permission.of(self._members | {other})

    def diff(self, other: Permission) -> Permission:
        standard = self._standard_diff(other)
        if standard is not None:
            return standard
        if isinstance(other, PermissionSet):
            shared = self._members & other.members
            if shared == self._members:
                return NO_PERMISSIONS
            return PermissionDifference(Permission.of(self._members - shared), other)
        if other in self._members:
            return PermissionDifference(Permission.of(self._members - {other}), other)
        return PermissionDifference(self, other)

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if not isinstance(other, Permission):
            return None
        if isinstance(other, PermissionSet):
            if self._members <= other.members:
                return -1
            if other.members <= self._members:
                return 1
            return compare_by_difference(self, other)
        if isinstance(other, PermissionDifference):
            if self > other.base:
                return 1
            return compare_by_difference(self, other)
        if any(at_least(member.try_compare_to(other)) for member in self._members):
            return 1
        if all(at_most(member.try_compare_to(other)) for member in self._members):
            return -1
        return compare_by_difference(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionSet):
            return NotImplemented
        return self._members == other.members

    def __hash__(self) -> int:
        return hash(self._members)

    def __str__(self) -> str:
        return "(" + " | ".join(sorted(str(member) for member in self._members)) + ")"

    def __repr__(self) -> str:
        return f"PermissionSet({sorted(repr(member) for member in self._members)})"


@dataclass(frozen=True)
class PermissionDifference(Permission):
    """Permits what ``base`` permits unless ``excluded`` also permits it."""

    base: Permission
    excluded: Permission

    def permits(self, permissible: Permissible) -> bool:
        return self.base.permits(permissible) and not self.excluded.permits(permissible)

    def union(self, other: Permission) -> Permission:
        standard = self._standard_union(other)
        if standard is not None:
            return standard
        if self.excluded == other:
            return self.base.union(other)
        if self.base == other:
            return self
        remainder = self.excluded.diff(other)
        if remainder is NO_PERMISSIONS:
            return other.union(self.base)
        return Permission.of(self, other)

    def diff(self, other: Permission) -> Permission:
        standard = self._standard_diff(other)
        if standard is not None:
            return standard
        if self.base == other:
            return NO_PERMISSIONS
        if self.excluded == other:
            return self
        remainder = self.base.diff(other)
        if isinstance(remainder, PermissionDifference):
            return PermissionDifference(self.base, self.excluded.union(other))
        if remainder is NO_PERMISSIONS:
            return NO_PERMISSIONS
        return PermissionDifference(remainder, self.excluded)

    def try_compare_to(self, other: object) -> Comparison:
        if other is NO_PERMISSIONS:
            return None
        return compare_by_difference(self, other)

    def __str__(self) -> str:
        return f"({self.base} - {self.excluded})"
