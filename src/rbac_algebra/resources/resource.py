"""Hierarchical resources and permissions over them.

Resources form a tree rooted at :data:`ALL_RESOURCES`. A resource is
ordered below each of its ancestors, so a permission on a parent
resource covers its whole subtree.

Example
-------
::

    docs = ResourceNode("docs")
    report = docs.child("report")
    assert report < docs < ALL_RESOURCES
    assert ResourceNode.from_path("/docs/report") == report
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from rbac_algebra.exceptions import ResourceHierarchyError
from rbac_algebra.ordering import Comparison, PartiallyOrdered, compare_componentwise
from rbac_algebra.permissions.permissible import Operation, Permissible
from rbac_algebra.permissions.permission import Permission, SimplePermission


class PermissibleResource(Permissible, PartiallyOrdered, ABC):
    """Base for every resource, including the root."""

    @abstractmethod
    def child_of(self, resource: PermissibleResource) -> bool:
        """Return True if ``resource`` is ``self`` or one of its ancestors."""

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if not isinstance(other, PermissibleResource):
            return None
        below = self.child_of(other)
        above = other.child_of(self)
        if below and above:
            return 0
        if below:
            return -1
        if above:
            return 1
        return None


class AllResources(PermissibleResource):
    """The root of every resource hierarchy.

    There is exactly one instance, :data:`ALL_RESOURCES`.
    """

    _instance: ClassVar[AllResources | None] = None

    def __new__(cls) -> AllResources:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def child_of(self, resource: PermissibleResource) -> bool:
        return resource is self

    def try_compare_to(self, other: object) -> Comparison:
        if other is self:
            return 0
        if isinstance(other, PermissibleResource):
            return 1
        return None

    def __repr__(self) -> str:
        return "AllResources"


ALL_RESOURCES = AllResources()


class Resource(PermissibleResource):
    """A resource with a parent; subclass it for domain resources.

    Parameters
    ----------
    parent:
        The enclosing resource. Defaults to :data:`ALL_RESOURCES`.

    Raises
    ------
    ResourceHierarchyError
        If ``parent`` is the resource itself.
    """

    def __init__(self, parent: PermissibleResource = ALL_RESOURCES) -> None:
        if parent is self:
            raise ResourceHierarchyError(f"Resource {self!r} cannot be its own parent")
        self._parent = parent

    @property
    def parent(self) -> PermissibleResource:
        """The enclosing resource, fixed at construction."""
        return self._parent

    def child_of(self, resource: PermissibleResource) -> bool:
        node: PermissibleResource = self
        visited: set[int] = set()
        while isinstance(node, Resource):
            if node == resource:
                return True
            if id(node) in visited:
                raise ResourceHierarchyError(f"Cycle in parent chain of {self!r}")
            visited.add(id(node))
            node = node.parent
        return node.child_of(resource)


class ResourceNode(Resource):
    """A named resource addressed by a slash-separated path.

    Two nodes are equal when they have the same name and equal parents, so
    nodes rebuilt from the same path compare equal.
    """

    def __init__(self, name: str, parent: PermissibleResource = ALL_RESOURCES) -> None:
        if not name or "/" in name:
            raise ResourceHierarchyError(f"Invalid resource name: {name!r}")
        self.name = name
        super().__init__(parent)

    @property
    def path(self) -> str:
        names: list[str] = []
        node: PermissibleResource = self
        while isinstance(node, ResourceNode):
            names.append(node.name)
            node = node.parent
        return "/" + "/".join(reversed(names))

    def child(self, name: str) -> ResourceNode:
        """Return the child node called ``name``."""
        return ResourceNode(name, parent=self)

    @classmethod
    def from_path(cls, path: str) -> PermissibleResource:
        """Build the node chain for ``path``; ``"/"`` is :data:`ALL_RESOURCES`.

        Raises
        ------
        ResourceHierarchyError
            If ``path`` is not absolute or contains an empty segment.
        """
        if not path.startswith("/"):
            raise ResourceHierarchyError(f"Resource path must start with '/': {path!r}")
        node: PermissibleResource = ALL_RESOURCES
        stripped = path.strip("/")
        if not stripped:
            return node
        for name in stripped.split("/"):
            node = cls(name, parent=node)
        return node

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceNode):
            return NotImplemented
        return self.name == other.name and self.parent == other.parent

    def __hash__(self) -> int:
        return hash((self.name, self.path))

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"ResourceNode({self.path!r})"


# ---------------------------------------------------------------------------
# Operations on resources
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceOperation(Permissible):
    """Request to perform ``operation`` on ``resource``."""

    resource: PermissibleResource
    operation: Operation

    def __str__(self) -> str:
        return f"{self.operation} on {self.resource}"


@dataclass(frozen=True)
class ResourceOperationPermission(SimplePermission):
    """Permits ``operation`` on ``resource`` and any of its descendants.

    Parameters
    ----------
    resource:
        Root of the covered subtree.
    operation_permission:
        Which operations are allowed within the subtree.
    """

    resource: PermissibleResource
    operation_permission: Permission

    def permits(self, permissible: Permissible) -> bool:
        if not isinstance(permissible, ResourceOperation):
            return False
        return permissible.resource <= self.resource and self.operation_permission.permits(
            permissible.operation
        )

    def try_compare_to(self, other: object) -> Comparison:
        if self == other:
            return 0
        if isinstance(other, ResourceOperationPermission):
            return compare_componentwise(
                self.resource.try_compare_to(other.resource),
                self.operation_permission.try_compare_to(other.operation_permission),
            )
        return SimplePermission.try_compare_to(self, other)

    def __str__(self) -> str:
        return f"ResourceOperationPermission({self.resource}, {self.operation_permission})"
