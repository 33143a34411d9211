"""Tests for the resource hierarchy and ResourceOperationPermission."""
from __future__ import annotations

import pytest

from rbac_algebra.exceptions import ResourceHierarchyError
from rbac_algebra.permissions.permissible import NamedOperation
from rbac_algebra.permissions.permission import Permission, SinglePermission
from rbac_algebra.resources.resource import (
    ALL_RESOURCES,
    AllResources,
    Resource,
    ResourceNode,
    ResourceOperation,
    ResourceOperationPermission,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

top = ResourceNode("top")
sub1 = top.child("sub1")
sub2 = top.child("sub2")
sub1_sub1 = sub1.child("a")
sub1_sub2 = sub1.child("b")
sub2_sub1 = sub2.child("a")
sub2_sub2 = sub2.child("b")
sub2_sub2_sub1 = sub2_sub2.child("deep")

READ = NamedOperation("read")
WRITE = NamedOperation("write")


def _incomparable(left: object, right: object) -> bool:
    return not (left < right or left <= right or left > right or left >= right or left == right)  # type: ignore[operator]


class _RelinkedResource(Resource):
    """Resolves its parent late, so two instances can point at each other."""

    def __init__(self) -> None:
        super().__init__()
        self.link: Resource | None = None

    @property
    def parent(self) -> Resource | AllResources:
        return self.link if self.link is not None else ALL_RESOURCES


# ---------------------------------------------------------------------------
# child_of
# ---------------------------------------------------------------------------


class TestChildOf:
    def test_all_resources_is_child_of_itself(self) -> None:
        assert ALL_RESOURCES.child_of(ALL_RESOURCES)
        assert AllResources() is ALL_RESOURCES

    def test_all_resources_is_child_of_nothing_else(self) -> None:
        for resource in (sub1_sub2, sub1, sub2_sub2_sub1):
            assert not ALL_RESOURCES.child_of(resource)

    def test_everything_is_child_of_all_resources(self) -> None:
        for resource in (sub1_sub2, sub1, sub2_sub2_sub1):
            assert resource.child_of(ALL_RESOURCES)

    def test_child_of_parent(self) -> None:
        assert sub1_sub2.child_of(sub1)
        assert sub2_sub1.child_of(sub2)

    def test_parent_is_not_child_of_child(self) -> None:
        assert not sub1.child_of(sub1_sub2)
        assert not sub2.child_of(sub2_sub1)

    def test_relatives_that_are_not_ancestors(self) -> None:
        assert not sub1.child_of(sub2)
        assert not sub2_sub1.child_of(sub1_sub2)
        assert not sub1.child_of(sub2_sub1)

    def test_grandchild_of_grandparent(self) -> None:
        assert sub2_sub2_sub1.child_of(sub2)
        assert sub2_sub2_sub1.child_of(top)

    def test_resource_is_child_of_itself(self) -> None:
        assert sub1.child_of(sub1)

    def test_cycle_in_parent_chain_is_detected(self) -> None:
        first = _RelinkedResource()
        second = _RelinkedResource()
        first.link = second
        second.link = first
        with pytest.raises(ResourceHierarchyError, match="Cycle"):
            second.child_of(ALL_RESOURCES)

    def test_parent_cannot_be_reassigned(self) -> None:
        child = top.child("fixed")
        with pytest.raises(AttributeError):
            child.parent = sub1  # type: ignore[misc]
        assert child.parent == top
        assert child.child_of(top)
        assert not child.child_of(sub1)

    def test_reassignment_leaves_equality_and_hash_intact(self) -> None:
        child = top.child("fixed")
        lookup = {child: "granted"}
        with pytest.raises(AttributeError):
            child.parent = ALL_RESOURCES  # type: ignore[misc]
        assert lookup[ResourceNode.from_path("/top/fixed")] == "granted"


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestResourceOrdering:
    def test_all_resources_against_itself(self) -> None:
        assert ALL_RESOURCES <= ALL_RESOURCES
        assert ALL_RESOURCES >= ALL_RESOURCES
        assert not ALL_RESOURCES > ALL_RESOURCES
        assert not ALL_RESOURCES < ALL_RESOURCES

    @pytest.mark.parametrize("resource", [top, sub2_sub2_sub1])
    def test_all_resources_above_everything(self, resource: ResourceNode) -> None:
        assert ALL_RESOURCES > resource
        assert resource < ALL_RESOURCES
        assert ALL_RESOURCES != resource
        assert not ALL_RESOURCES <= resource
        assert not resource >= ALL_RESOURCES

    def test_parent_above_child(self) -> None:
        assert top > sub1
        assert sub1 < top
        assert not top <= sub1
        assert not sub1 >= top

    def test_grandparent_above_grandchild(self) -> None:
        assert sub2 > sub2_sub2_sub1
        assert sub2_sub2_sub1 < sub2
        assert sub2 != sub2_sub2_sub1

    def test_siblings_and_cousins_are_incomparable(self) -> None:
        assert _incomparable(sub1, sub2)
        assert _incomparable(sub1_sub1, sub2_sub1)

    def test_uncles_and_removed_cousins_are_incomparable(self) -> None:
        assert _incomparable(sub1, sub2_sub1)
        assert _incomparable(sub1_sub1, sub2_sub2_sub1)

    def test_comparable_with_ancestors_only(self) -> None:
        assert sub1.comparable_with(sub1_sub2)
        assert sub2_sub2_sub1.comparable_with(top)
        assert ALL_RESOURCES.comparable_with(sub2_sub1)
        assert not sub1.comparable_with(sub2)
        assert not sub1_sub1.comparable_with(sub2_sub2_sub1)
        assert not top.comparable_with(READ)

    def test_sibling_of_chain_scenario(self) -> None:
        a = ResourceNode("a")
        b = a.child("b")
        c = b.child("c")
        d = a.child("d")
        assert c.child_of(a)
        assert not a.child_of(c)
        assert d.try_compare_to(b) is None


# ---------------------------------------------------------------------------
# ResourceNode
# ---------------------------------------------------------------------------


class TestResourceNode:
    def test_path(self) -> None:
        assert sub2_sub2_sub1.path == "/top/sub2/b/deep"
        assert str(sub1) == "/top/sub1"

    def test_from_path_builds_equal_node(self) -> None:
        assert ResourceNode.from_path("/top/sub2/b/deep") == sub2_sub2_sub1
        assert hash(ResourceNode.from_path("/top/sub1")) == hash(sub1)

    def test_root_path_is_all_resources(self) -> None:
        assert ResourceNode.from_path("/") is ALL_RESOURCES

    def test_same_name_under_different_parents_differ(self) -> None:
        assert sub1_sub1 != sub2_sub1

    def test_relative_path_rejected(self) -> None:
        with pytest.raises(ResourceHierarchyError):
            ResourceNode.from_path("top/sub1")

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(ResourceHierarchyError):
            ResourceNode("a/b")
        with pytest.raises(ResourceHierarchyError):
            ResourceNode("")

    def test_hierarchy_error_is_value_error(self) -> None:
        assert issubclass(ResourceHierarchyError, ValueError)


# ---------------------------------------------------------------------------
# ResourceOperationPermission
# ---------------------------------------------------------------------------


class TestResourceOperationPermission:
    def test_permits_operation_in_subtree(self) -> None:
        permission = ResourceOperationPermission(sub2, Permission.to(READ))
        assert permission.permits(ResourceOperation(sub2, READ))
        assert permission.permits(ResourceOperation(sub2_sub2_sub1, READ))

    def test_rejects_operation_outside_subtree_or_not_allowed(self) -> None:
        permission = ResourceOperationPermission(sub2, Permission.to(READ))
        assert not permission.permits(ResourceOperation(sub1, READ))
        assert not permission.permits(ResourceOperation(top, READ))
        assert not permission.permits(ResourceOperation(sub2, WRITE))
        assert not permission.permits(READ)

    def test_ancestor_resource_with_same_operations_is_greater(self) -> None:
        same_ops = SinglePermission(READ)
        assert ResourceOperationPermission(top, same_ops) >= ResourceOperationPermission(
            sub1, same_ops
        )
        assert ResourceOperationPermission(top, same_ops) > ResourceOperationPermission(
            sub1, same_ops
        )

    def test_more_operations_on_same_resource_is_greater(self) -> None:
        assert ResourceOperationPermission(top, Permission.to(READ, WRITE)) > (
            ResourceOperationPermission(top, Permission.to(READ))
        )

    def test_conflicting_dimensions_are_incomparable(self) -> None:
        wide_resource = ResourceOperationPermission(top, Permission.to(READ))
        wide_operations = ResourceOperationPermission(sub1, Permission.to(READ, WRITE))
        assert wide_resource.try_compare_to(wide_operations) is None
        assert wide_operations.try_compare_to(wide_resource) is None

    def test_resource_operation_string(self) -> None:
        assert str(ResourceOperation(sub1, READ)) == "read on /top/sub1"
