"""Tests for AllOf / AnyOf permissible sets."""
from __future__ import annotations

import rbac_algebra
from rbac_algebra.permissions.permissible import (
    AllOf,
    AnyOf,
    NamedOperation,
    all_of,
    any_of,
)
from rbac_algebra.permissions.permission import Permission, SinglePermission

READ = NamedOperation("read")
WRITE = NamedOperation("write")
DELETE = NamedOperation("delete")


class TestCombination:
    def test_and_builds_all_of(self) -> None:
        result = READ & WRITE
        assert isinstance(result, AllOf)
        assert result.members == frozenset({READ, WRITE})

    def test_or_builds_any_of(self) -> None:
        result = READ | WRITE
        assert isinstance(result, AnyOf)
        assert result.members == frozenset({READ, WRITE})

    def test_same_combinator_flattens(self) -> None:
        assert (READ & WRITE) & DELETE == all_of(READ, WRITE, DELETE)
        assert READ | (WRITE | DELETE) == any_of(READ, WRITE, DELETE)

    def test_mixed_combinators_nest(self) -> None:
        result = (READ | WRITE) & DELETE
        assert isinstance(result, AllOf)
        assert result.members == frozenset({any_of(READ, WRITE), DELETE})

    def test_method_aliases(self) -> None:
        assert READ.and_(WRITE) == READ & WRITE
        assert READ.or_(WRITE) == READ | WRITE

    def test_all_of_and_any_of_differ(self) -> None:
        assert all_of(READ, WRITE) != any_of(READ, WRITE)

    def test_string_form(self) -> None:
        assert str(READ & WRITE) == "(read & write)"
        assert str(READ | WRITE) == "(read | write)"


class TestEvaluation:
    def test_all_of_requires_every_member(self) -> None:
        reader = SinglePermission(READ)
        assert not reader.permits_set(READ & WRITE)
        assert Permission.to(READ, WRITE).permits_set(READ & WRITE)

    def test_any_of_requires_one_member(self) -> None:
        reader = SinglePermission(READ)
        assert reader.permits_set(READ | WRITE)
        assert not reader.permits_set(WRITE | DELETE)

    def test_nested_sets_evaluate_recursively(self) -> None:
        permission = Permission.to(READ, DELETE)
        assert permission.permits_set((READ | WRITE) & DELETE)
        assert not permission.permits_set((WRITE | WRITE) & DELETE)

    def test_empty_sets(self) -> None:
        permission = Permission.to(READ)
        assert permission.permits_set(all_of())
        assert not permission.permits_set(any_of())


class TestFactories:
    def test_all_of_matches_operator_form(self) -> None:
        built = all_of(READ, WRITE, DELETE)
        assert isinstance(built, AllOf)
        assert built == READ & WRITE & DELETE
        assert built.combinator == "all"

    def test_any_of_matches_operator_form(self) -> None:
        built = any_of(READ, WRITE)
        assert isinstance(built, AnyOf)
        assert built == READ | WRITE
        assert built.combinator == "any"

    def test_members_are_kept_as_given(self) -> None:
        nested = all_of(any_of(READ, WRITE), DELETE)
        assert nested.members == frozenset({READ | WRITE, DELETE})
        assert all_of(READ & WRITE).members == frozenset({READ & WRITE})

    def test_duplicates_collapse(self) -> None:
        assert any_of(READ, READ, WRITE) == any_of(WRITE, READ)

    def test_exported_from_package_root(self) -> None:
        assert rbac_algebra.all_of is all_of
        assert rbac_algebra.any_of is any_of

    def test_secured_through_factory(self) -> None:
        reader = Permission.to(READ)
        assert any_of(READ, WRITE).secure(lambda: "read", reader) == "read"
        assert not any_of(WRITE, DELETE).try_secure(lambda: "denied", reader).ok
