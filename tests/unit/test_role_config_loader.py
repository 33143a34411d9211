"""Tests for RoleConfigLoader and the role catalog schema."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from rbac_algebra.config.role_loader import RoleCatalog, RoleConfigLoader
from rbac_algebra.config.schema import RoleDefinition
from rbac_algebra.exceptions import RoleConfigError
from rbac_algebra.permissions.management import ManagementOperation
from rbac_algebra.registry.user_registry import UserOperation
from rbac_algebra.resources.resource import ResourceNode, ResourceOperation
from rbac_algebra.roles.management import RoleManagement
from rbac_algebra.roles.role import NO_ROLE, SUPER_USER_ROLE, ResourceRole, Roles

CATALOG_YAML = """
version: "1"
description: Document service roles
operations: [read, write, publish]
roles:
  reader:
    operations: [read]
  docs-editor:
    resource: /docs
    operations: [read, write]
  admin:
    superuser: true
  staff:
    includes: [reader, docs-editor]
  staff-admin:
    manages: [staff]
    management_operations: [grant, grant_role]
  user-admin:
    manages: [staff]
    management_operations: [grant, retrieve, grant_role]
    recursive: true
  reader-admin:
    manages: [reader]
  guest: {}
users:
  alice: [reader]
  bob: [staff, staff-admin]
  root: [admin]
"""


@pytest.fixture()
def loader() -> RoleConfigLoader:
    return RoleConfigLoader()


@pytest.fixture()
def catalog(loader: RoleConfigLoader) -> RoleCatalog:
    return loader.load_from_yaml_string(CATALOG_YAML)


# ---------------------------------------------------------------------------
# Role kinds
# ---------------------------------------------------------------------------


class TestRoleKinds:
    def test_operations_role(self, catalog: RoleCatalog) -> None:
        reader = catalog.role("reader")
        assert reader.can(catalog.operation("read"))
        assert not reader.can(catalog.operation("write"))

    def test_resource_role(self, catalog: RoleCatalog) -> None:
        editor = catalog.role("docs-editor")
        assert isinstance(editor, ResourceRole)
        docs = catalog.resource("/docs")
        write = catalog.operation("write")
        assert editor.can(ResourceOperation(docs.child("handbook"), write))
        assert not editor.can(ResourceOperation(ResourceNode("wiki"), write))
        assert docs == ResourceNode.from_path("/docs")

    def test_superuser_role(self, catalog: RoleCatalog) -> None:
        assert catalog.role("admin") is SUPER_USER_ROLE

    def test_includes_role_is_join(self, catalog: RoleCatalog) -> None:
        staff = catalog.role("staff")
        assert isinstance(staff, Roles)
        assert staff.members == frozenset({catalog.role("reader"), catalog.role("docs-editor")})
        assert staff > catalog.role("reader")

    def test_manages_role(self, catalog: RoleCatalog) -> None:
        staff_admin = catalog.role("staff-admin")
        assert staff_admin.can(RoleManagement(catalog.role("reader"), ManagementOperation.GRANT))
        assert staff_admin.can(RoleManagement(catalog.role("staff"), UserOperation.GRANT_ROLE))
        assert not staff_admin.can(
            RoleManagement(catalog.role("staff"), ManagementOperation.RETRIEVE)
        )
        assert not staff_admin.can(RoleManagement(SUPER_USER_ROLE, ManagementOperation.GRANT))

    def test_default_management_operations(self, catalog: RoleCatalog) -> None:
        reader_admin = catalog.role("reader-admin")
        reader = catalog.role("reader")
        assert reader_admin.can(RoleManagement(reader, ManagementOperation.GRANT))
        assert reader_admin.can(RoleManagement(reader, ManagementOperation.RETRIEVE))
        assert not reader_admin.can(RoleManagement(reader, UserOperation.GRANT_ROLE))

    def test_recursive_manages_management_roles(self, catalog: RoleCatalog) -> None:
        user_admin = catalog.role("user-admin")
        target = catalog.role("staff-admin")
        assert user_admin.can(RoleManagement(target, ManagementOperation.GRANT))
        assert not catalog.role("staff-admin").can(RoleManagement(target, ManagementOperation.GRANT))

    def test_empty_role_is_no_role(self, catalog: RoleCatalog) -> None:
        assert catalog.role("guest") is NO_ROLE


# ---------------------------------------------------------------------------
# Catalog contents
# ---------------------------------------------------------------------------


class TestCatalog:
    def test_users(self, catalog: RoleCatalog) -> None:
        assert set(catalog.users) == {"alice", "bob", "root"}
        assert catalog.user("alice").can(catalog.operation("read"))
        assert catalog.user("root").roles is SUPER_USER_ROLE
        assert catalog.user("bob").can(
            RoleManagement(catalog.role("reader"), ManagementOperation.GRANT)
        )

    def test_description_and_operations(self, catalog: RoleCatalog) -> None:
        assert catalog.description == "Document service roles"
        assert sorted(catalog.operations) == ["publish", "read", "write"]

    def test_unknown_names_raise_key_error(self, catalog: RoleCatalog) -> None:
        with pytest.raises(KeyError):
            catalog.role("ghost")
        with pytest.raises(KeyError):
            catalog.user("ghost")

    def test_repr(self, catalog: RoleCatalog) -> None:
        assert repr(catalog) == "RoleCatalog(operations=3, roles=8, users=3)"

    def test_empty_document(self, loader: RoleConfigLoader) -> None:
        catalog = loader.load_from_yaml_string("")
        assert catalog.roles == {}
        assert catalog.users == {}

    def test_load_from_dict(self, loader: RoleConfigLoader) -> None:
        catalog = loader.load_from_dict(
            {"version": 1.0, "operations": ["read"], "roles": {"r": {"operations": ["read"]}}}
        )
        assert catalog.role("r").can(catalog.operation("read"))

    def test_load_logs_summary(
        self, loader: RoleConfigLoader, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="rbac_algebra.config.role_loader"):
            loader.load_from_yaml_string(CATALOG_YAML)
        assert "Loaded 8 roles and 3 users" in caplog.text


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestLoadFile:
    def test_load_from_file(self, loader: RoleConfigLoader, tmp_path: Path) -> None:
        path = tmp_path / "roles.yaml"
        path.write_text(CATALOG_YAML, encoding="utf-8")
        catalog = loader.load(path)
        assert "staff" in catalog.roles

    def test_missing_file(self, loader: RoleConfigLoader, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "missing.yaml")

    def test_parse_error_carries_path(self, loader: RoleConfigLoader, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("roles: [unclosed\n", encoding="utf-8")
        with pytest.raises(RoleConfigError) as exc_info:
            loader.load(path)
        assert exc_info.value.config_path == str(path)
        assert str(exc_info.value).startswith(f"[{path}]")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_yaml_string_parse_error(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="Failed to parse YAML"):
            loader.load_from_yaml_string("roles: {a: [")

    def test_non_mapping_document(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="mapping"):
            loader.load_from_yaml_string("- just\n- a list\n")

    def test_unsupported_version(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="unsupported config version"):
            loader.load_from_dict({"version": "2"})

    def test_duplicate_operations(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="duplicate operations"):
            loader.load_from_dict({"operations": ["read", "read"]})

    def test_unknown_operation(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="Unknown operations"):
            loader.load_from_dict(
                {"operations": ["read"], "roles": {"r": {"operations": ["delete"]}}}
            )

    def test_unknown_role_reference(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="Unknown role 'ghost'"):
            loader.load_from_dict({"roles": {"r": {"includes": ["ghost"]}}})

    def test_unknown_role_for_user(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="Unknown role 'ghost'"):
            loader.load_from_dict({"users": {"alice": ["ghost"]}})

    def test_cyclic_roles(self, loader: RoleConfigLoader) -> None:
        config = {"roles": {"a": {"includes": ["b"]}, "b": {"includes": ["a"]}}}
        with pytest.raises(RoleConfigError, match="Cyclic role reference: a -> b -> a"):
            loader.load_from_dict(config)

    def test_self_managing_role_is_cyclic(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="Cyclic"):
            loader.load_from_dict({"roles": {"a": {"manages": ["a"]}}})

    def test_multiple_kinds_rejected(self, loader: RoleConfigLoader) -> None:
        config = {"roles": {"r": {"superuser": True, "includes": ["x"]}}}
        with pytest.raises(RoleConfigError, match="only one kind"):
            loader.load_from_dict(config)

    def test_recursive_requires_manages(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError, match="recursive requires manages"):
            loader.load_from_dict({"roles": {"r": {"recursive": True}}})

    def test_unknown_management_operation(self, loader: RoleConfigLoader) -> None:
        config = {"roles": {"r": {"manages": ["r2"], "management_operations": ["delete"]}}}
        with pytest.raises(RoleConfigError, match="unknown management operations"):
            loader.load_from_dict(config)

    def test_relative_resource_path(self, loader: RoleConfigLoader) -> None:
        config = {"operations": ["read"], "roles": {"r": {"resource": "docs", "operations": ["read"]}}}
        with pytest.raises(RoleConfigError, match="absolute"):
            loader.load_from_dict(config)

    def test_unknown_role_field(self, loader: RoleConfigLoader) -> None:
        with pytest.raises(RoleConfigError):
            loader.load_from_dict({"roles": {"r": {"permissions": ["read"]}}})

    def test_strict_rejects_unknown_top_level_keys(self) -> None:
        strict = RoleConfigLoader(strict=True)
        with pytest.raises(RoleConfigError, match="Unknown top-level keys"):
            strict.load_from_dict({"version": "1", "extras": {}})

    def test_lenient_ignores_unknown_top_level_keys(self, loader: RoleConfigLoader) -> None:
        catalog = loader.load_from_dict({"version": "1", "extras": {}})
        assert catalog.roles == {}

    def test_error_is_value_error(self) -> None:
        assert issubclass(RoleConfigError, ValueError)


class TestRoleDefinition:
    @pytest.mark.parametrize(
        ("definition", "kind"),
        [
            ({}, "empty"),
            ({"operations": ["read"]}, "operations"),
            ({"resource": "/docs", "operations": ["read"]}, "resource"),
            ({"superuser": True}, "superuser"),
            ({"includes": ["a"]}, "includes"),
            ({"manages": ["a"], "recursive": True}, "manages"),
        ],
    )
    def test_kind(self, definition: dict[str, object], kind: str) -> None:
        assert RoleDefinition.model_validate(definition).kind == kind
