"""YAML-based role catalog loader.

RoleConfigLoader reads YAML role catalogs and builds :class:`RoleCatalog`
instances holding named operations, resources, roles and users.

Schema
------
::

    version: "1"
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
      user-admin:
        manages: [staff]
        management_operations: [grant, retrieve]
        recursive: true
    users:
      alice: [reader]
      bob: [staff, user-admin]

Example
-------
::

    loader = RoleConfigLoader()
    catalog = loader.load("/path/to/roles.yaml")
    alice = catalog.user("alice")
    assert alice.can(catalog.operation("read"))
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from rbac_algebra.config.schema import RoleCatalogConfig, RoleDefinition
from rbac_algebra.exceptions import ResourceHierarchyError, RoleConfigError
from rbac_algebra.permissions.management import ManagementOperation, RoleOperation
from rbac_algebra.permissions.permissible import NamedOperation
from rbac_algebra.registry.user_registry import UserOperation
from rbac_algebra.resources.resource import PermissibleResource, ResourceNode
from rbac_algebra.roles.management import RecursiveRoleManagementRole, RoleManagementRole
from rbac_algebra.roles.role import NO_ROLE, SUPER_USER_ROLE, ResourceRole, Role
from rbac_algebra.roles.user import User

logger = logging.getLogger(__name__)

_MANAGEMENT_OPERATIONS: dict[str, RoleOperation] = {
    "grant": ManagementOperation.GRANT,
    "retrieve": ManagementOperation.RETRIEVE,
    "add_user": UserOperation.ADD_USER,
    "get_user": UserOperation.GET_USER,
    "remove_user": UserOperation.REMOVE_USER,
    "grant_role": UserOperation.GRANT_ROLE,
}


class RoleCatalog:
    """Named operations, resources, roles and users built from one config.

    Lookups by an unknown name raise ``KeyError``.
    """

    def __init__(
        self,
        operations: dict[str, NamedOperation],
        resources: dict[str, PermissibleResource],
        roles: dict[str, Role],
        users: dict[str, User],
        description: str = "",
    ) -> None:
        self.operations = operations
        self.resources = resources
        self.roles = roles
        self.users = users
        self.description = description

    def operation(self, name: str) -> NamedOperation:
        return self.operations[name]

    def resource(self, path: str) -> PermissibleResource:
        return self.resources[path]

    def role(self, name: str) -> Role:
        return self.roles[name]

    def user(self, name: str) -> User:
        return self.users[name]

    def __repr__(self) -> str:
        return (
            f"RoleCatalog(operations={len(self.operations)}, roles={len(self.roles)}, "
            f"users={len(self.users)})"
        )


class RoleConfigLoader:
    """Loads role catalogs from YAML files, YAML strings or dicts.

    Parameters
    ----------
    strict:
        When ``True``, unknown top-level keys are treated as an error.
        Default ``False`` (unknown keys are ignored).
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        ["version", "description", "operations", "roles", "users", "metadata"]
    )

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def load(self, config_path: str | Path) -> RoleCatalog:
        """Load a role catalog from a YAML file on disk.

        Raises
        ------
        RoleConfigError
            If the file cannot be parsed or is invalid.
        FileNotFoundError
            If the config file does not exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Role config not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw: dict[str, object] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise RoleConfigError(f"Failed to parse YAML: {exc}", str(config_path)) from exc

        return self._build_catalog(raw, config_path=str(config_path))

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> RoleCatalog:
        """Load a role catalog from an already-parsed config dictionary."""
        return self._build_catalog(config, config_path=config_path)

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> RoleCatalog:
        """Load a role catalog from a YAML string.

        Raises
        ------
        RoleConfigError
            If parsing fails or the config is invalid.
        """
        try:
            raw: dict[str, object] = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise RoleConfigError(f"Failed to parse YAML string: {exc}", config_path) from exc
        return self._build_catalog(raw, config_path=config_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_catalog(
        self,
        raw: dict[str, object],
        config_path: str | None = None,
    ) -> RoleCatalog:
        self._validate_structure(raw, config_path)
        try:
            config = RoleCatalogConfig.model_validate(raw)
        except ValidationError as exc:
            raise RoleConfigError(f"Invalid role config: {exc}", config_path) from exc

        builder = _CatalogBuilder(config, config_path)
        catalog = builder.build()
        logger.info(
            "Loaded %d roles and %d users from %s",
            len(catalog.roles),
            len(catalog.users),
            config_path or "<dict>",
        )
        return catalog

    def _validate_structure(
        self,
        raw: dict[str, object],
        config_path: str | None,
    ) -> None:
        if not isinstance(raw, dict):
            raise RoleConfigError("Role config must be a YAML mapping (dict).", config_path)
        if self._strict:
            unknown = set(raw) - self._KNOWN_TOP_KEYS
            if unknown:
                raise RoleConfigError(
                    f"Unknown top-level keys: {sorted(unknown)}", config_path
                )


class _CatalogBuilder:
    """Resolves a validated config into live objects, one role at a time."""

    def __init__(self, config: RoleCatalogConfig, config_path: str | None) -> None:
        self._config = config
        self._config_path = config_path
        self._operations = {name: NamedOperation(name) for name in config.operations}
        self._resources: dict[str, PermissibleResource] = {}
        self._roles: dict[str, Role] = {}
        self._resolving: list[str] = []

    def build(self) -> RoleCatalog:
        for name in self._config.roles:
            self._role(name)
        users = {
            name: User(name, Role.join([self._role(role_name) for role_name in role_names]))
            for name, role_names in self._config.users.items()
        }
        return RoleCatalog(
            operations=dict(self._operations),
            resources=dict(self._resources),
            roles=dict(self._roles),
            users=users,
            description=self._config.description,
        )

    def _error(self, message: str) -> RoleConfigError:
        return RoleConfigError(message, self._config_path)

    def _role(self, name: str) -> Role:
        if name in self._roles:
            return self._roles[name]
        if name in self._resolving:
            cycle = " -> ".join([*self._resolving, name])
            raise self._error(f"Cyclic role reference: {cycle}")
        definition = self._config.roles.get(name)
        if definition is None:
            raise self._error(f"Unknown role {name!r}")

        self._resolving.append(name)
        try:
            role = self._build_role(definition)
        finally:
            self._resolving.pop()
        self._roles[name] = role
        return role

    def _build_role(self, definition: RoleDefinition) -> Role:
        match definition.kind:
            case "superuser":
                return SUPER_USER_ROLE
            case "includes":
                return Role.join([self._role(name) for name in definition.includes])
            case "manages":
                managed = Role.join([self._role(name) for name in definition.manages])
                operations = [_MANAGEMENT_OPERATIONS[op] for op in definition.management_operations]
                if definition.recursive:
                    return RecursiveRoleManagementRole(managed, *operations)
                return RoleManagementRole(managed, *operations)
            case "resource":
                resource = self._resource(definition.resource or "/")
                return ResourceRole(resource, *self._operation_list(definition.operations))
            case "operations":
                return Role.for_operations(*self._operation_list(definition.operations))
            case _:
                return NO_ROLE

    def _operation_list(self, names: list[str]) -> list[NamedOperation]:
        unknown = [name for name in names if name not in self._operations]
        if unknown:
            raise self._error(f"Unknown operations {unknown}")
        return [self._operations[name] for name in names]

    def _resource(self, path: str) -> PermissibleResource:
        if path not in self._resources:
            try:
                self._resources[path] = ResourceNode.from_path(path)
            except ResourceHierarchyError as exc:
                raise self._error(str(exc)) from exc
        return self._resources[path]
