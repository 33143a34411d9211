"""Pydantic v2 models for role catalog configuration files.

These models validate the raw YAML structure; :mod:`rbac_algebra.config.role_loader`
turns a validated :class:`RoleCatalogConfig` into live roles and users.
"""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1", "1.0"])

MANAGEMENT_OPERATION_NAMES: frozenset[str] = frozenset(
    ["grant", "retrieve", "add_user", "get_user", "remove_user", "grant_role"]
)


class RoleDefinition(BaseModel):
    """One entry under ``roles:``.

    Exactly one kind may be used per role:

    - ``operations`` alone: a role permitting those operations anywhere;
    - ``resource`` with ``operations``: a role scoped to a resource subtree;
    - ``superuser: true``: the super user role;
    - ``includes``: the join of other named roles;
    - ``manages``: authority to manage other named roles, optionally
      ``recursive``.

    An empty definition is the role that can do nothing.
    """

    model_config = {"extra": "forbid"}

    operations: list[str] = Field(default_factory=list)
    resource: str | None = Field(default=None, description="Absolute resource path")
    superuser: bool = False
    includes: list[str] = Field(default_factory=list)
    manages: list[str] = Field(default_factory=list)
    management_operations: list[str] = Field(
        default_factory=lambda: ["grant", "retrieve"]
    )
    recursive: bool = False

    @field_validator("resource")
    @classmethod
    def resource_is_absolute(cls, value: str | None) -> str | None:
        if value is not None and not value.startswith("/"):
            raise ValueError(f"resource must be an absolute path, got {value!r}")
        return value

    @field_validator("management_operations")
    @classmethod
    def management_operations_known(cls, value: list[str]) -> list[str]:
        unknown = sorted(set(value) - MANAGEMENT_OPERATION_NAMES)
        if unknown:
            raise ValueError(
                f"unknown management operations {unknown}; "
                f"expected any of {sorted(MANAGEMENT_OPERATION_NAMES)}"
            )
        return value

    @model_validator(mode="after")
    def single_kind(self) -> RoleDefinition:
        kinds = [
            name
            for name, used in (
                ("operations", bool(self.operations) or self.resource is not None),
                ("superuser", self.superuser),
                ("includes", bool(self.includes)),
                ("manages", bool(self.manages)),
            )
            if used
        ]
        if len(kinds) > 1:
            raise ValueError(f"a role may use only one kind, got {kinds}")
        if self.recursive and not self.manages:
            raise ValueError("recursive requires manages")
        return self

    @property
    def kind(self) -> str:
        if self.superuser:
            return "superuser"
        if self.includes:
            return "includes"
        if self.manages:
            return "manages"
        if self.resource is not None:
            return "resource"
        if self.operations:
            return "operations"
        return "empty"


class RoleCatalogConfig(BaseModel):
    """Top-level role catalog document."""

    model_config = {"extra": "allow"}

    version: str = "1"
    description: str = ""
    operations: list[str] = Field(default_factory=list)
    roles: dict[str, RoleDefinition] = Field(default_factory=dict)
    users: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def version_supported(cls, value: object) -> str:
        version = str(value)
        if version not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"unsupported config version {version!r}; "
                f"supported: {sorted(SUPPORTED_VERSIONS)}"
            )
        return version

    @field_validator("operations")
    @classmethod
    def operations_unique(cls, value: list[str]) -> list[str]:
        duplicates = sorted({name for name in value if value.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate operations {duplicates}")
        return value
