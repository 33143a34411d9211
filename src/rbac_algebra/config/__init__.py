"""YAML role catalog configuration.

Example
-------
::

    from rbac_algebra.config import RoleConfigLoader

    catalog = RoleConfigLoader().load("roles.yaml")
    staff = catalog.role("staff")
"""
from __future__ import annotations

from rbac_algebra.config.role_loader import RoleCatalog, RoleConfigLoader
from rbac_algebra.config.schema import RoleCatalogConfig, RoleDefinition

__all__ = [
    "RoleCatalog",
    "RoleCatalogConfig",
    "RoleConfigLoader",
    "RoleDefinition",
]
