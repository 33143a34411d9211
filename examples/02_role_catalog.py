#!/usr/bin/env python3
"""Example: Role catalog for rbac-algebra

Load roles and users from YAML, then manage users through a registry
guarded by role-management authority.

Usage:
    python examples/02_role_catalog.py
"""
from __future__ import annotations

import logging

import rbac_algebra as rbac

CATALOG = """
version: "1"
operations: [read, write]
roles:
  reader:
    operations: [read]
  editor:
    resource: /docs
    operations: [read, write]
  staff:
    includes: [reader, editor]
  staff-admin:
    manages: [staff]
    management_operations: [add_user, get_user, grant_role]
users:
  alice: [reader]
  carol: [staff-admin]
"""


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    catalog = rbac.RoleConfigLoader().load_from_yaml_string(CATALOG)
    registry = rbac.UserRegistry.from_catalog(catalog)
    carol = registry.authenticate("carol")

    registry.add_user(rbac.User("dave", catalog.role("reader")), source=carol)
    registry.grant("dave", catalog.role("editor"), source=carol)
    print(f"Users visible to carol: {registry.list_users(source=carol)}")

    result = rbac.try_secure(
        rbac.RoleManagement(rbac.SUPER_USER_ROLE, rbac.UserOperation.GRANT_ROLE),
        lambda: registry.grant("dave", rbac.SUPER_USER_ROLE, source=carol),
        carol,
    )
    print(f"Granting super user allowed: {result.ok}")


if __name__ == "__main__":
    main()
