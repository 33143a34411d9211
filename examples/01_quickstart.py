#!/usr/bin/env python3
"""Example: Quickstart for rbac-algebra

Minimal working example: define operations and resources, build roles,
and secure blocks of code behind them.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install rbac-algebra
"""
from __future__ import annotations

import rbac_algebra as rbac


def main() -> None:
    print(f"rbac-algebra version: {rbac.__version__}")

    # Step 1: Operations and a resource tree
    read = rbac.NamedOperation("read")
    write = rbac.NamedOperation("write")
    docs = rbac.ResourceNode("docs")
    handbook = docs.child("handbook")

    # Step 2: Roles and users
    reader = rbac.Role.for_operations(read)
    docs_editor = rbac.ResourceRole(docs, read, write)
    alice = rbac.User("alice", reader)
    bob = rbac.User("bob", reader + docs_editor)
    print(f"Role order: reader < reader + docs_editor is {reader < bob.roles}")

    # Step 3: Secure operations
    attempts = [
        (alice, read),
        (alice, rbac.ResourceOperation(handbook, write)),
        (bob, rbac.ResourceOperation(handbook, write)),
        (bob, read & rbac.ResourceOperation(handbook, write)),
    ]

    print("\nSecured calls:")
    for user, target in attempts:
        result = rbac.try_secure(target, lambda: "ok", user)
        icon = "ALLOW" if result else "DENY"
        print(f"  [{icon}] {user} -> {target}")
        if result.error is not None:
            print(f"    {result.error}")


if __name__ == "__main__":
    main()
