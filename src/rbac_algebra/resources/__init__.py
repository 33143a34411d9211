"""Resource hierarchy and resource-scoped permissions."""
from __future__ import annotations

from rbac_algebra.resources.resource import (
    ALL_RESOURCES,
    AllResources,
    PermissibleResource,
    Resource,
    ResourceNode,
    ResourceOperation,
    ResourceOperationPermission,
)

__all__ = [
    "ALL_RESOURCES",
    "AllResources",
    "PermissibleResource",
    "Resource",
    "ResourceNode",
    "ResourceOperation",
    "ResourceOperationPermission",
]
