"""rbac-algebra: an algebra of permissions, roles and resources.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import rbac_algebra as rbac
>>> rbac.__version__
'0.1.0'
>>> read = rbac.NamedOperation("read")
>>> write = rbac.NamedOperation("write")
>>> alice = rbac.User("alice", rbac.Role.for_operations(read))
>>> rbac.secure(read, lambda: "report", alice)
'report'
>>> rbac.try_secure(write, lambda: "saved", alice).ok
False
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------
from rbac_algebra.ordering import PartiallyOrdered

# ---------------------------------------------------------------------------
# Permissibles
# ---------------------------------------------------------------------------
from rbac_algebra.permissions.permissible import (
    AllOf,
    AnyOf,
    NamedOperation,
    Operation,
    Permissible,
    PermissibleSet,
    all_of,
    any_of,
)

# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------
from rbac_algebra.permissions.permission import (
    ALL_PERMISSIONS,
    NO_PERMISSIONS,
    AllPermissions,
    NoPermissions,
    Permission,
    PermissionDifference,
    PermissionSet,
    SimplePermission,
    SinglePermission,
    TypePermission,
)
from rbac_algebra.permissions.management import (
    ManagementOperation,
    PermissionManagement,
    PermissionManagementPermission,
    PermissionOperation,
    RecursivePermissionManagementPermission,
    RoleOperation,
)

# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------
from rbac_algebra.resources.resource import (
    ALL_RESOURCES,
    AllResources,
    PermissibleResource,
    Resource,
    ResourceNode,
    ResourceOperation,
    ResourceOperationPermission,
)

# ---------------------------------------------------------------------------
# Roles and users
# ---------------------------------------------------------------------------
from rbac_algebra.roles.role import (
    NO_ROLE,
    SUPER_USER_ROLE,
    NoRole,
    PermissionsRole,
    ResourceRole,
    Role,
    Roles,
    SuperUserRole,
)
from rbac_algebra.roles.management import (
    RecursiveRoleManagementPermission,
    RecursiveRoleManagementRole,
    RoleManagement,
    RoleManagementPermission,
    RoleManagementRole,
)
from rbac_algebra.roles.user import User

# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------
from rbac_algebra.evaluation.source import (
    PermissionSource,
    SecureResult,
    guarded,
    secure,
    try_secure,
)

# ---------------------------------------------------------------------------
# Registry and configuration
# ---------------------------------------------------------------------------
from rbac_algebra.registry.user_registry import UserOperation, UserRegistry
from rbac_algebra.config.role_loader import RoleCatalog, RoleConfigLoader

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from rbac_algebra.exceptions import (
    AuthenticationError,
    AuthorizationError,
    FailedAuthenticationError,
    MissingCredentialsError,
    PermissionConstructionError,
    RbacError,
    ResourceHierarchyError,
    RoleConfigError,
    UnknownUserError,
    UnpermittedOperationError,
    UnpermittedOperationsError,
)

__all__ = [
    "__version__",
    # Ordering
    "PartiallyOrdered",
    # Permissibles
    "AllOf",
    "AnyOf",
    "NamedOperation",
    "Operation",
    "Permissible",
    "PermissibleSet",
    "all_of",
    "any_of",
    # Permissions
    "ALL_PERMISSIONS",
    "NO_PERMISSIONS",
    "AllPermissions",
    "NoPermissions",
    "Permission",
    "PermissionDifference",
    "PermissionSet",
    "SimplePermission",
    "SinglePermission",
    "TypePermission",
    "ManagementOperation",
    "PermissionManagement",
    "PermissionManagementPermission",
    "PermissionOperation",
    "RecursivePermissionManagementPermission",
    "RoleOperation",
    # Resources
    "ALL_RESOURCES",
    "AllResources",
    "PermissibleResource",
    "Resource",
    "ResourceNode",
    "ResourceOperation",
    "ResourceOperationPermission",
    # Roles and users
    "NO_ROLE",
    "SUPER_USER_ROLE",
    "NoRole",
    "PermissionsRole",
    "ResourceRole",
    "Role",
    "Roles",
    "SuperUserRole",
    "RecursiveRoleManagementPermission",
    "RecursiveRoleManagementRole",
    "RoleManagement",
    "RoleManagementPermission",
    "RoleManagementRole",
    "User",
    # Evaluation
    "PermissionSource",
    "SecureResult",
    "guarded",
    "secure",
    "try_secure",
    # Registry and configuration
    "UserOperation",
    "UserRegistry",
    "RoleCatalog",
    "RoleConfigLoader",
    # Errors
    "AuthenticationError",
    "AuthorizationError",
    "FailedAuthenticationError",
    "MissingCredentialsError",
    "PermissionConstructionError",
    "RbacError",
    "ResourceHierarchyError",
    "RoleConfigError",
    "UnknownUserError",
    "UnpermittedOperationError",
    "UnpermittedOperationsError",
]
