"""Role and permission checks for administrative operations."""

from .models import (
    ADMIN_ROLE,
    RESOURCE_ACTIONS,
    USER_ROLE,
    PermissionResource,
    Principal,
)
from .service import (
    DEFAULT_ROLE_GRANTS,
    PERMISSION_SHORTHANDS,
    CallablePrincipalDirectory,
    PermissionAuthority,
    PermissionResolver,
    PermissionShorthand,
    PrincipalDirectory,
    RolePermissionAuthority,
)

__all__ = [
    "ADMIN_ROLE",
    "RESOURCE_ACTIONS",
    "USER_ROLE",
    "PermissionResource",
    "Principal",
    "DEFAULT_ROLE_GRANTS",
    "PERMISSION_SHORTHANDS",
    "CallablePrincipalDirectory",
    "PermissionAuthority",
    "PermissionResolver",
    "PermissionShorthand",
    "PrincipalDirectory",
    "RolePermissionAuthority",
]
