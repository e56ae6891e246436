"""Application wiring for the permission resolver."""
from __future__ import annotations

from functools import lru_cache

from ..permissions import (
    RESOURCE_ACTIONS,
    USER_ROLE,
    CallablePrincipalDirectory,
    PermissionResolver,
    RolePermissionAuthority,
)
from .subscriptions import get_settings

try:  # pragma: no cover - resolve context helper when imported from FastAPI app
    from saaskit.app_context import get_principal_by_id
except ModuleNotFoundError as exc:  # pragma: no cover
    if exc.name != "saaskit":
        raise
    from ...app_context import get_principal_by_id  # type: ignore[no-redef]


@lru_cache(maxsize=1)
def get_permission_resolver() -> PermissionResolver:
    role_grants = {get_settings().admin_role: dict(RESOURCE_ACTIONS), USER_ROLE: {}}
    authority = RolePermissionAuthority(
        role_grants,
        directory=CallablePrincipalDirectory(get_principal_by_id),
    )
    return PermissionResolver(authority)


__all__ = ["get_permission_resolver"]
