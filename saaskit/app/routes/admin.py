"""API routes reporting administrative permissions."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..feature_gates import AccessDeniedError, require_admin
from ..schemas.subscriptions import PermissionSummaryResponse
from ..services import permissions as permission_service
from ..services import subscriptions as subscription_service
from .dependencies import get_optional_principal

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _require_admin(current_principal):
    try:
        return require_admin(current_principal, admin_role=subscription_service.get_settings().admin_role)
    except AccessDeniedError as exc:
        raise exc.to_http_exception() from exc


@router.get("/permissions", response_model=PermissionSummaryResponse)
async def get_permissions(*, current_principal=Depends(get_optional_principal)) -> PermissionSummaryResponse:
    """Return which admin affordances the signed-in admin may use."""

    principal = _require_admin(current_principal)
    resolver = permission_service.get_permission_resolver()
    summary = await resolver.permission_summary(principal)
    return PermissionSummaryResponse(user_id=principal.user_id, role=principal.role, permissions=summary)


@router.get("/roles/{role}/permissions", response_model=PermissionSummaryResponse)
async def get_role_permissions(
    role: str,
    *,
    current_principal=Depends(get_optional_principal),
) -> PermissionSummaryResponse:
    """Return what a role label is generally allowed to do."""

    _require_admin(current_principal)
    normalized = role.strip().lower()
    if not normalized:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role must not be blank")
    resolver = permission_service.get_permission_resolver()
    summary = await resolver.role_permission_summary(normalized)
    return PermissionSummaryResponse(role=normalized, permissions=summary)
