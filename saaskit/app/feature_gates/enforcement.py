"""Helpers for enforcing session, role and permission gates on API layers."""
from __future__ import annotations

import logging
from typing import Optional

from ..permissions.models import ADMIN_ROLE, Principal
from ..permissions.service import PermissionResolver
from .exceptions import AccessDeniedError, AdminAccessRequiredError, AuthenticationRequiredError

logger = logging.getLogger(__name__)


def require_principal(principal: Optional[Principal]) -> Principal:
    """Return the principal or raise when no session exists."""

    if principal is None:
        raise AuthenticationRequiredError()
    return principal


def require_admin(principal: Optional[Principal], *, admin_role: str = ADMIN_ROLE) -> Principal:
    """Ensure the caller is signed in with the admin role.

    Raises
    ------
    AuthenticationRequiredError
        When no session exists (maps to HTTP 401).
    AdminAccessRequiredError
        When a session exists but its role is not ``admin_role`` (HTTP 403).
    """

    current = require_principal(principal)
    if not current.is_role(admin_role):
        logger.info("Admin access denied user=%s role=%s", current.user_id, current.role)
        raise AdminAccessRequiredError(role=current.role)
    return current


async def require_permission(
    resolver: PermissionResolver,
    principal: Optional[Principal],
    shorthand: str,
) -> Principal:
    """Ensure the named permission shorthand evaluates to a definitive grant."""

    current = require_principal(principal)
    if not await resolver.check(current, shorthand):
        logger.info("Permission %s denied user=%s role=%s", shorthand, current.user_id, current.role)
        raise AccessDeniedError(
            code="permission_required",
            message=f"Permission '{shorthand}' is required.",
            detail={"missing_permission": shorthand},
        )
    return current
