"""Request dependencies shared by the subscription and admin routers."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import Request

from ..services import subscriptions as subscription_service


def _resolve_get_current_principal() -> Any:  # pragma: no cover - helper for lazy import
    try:
        from saaskit.app_context import get_current_principal as resolved
    except ModuleNotFoundError as exc:
        if exc.name != "saaskit":
            raise
        from ...app_context import get_current_principal as resolved  # type: ignore[no-redef]
    return resolved


def get_optional_principal(request: Request) -> Optional[Any]:
    """Resolve the session cookie to a principal, or ``None`` when signed out."""

    cookie_name = subscription_service.get_settings().session_cookie_name
    session_token = request.cookies.get(cookie_name)
    if not session_token:
        return None
    resolved = _resolve_get_current_principal()
    return resolved(session_token=session_token)
