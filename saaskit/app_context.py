"""Shared application context for reusable dependencies."""
from __future__ import annotations

from typing import Any, Callable, Optional

_get_conn: Optional[Callable[[], Any]] = None
_get_current_principal: Optional[Callable[..., Optional[Any]]] = None
_get_principal_by_id: Optional[Callable[[str], Optional[Any]]] = None


def configure(
    *,
    get_conn: Callable[[], Any],
    get_current_principal: Callable[..., Optional[Any]],
    get_principal_by_id: Callable[[str], Optional[Any]],
) -> None:
    """Register the collaborators supplied by the hosting application.

    ``get_current_principal`` resolves a session token to a principal (or
    ``None`` when signed out); ``get_principal_by_id`` resolves a
    server-trusted user id for permission queries. User-scoped
    permission checks are answered from the directory alone.
    """

    global _get_conn
    global _get_current_principal
    global _get_principal_by_id

    _get_conn = get_conn
    _get_current_principal = get_current_principal
    _get_principal_by_id = get_principal_by_id


def reset() -> None:
    global _get_conn
    global _get_current_principal
    global _get_principal_by_id

    _get_conn = None
    _get_current_principal = None
    _get_principal_by_id = None


def _require(value: Optional[Any], name: str) -> Any:
    if value is None:
        raise RuntimeError(f"Application context has not been configured yet: {name}")
    return value


def get_conn() -> Any:
    conn_factory = _require(_get_conn, "get_conn")
    return conn_factory()


def get_current_principal(*args: Any, **kwargs: Any) -> Optional[Any]:
    dependency = _require(_get_current_principal, "get_current_principal")
    return dependency(*args, **kwargs)


def get_principal_by_id(user_id: str) -> Optional[Any]:
    lookup = _require(_get_principal_by_id, "get_principal_by_id")
    return lookup(user_id)
