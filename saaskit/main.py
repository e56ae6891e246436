"""FastAPI application exposing the subscription core."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from saaskit import app_context
from saaskit.app.billing import connect
from saaskit.app.config import Settings
from saaskit.app.routes.admin import router as admin_router
from saaskit.app.routes.subscriptions import router as subscriptions_router
from saaskit.app.services import permissions as permission_service
from saaskit.app.services import subscriptions as subscription_service

logger = logging.getLogger("saaskit")


def _connection_factory(settings: Settings) -> Callable[[], Any]:
    def _get_conn():
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is not configured")
        return connect(settings.database_url, connect_timeout=settings.db_connect_timeout)

    return _get_conn


def create_app(
    *,
    get_current_principal: Callable[..., Optional[Any]],
    get_principal_by_id: Callable[[str], Optional[Any]],
    get_conn: Optional[Callable[[], Any]] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the API, wiring in the identity and storage collaborators.

    ``get_current_principal`` is called with ``session_token=`` and must
    return a :class:`~saaskit.app.permissions.Principal` or ``None``;
    ``get_principal_by_id`` answers the same for a trusted user id and backs
    every user-scoped permission check.
    """

    if settings is not None:
        subscription_service.configure_settings(settings)
    permission_service.get_permission_resolver.cache_clear()
    resolved_settings = subscription_service.get_settings()
    app_context.configure(
        get_conn=get_conn or _connection_factory(resolved_settings),
        get_current_principal=get_current_principal,
        get_principal_by_id=get_principal_by_id,
    )

    app = FastAPI(title="SaaS Kit Subscription API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(resolved_settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(subscriptions_router)
    app.include_router(admin_router)

    if not resolved_settings.database_url and get_conn is None:
        logger.warning("DATABASE_URL is not set; subscription lookups will fail")
    return app
