from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from saaskit import app_context
from saaskit.app.config import load_settings
from saaskit.app.entitlements import DEFAULT_PLAN_CATALOG, ManagementAction, PlanKey, Subscription, SubscriptionStatus
from saaskit.app.permissions import Principal
from saaskit.app.routes import admin as admin_routes
from saaskit.app.routes import subscriptions as subscription_routes
from saaskit.app.routes.dependencies import get_optional_principal
from saaskit.app.schemas.subscriptions import ActionCheckRequest
from saaskit.app.services import permissions as permission_service
from saaskit.app.services import subscriptions as subscription_service
from saaskit.main import create_app


class FakeSubscriptionSource:
    def __init__(self, records: Optional[Dict[str, Subscription]] = None) -> None:
        self.records = records or {}
        self.requests: list[str] = []

    def get_current_subscription(self, user_id: str) -> Optional[Subscription]:
        self.requests.append(user_id)
        return self.records.get(user_id)


def _request_with_cookie(cookie: Optional[str]) -> Request:
    headers = [(b"cookie", cookie.encode("latin-1"))] if cookie else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.fixture
def member() -> Principal:
    return Principal(user_id="user-1", role="user")


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id="admin-1", role="admin")


@pytest.fixture
def source(monkeypatch: pytest.MonkeyPatch) -> FakeSubscriptionSource:
    fake = FakeSubscriptionSource()
    monkeypatch.setattr(subscription_service, "get_subscription_source", lambda: fake)
    monkeypatch.setattr(subscription_service, "get_plan_catalog", lambda: DEFAULT_PLAN_CATALOG)
    monkeypatch.setattr(subscription_service, "get_settings", lambda: load_settings({}))
    return fake


@pytest.fixture
def configured_context(admin: Principal, member: Principal, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(permission_service, "get_settings", lambda: load_settings({}))
    principals = {admin.user_id: admin, member.user_id: member}
    app_context.configure(
        get_conn=lambda: None,
        get_current_principal=lambda session_token=None: principals.get(session_token),
        get_principal_by_id=principals.get,
    )
    permission_service.get_permission_resolver.cache_clear()
    yield
    app_context.reset()
    permission_service.get_permission_resolver.cache_clear()


@pytest.fixture
def reset_wiring() -> Iterator[None]:
    yield
    app_context.reset()
    subscription_service.configure_settings(None)
    permission_service.get_permission_resolver.cache_clear()


def test_get_subscription_requires_session(source: FakeSubscriptionSource) -> None:
    with pytest.raises(HTTPException) as exc:
        subscription_routes.get_subscription(current_principal=None)

    assert exc.value.status_code == 401
    assert exc.value.detail["error"] == "authentication_required"
    assert source.requests == []


def test_get_subscription_without_record_renders_no_section(
    source: FakeSubscriptionSource, member: Principal
) -> None:
    response = subscription_routes.get_subscription(current_principal=member)

    assert response.subscription is None
    assert response.availability.model_dump(by_alias=True) == {
        "canCancel": False,
        "canReactivate": False,
        "upgradeOptions": [],
        "downgradeOptions": [],
    }
    assert source.requests == ["user-1"]


def test_get_subscription_active_pro(source: FakeSubscriptionSource, member: Principal) -> None:
    source.records["user-1"] = Subscription(
        plan=PlanKey.PRO,
        status=SubscriptionStatus.ACTIVE,
        current_period_end=datetime(2025, 6, 30, tzinfo=timezone.utc),
    )

    response = subscription_routes.get_subscription(current_principal=member)

    assert response.subscription is not None
    assert response.subscription.plan_title == "Pro Plan"
    assert response.subscription.billing_date_label == "Next Billing"
    assert response.subscription.billing_date == "June 30, 2025"
    assert response.availability.can_cancel is True
    assert response.availability.upgrade_options == [PlanKey.ENTERPRISE]
    assert response.availability.downgrade_options == [PlanKey.BASIC]


def test_check_action_allows_valid_downgrade(source: FakeSubscriptionSource, member: Principal) -> None:
    source.records["user-1"] = Subscription(plan=PlanKey.ENTERPRISE, status=SubscriptionStatus.ACTIVE)

    response = subscription_routes.check_action(
        ManagementAction.DOWNGRADE,
        ActionCheckRequest(targetPlan=PlanKey.BASIC),
        current_principal=member,
    )

    assert response.allowed is True
    assert response.target_plan == PlanKey.BASIC


def test_check_action_reports_state_denial(source: FakeSubscriptionSource, member: Principal) -> None:
    source.records["user-1"] = Subscription(plan=PlanKey.BASIC, status=SubscriptionStatus.INCOMPLETE)

    with pytest.raises(HTTPException) as exc:
        subscription_routes.check_action(ManagementAction.REACTIVATE, None, current_principal=member)

    assert exc.value.status_code == 409
    assert exc.value.detail["error"] == "action_not_available"
    assert exc.value.detail["status"] == "incomplete"


def test_check_action_requires_target_for_plan_changes(source: FakeSubscriptionSource, member: Principal) -> None:
    source.records["user-1"] = Subscription(plan=PlanKey.BASIC, status=SubscriptionStatus.ACTIVE)

    with pytest.raises(HTTPException) as exc:
        subscription_routes.check_action(ManagementAction.UPGRADE, None, current_principal=member)

    assert exc.value.status_code == 400


def test_check_action_requires_session(source: FakeSubscriptionSource) -> None:
    with pytest.raises(HTTPException) as exc:
        subscription_routes.check_action(ManagementAction.CANCEL, None, current_principal=None)

    assert exc.value.status_code == 401


def test_list_plans(source: FakeSubscriptionSource) -> None:
    response = subscription_routes.list_plans()

    assert [plan.id for plan in response.plans] == [PlanKey.BASIC, PlanKey.PRO, PlanKey.ENTERPRISE]
    assert response.plans[1].price == "$29.00"
    assert response.plans[1].popular is True
    assert response.checkout_configured is False


def test_admin_permissions_distinguish_401_and_403(
    source: FakeSubscriptionSource, configured_context: None, member: Principal
) -> None:
    with pytest.raises(HTTPException) as unauthenticated:
        asyncio.run(admin_routes.get_permissions(current_principal=None))
    with pytest.raises(HTTPException) as forbidden:
        asyncio.run(admin_routes.get_permissions(current_principal=member))

    assert unauthenticated.value.status_code == 401
    assert forbidden.value.status_code == 403


def test_admin_permissions_summary(
    source: FakeSubscriptionSource, configured_context: None, admin: Principal
) -> None:
    response = asyncio.run(admin_routes.get_permissions(current_principal=admin))

    assert response.user_id == "admin-1"
    assert response.permissions == {
        "manage_users": True,
        "ban_users": True,
        "impersonate_users": True,
        "manage_sessions": True,
    }


def test_role_permissions_summary(
    source: FakeSubscriptionSource, configured_context: None, admin: Principal
) -> None:
    response = asyncio.run(admin_routes.get_role_permissions("User", current_principal=admin))

    assert response.role == "user"
    assert set(response.permissions.values()) == {False}


@pytest.mark.parametrize("role", ["", "   ", "\t"])
def test_blank_role_label_is_a_bad_request(
    role: str, source: FakeSubscriptionSource, configured_context: None, admin: Principal
) -> None:
    with pytest.raises(HTTPException) as exc:
        asyncio.run(admin_routes.get_role_permissions(role, current_principal=admin))

    assert exc.value.status_code == 400


def test_app_factory_wiring_answers_admin_permissions(reset_wiring: None) -> None:
    owner = Principal(user_id="owner-1", role="owner")
    member = Principal(user_id="user-1", role="user")
    directory = {owner.user_id: owner, member.user_id: member}
    create_app(
        get_current_principal=lambda session_token=None: directory.get(session_token),
        get_principal_by_id=directory.get,
        get_conn=lambda: None,
        settings=load_settings({"ADMIN_ROLE": "owner"}),
    )

    granted = asyncio.run(admin_routes.get_permissions(current_principal=owner))
    with pytest.raises(HTTPException) as forbidden:
        asyncio.run(admin_routes.get_permissions(current_principal=member))

    assert granted.permissions == {
        "manage_users": True,
        "ban_users": True,
        "impersonate_users": True,
        "manage_sessions": True,
    }
    assert forbidden.value.status_code == 403


def test_app_factory_requires_principal_directory(reset_wiring: None) -> None:
    with pytest.raises(TypeError):
        create_app(  # type: ignore[call-arg]
            get_current_principal=lambda session_token=None: None,
            get_conn=lambda: None,
            settings=load_settings({}),
        )


def test_optional_principal_reads_configured_cookie(
    configured_context: None, member: Principal, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        subscription_service, "get_settings", lambda: load_settings({"SESSION_COOKIE_NAME": "saas_session"})
    )

    assert get_optional_principal(_request_with_cookie(None)) is None
    assert get_optional_principal(_request_with_cookie("saas_session=user-1")) is member
    assert get_optional_principal(_request_with_cookie("session=user-1")) is None
    assert get_optional_principal(_request_with_cookie("saas_session=unknown")) is None
