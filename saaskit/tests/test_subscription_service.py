from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterator, Optional

import pytest

from saaskit.app.config import load_settings
from saaskit.app.entitlements import (
    DEFAULT_PLAN_CATALOG,
    ManagementAction,
    PlanCatalog,
    PlanDefinition,
    PlanKey,
    Subscription,
    SubscriptionStatus,
)
from saaskit.app.feature_gates import ActionNotAvailableError
from saaskit.app.services import subscriptions as subscription_service


class InMemorySubscriptionSource:
    def __init__(self, records: Optional[Dict[str, Subscription]] = None) -> None:
        self.records = records or {}

    def get_current_subscription(self, user_id: str) -> Optional[Subscription]:
        return self.records.get(user_id)


@pytest.fixture(autouse=True)
def clear_caches() -> Iterator[None]:
    subscription_service.get_settings.cache_clear()
    subscription_service.get_plan_catalog.cache_clear()
    yield
    subscription_service.get_settings.cache_clear()
    subscription_service.get_plan_catalog.cache_clear()


def test_describe_missing_subscription() -> None:
    state = subscription_service.describe_subscription(None, DEFAULT_PLAN_CATALOG)

    assert state.has_subscription is False
    assert state.view is None
    assert state.availability.allowed_actions() == []


def test_load_state_for_trialing_basic() -> None:
    source = InMemorySubscriptionSource(
        {"user-1": Subscription(plan=PlanKey.BASIC, status=SubscriptionStatus.TRIALING)}
    )

    state = subscription_service.load_subscription_state("user-1", source=source, catalog=DEFAULT_PLAN_CATALOG)

    assert state.has_subscription is True
    assert state.view is not None
    assert state.view.billing_date_label == "Trial Ends"
    assert state.availability.upgrade_options == (PlanKey.PRO, PlanKey.ENTERPRISE)


def test_catalog_override_changes_price() -> None:
    catalog = PlanCatalog(
        [
            PlanDefinition(key=PlanKey.BASIC, display_name="Starter", monthly_price=Decimal("5")),
            PlanDefinition(key=PlanKey.PRO, display_name="Pro", monthly_price=Decimal("25")),
        ]
    )

    state = subscription_service.describe_subscription(
        Subscription(plan=PlanKey.BASIC, status=SubscriptionStatus.ACTIVE), catalog
    )

    assert state.view is not None
    assert state.view.price == "$5.00"
    assert state.availability.upgrade_options == (PlanKey.PRO,)


def test_check_action_denies_cancel_for_payment_problem() -> None:
    source = InMemorySubscriptionSource(
        {"user-1": Subscription(plan=PlanKey.PRO, status=SubscriptionStatus.UNPAID)}
    )

    with pytest.raises(ActionNotAvailableError):
        subscription_service.check_subscription_action(
            "user-1", ManagementAction.CANCEL, source=source, catalog=DEFAULT_PLAN_CATALOG
        )

    state = subscription_service.check_subscription_action(
        "user-1", ManagementAction.REACTIVATE, source=source, catalog=DEFAULT_PLAN_CATALOG
    )
    assert state.availability.can_reactivate is True


def test_plan_catalog_applies_configured_price_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = load_settings(
        {
            "STRIPE_BASIC_PRICE_ID": "price_basic_live",
            "STRIPE_PRO_PRICE_ID": "price_pro_live",
            "STRIPE_ENTERPRISE_PRICE_ID": "price_enterprise_live",
        }
    )
    monkeypatch.setattr(subscription_service, "get_settings", lambda: settings)

    catalog = subscription_service.get_plan_catalog()

    assert catalog.get(PlanKey.PRO).price_id == "price_pro_live"
    assert catalog.get(PlanKey.PRO).monthly_price == Decimal("29.00")


def test_plan_catalog_warns_about_placeholders(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(subscription_service, "get_settings", lambda: load_settings({}))

    with caplog.at_level(logging.WARNING, logger="billing"):
        catalog = subscription_service.get_plan_catalog()

    assert catalog.get(PlanKey.BASIC).has_placeholder_price is True
    assert "placeholders" in caplog.text
