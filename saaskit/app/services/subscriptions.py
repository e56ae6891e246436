"""Application wiring for subscription state and display content."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol

from ..billing.repository import PostgresSubscriptionRepository
from ..config import Settings, load_settings
from ..entitlements import (
    DEFAULT_PLAN_CATALOG,
    ActionAvailability,
    ManagementAction,
    PlanCatalog,
    PlanKey,
    Subscription,
    ensure_action_allowed,
    is_payment_provider_configured,
    resolve_action_availability,
)
from ..presentation import SubscriptionView, build_subscription_view

logger = logging.getLogger("billing")


class SubscriptionSource(Protocol):
    """Provides the current subscription record for a user."""

    def get_current_subscription(self, user_id: str) -> Optional[Subscription]:
        ...


@dataclass(frozen=True)
class SubscriptionState:
    """Resolved subscription record together with its derived decisions."""

    subscription: Optional[Subscription]
    availability: ActionAvailability
    view: Optional[SubscriptionView]

    @property
    def has_subscription(self) -> bool:
        return self.subscription is not None


_configured_settings: Optional[Settings] = None


def configure_settings(settings: Optional[Settings]) -> None:
    """Pin the settings used by the cached getters, or ``None`` to reload from the environment."""

    global _configured_settings

    _configured_settings = settings
    get_settings.cache_clear()
    get_plan_catalog.cache_clear()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return _configured_settings or load_settings()


@lru_cache(maxsize=1)
def get_plan_catalog() -> PlanCatalog:
    catalog = DEFAULT_PLAN_CATALOG.with_price_ids(get_settings().price_ids)
    if not is_payment_provider_configured(catalog):
        logger.warning("Payment provider price ids are placeholders; checkout is not configured")
    return catalog


@lru_cache(maxsize=1)
def get_subscription_source() -> SubscriptionSource:
    return PostgresSubscriptionRepository()


def describe_subscription(
    subscription: Optional[Subscription],
    catalog: Optional[PlanCatalog] = None,
) -> SubscriptionState:
    """Derive availability and display content for a subscription record."""

    resolved_catalog = catalog or get_plan_catalog()
    return SubscriptionState(
        subscription=subscription,
        availability=resolve_action_availability(subscription, resolved_catalog),
        view=build_subscription_view(subscription, resolved_catalog),
    )


def load_subscription_state(
    user_id: str,
    *,
    source: Optional[SubscriptionSource] = None,
    catalog: Optional[PlanCatalog] = None,
) -> SubscriptionState:
    """Fetch the user's current subscription and describe it."""

    subscription = (source or get_subscription_source()).get_current_subscription(user_id)
    logger.debug(
        "Loaded subscription user=%s plan=%s status=%s",
        user_id,
        subscription.plan.value if subscription else None,
        subscription.status.value if subscription else None,
    )
    return describe_subscription(subscription, catalog)


def check_subscription_action(
    user_id: str,
    action: ManagementAction,
    *,
    target_plan: Optional[PlanKey] = None,
    source: Optional[SubscriptionSource] = None,
    catalog: Optional[PlanCatalog] = None,
) -> SubscriptionState:
    """Ensure ``action`` is currently valid for the user's subscription."""

    state = load_subscription_state(user_id, source=source, catalog=catalog)
    ensure_action_allowed(
        state.subscription,
        action,
        target_plan=target_plan,
        catalog=catalog or get_plan_catalog(),
    )
    return state


__all__ = [
    "SubscriptionSource",
    "SubscriptionState",
    "check_subscription_action",
    "configure_settings",
    "describe_subscription",
    "get_plan_catalog",
    "get_settings",
    "get_subscription_source",
    "load_subscription_state",
]
