"""Assembles the "current subscription" view from resolved state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..entitlements.actions import resolve_action_availability
from ..entitlements.catalog import DEFAULT_PLAN_CATALOG, PlanCatalog
from ..entitlements.models import ActionAvailability, Subscription, SubscriptionStatus
from ..entitlements.status import StatusClassification, classify_status
from .formatting import StatusBadge, format_date, format_plan_name, format_price, notices_for, status_badge


@dataclass(frozen=True)
class SubscriptionView:
    """Display directives for the current subscription section."""

    plan_title: str
    price: str
    classification: StatusClassification
    badge: StatusBadge
    billing_date_label: str
    billing_date: Optional[str]
    trial_end: Optional[str]
    availability: ActionAvailability
    notices: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "plan_title": self.plan_title,
            "price": self.price,
            "status": self.classification.status.value,
            "category": self.classification.category.value,
            "badge": self.badge.to_dict(),
            "billing_date_label": self.billing_date_label,
            "billing_date": self.billing_date,
            "trial_end": self.trial_end,
            "notices": list(self.notices),
        }


def build_subscription_view(
    subscription: Optional[Subscription],
    catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
) -> Optional[SubscriptionView]:
    """Return the view for ``subscription`` or ``None`` when there is none."""

    if subscription is None:
        return None

    plan = catalog.get(subscription.plan)
    classification = classify_status(subscription.status, subscription.cancel_at_period_end)
    availability = resolve_action_availability(subscription, catalog)

    trial_end = None
    if classification.status == SubscriptionStatus.TRIALING:
        trial_end = format_date(subscription.trial_end)

    return SubscriptionView(
        plan_title=format_plan_name(plan.key, catalog),
        price=format_price(plan.monthly_price),
        classification=classification,
        badge=status_badge(classification),
        billing_date_label=classification.billing_date_label,
        billing_date=format_date(subscription.current_period_end),
        trial_end=trial_end,
        availability=availability,
        notices=notices_for(classification),
    )
