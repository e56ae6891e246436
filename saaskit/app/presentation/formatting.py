"""Formatting helpers turning resolved subscription state into display strings."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Tuple, Union

from ..entitlements.catalog import DEFAULT_PLAN_CATALOG, PlanCatalog
from ..entitlements.models import PlanKey, StatusCategory, SubscriptionStatus
from ..entitlements.status import StatusClassification

CURRENCY_SYMBOL = "$"

# Month names are fixed so output never depends on the process locale.
_MONTH_NAMES: Tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

CHECKMARK = "✓"
CLOCK = "⏱"
WARNING = "⚠"
CROSS = "✕"

_BADGE_STYLES: Dict[StatusCategory, Tuple[str, str]] = {
    StatusCategory.HEALTHY: (CHECKMARK, "default"),
    StatusCategory.TRIAL: (CLOCK, "secondary"),
    StatusCategory.PAYMENT_PROBLEM: (WARNING, "destructive"),
    StatusCategory.TERMINAL: (CROSS, "outline"),
}

_STATUS_TEXT: Dict[SubscriptionStatus, str] = {
    SubscriptionStatus.ACTIVE: "Active",
    SubscriptionStatus.TRIALING: "Trial",
    SubscriptionStatus.PAST_DUE: "Past Due",
    SubscriptionStatus.CANCELED: "Canceled",
    SubscriptionStatus.UNPAID: "Unpaid",
    SubscriptionStatus.INCOMPLETE: "Incomplete",
    SubscriptionStatus.INCOMPLETE_EXPIRED: "Expired",
}

_STATUS_DESCRIPTIONS: Dict[SubscriptionStatus, str] = {
    SubscriptionStatus.ACTIVE: "Your subscription is active and current",
    SubscriptionStatus.TRIALING: "You are currently in a trial period",
    SubscriptionStatus.PAST_DUE: "Your payment is overdue, please update your payment method",
    SubscriptionStatus.CANCELED: "Your subscription has been canceled",
    SubscriptionStatus.UNPAID: "Your subscription is unpaid, please complete payment",
    SubscriptionStatus.INCOMPLETE: "Your subscription setup is incomplete",
    SubscriptionStatus.INCOMPLETE_EXPIRED: "Your subscription setup has expired",
}

CANCELLATION_NOTICE = "Your subscription will be canceled at the end of the current billing period."
PAYMENT_PROBLEM_NOTICE = "Your payment is past due. Please update your payment method to continue service."


@dataclass(frozen=True)
class StatusBadge:
    """Badge text, icon and visual variant for a subscription status."""

    text: str
    icon: str
    variant: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "text": self.text,
            "icon": self.icon,
            "variant": self.variant,
            "description": self.description,
        }


def format_plan_name(
    plan: Union[PlanKey, str],
    catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
) -> str:
    """Return the human readable title for a plan, e.g. ``"Pro Plan"``."""

    raw = str(getattr(plan, "value", plan)).strip()
    try:
        definition = catalog.find(PlanKey(raw.lower()))
    except ValueError:
        definition = None
    if definition is not None:
        return f"{definition.display_name} Plan"
    return f"{raw[:1].upper()}{raw[1:]} Plan"


def format_price(amount: Union[Decimal, int, float, str]) -> str:
    """Format a monthly price with the currency symbol and two decimals."""

    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{CURRENCY_SYMBOL}{value}"


def format_date(value: Optional[datetime]) -> Optional[str]:
    """Return a long-form UTC date such as ``"January 15, 2025"``."""

    if value is None:
        return None
    moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return f"{_MONTH_NAMES[moment.month - 1]} {moment.day}, {moment.year}"


def status_badge(classification: StatusClassification) -> StatusBadge:
    """Render the badge for a classified status.

    A scheduled cancellation keeps the badge of the underlying status so the
    badge and the cancellation notice do not repeat each other.
    """

    category = classification.category
    if category == StatusCategory.SCHEDULED_CANCELLATION:
        category = (
            StatusCategory.TRIAL
            if classification.status == SubscriptionStatus.TRIALING
            else StatusCategory.HEALTHY
        )
    icon, variant = _BADGE_STYLES[category]
    return StatusBadge(
        text=_STATUS_TEXT[classification.status],
        icon=icon,
        variant=variant,
        description=_STATUS_DESCRIPTIONS[classification.status],
    )


def notices_for(classification: StatusClassification) -> List[str]:
    """Return the warnings to show alongside the subscription details."""

    notices: List[str] = []
    if classification.category == StatusCategory.SCHEDULED_CANCELLATION:
        notices.append(CANCELLATION_NOTICE)
    if classification.category == StatusCategory.PAYMENT_PROBLEM:
        notices.append(PAYMENT_PROBLEM_NOTICE)
    return notices
