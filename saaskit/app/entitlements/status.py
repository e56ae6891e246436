"""Classification of subscription statuses into display categories."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union

from .models import StatusCategory, SubscriptionStatus, UnknownStatusError

NEXT_BILLING = "Next Billing"
EXPIRES_ON = "Expires On"
TRIAL_ENDS = "Trial Ends"
PAYMENT_DUE = "Payment Due"

_BASE_CATEGORIES: Dict[SubscriptionStatus, StatusCategory] = {
    SubscriptionStatus.ACTIVE: StatusCategory.HEALTHY,
    SubscriptionStatus.TRIALING: StatusCategory.TRIAL,
    SubscriptionStatus.PAST_DUE: StatusCategory.PAYMENT_PROBLEM,
    SubscriptionStatus.UNPAID: StatusCategory.PAYMENT_PROBLEM,
    SubscriptionStatus.INCOMPLETE: StatusCategory.PAYMENT_PROBLEM,
    SubscriptionStatus.CANCELED: StatusCategory.TERMINAL,
    SubscriptionStatus.INCOMPLETE_EXPIRED: StatusCategory.TERMINAL,
}

_BILLING_DATE_LABELS: Dict[StatusCategory, str] = {
    StatusCategory.HEALTHY: NEXT_BILLING,
    StatusCategory.SCHEDULED_CANCELLATION: EXPIRES_ON,
    StatusCategory.TRIAL: TRIAL_ENDS,
    StatusCategory.PAYMENT_PROBLEM: PAYMENT_DUE,
    StatusCategory.TERMINAL: EXPIRES_ON,
}


@dataclass(frozen=True)
class StatusClassification:
    """Outcome of classifying a subscription status."""

    status: SubscriptionStatus
    category: StatusCategory
    billing_date_label: str

    @property
    def is_healthy(self) -> bool:
        return self.category == StatusCategory.HEALTHY

    @property
    def needs_attention(self) -> bool:
        return self.category in {
            StatusCategory.SCHEDULED_CANCELLATION,
            StatusCategory.PAYMENT_PROBLEM,
        }


def coerce_status(value: Union[SubscriptionStatus, str]) -> SubscriptionStatus:
    """Return ``value`` as a :class:`SubscriptionStatus`, raising if unknown."""

    if isinstance(value, SubscriptionStatus):
        return value
    try:
        return SubscriptionStatus(value)
    except ValueError as exc:
        raise UnknownStatusError(f"Unknown subscription status: {value!r}") from exc


def classify_status(
    status: Union[SubscriptionStatus, str],
    cancel_at_period_end: bool = False,
) -> StatusClassification:
    """Map a status and cancellation flag to a display category and label.

    A scheduled cancellation outranks the plain ``active``/``trialing``
    categories. For every other status the flag is ignored, since a
    canceled or failing subscription cannot be "scheduled" to cancel.
    """

    resolved = coerce_status(status)
    category = _BASE_CATEGORIES[resolved]
    if cancel_at_period_end and category in {StatusCategory.HEALTHY, StatusCategory.TRIAL}:
        category = StatusCategory.SCHEDULED_CANCELLATION

    return StatusClassification(
        status=resolved,
        category=category,
        billing_date_label=_BILLING_DATE_LABELS[category],
    )
