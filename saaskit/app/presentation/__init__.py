"""Presentation adapter for subscription display content."""

from .formatting import (
    CANCELLATION_NOTICE,
    PAYMENT_PROBLEM_NOTICE,
    StatusBadge,
    format_date,
    format_plan_name,
    format_price,
    notices_for,
    status_badge,
)
from .view import SubscriptionView, build_subscription_view

__all__ = [
    "CANCELLATION_NOTICE",
    "PAYMENT_PROBLEM_NOTICE",
    "StatusBadge",
    "SubscriptionView",
    "build_subscription_view",
    "format_date",
    "format_plan_name",
    "format_price",
    "notices_for",
    "status_badge",
]
