"""Billing store adapters feeding subscription records to the core."""

from .repository import CURRENT_STATUSES, PostgresSubscriptionRepository, connect

__all__ = [
    "CURRENT_STATUSES",
    "PostgresSubscriptionRepository",
    "connect",
]
