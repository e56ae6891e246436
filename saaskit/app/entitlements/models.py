"""Domain models for subscription state and derived entitlements."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlanKey(str, Enum):
    """Canonical identifiers for subscription plans."""

    BASIC = "basic"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    """Lifecycle state reported by the payment provider."""

    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"


class StatusCategory(str, Enum):
    """Display category a subscription status falls into."""

    HEALTHY = "healthy"
    SCHEDULED_CANCELLATION = "scheduled_cancellation"
    TRIAL = "trial"
    PAYMENT_PROBLEM = "payment_problem"
    TERMINAL = "terminal"


class ManagementAction(str, Enum):
    """Subscription management actions a user may request."""

    CANCEL = "cancel"
    REACTIVATE = "reactivate"
    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"
    MANAGE_BILLING = "manage_billing"


class UnknownPlanError(LookupError):
    """Raised when a plan key is not part of the catalog."""


class UnknownStatusError(ValueError):
    """Raised when a subscription status value is not recognised."""


class Subscription(BaseModel):
    """Read-only snapshot of a user's billing relationship."""

    plan: PlanKey
    status: SubscriptionStatus
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    trial_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    provider_subscription_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_billable(self) -> bool:
        """Return ``True`` while the subscription is active or trialing."""
        return self.status in {SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING}

    @property
    def is_scheduled_to_cancel(self) -> bool:
        # The flag carries no meaning once the provider reports a non-billable status.
        return self.cancel_at_period_end and self.is_billable


class ActionAvailability(BaseModel):
    """Management actions currently valid for a subscription."""

    can_cancel: bool = False
    can_reactivate: bool = False
    upgrade_options: Tuple[PlanKey, ...] = Field(default_factory=tuple)
    downgrade_options: Tuple[PlanKey, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @field_validator("upgrade_options", "downgrade_options")
    @classmethod
    def _unique_options(cls, value: Tuple[PlanKey, ...]) -> Tuple[PlanKey, ...]:
        if len(set(value)) != len(value):
            raise ValueError("plan options must not contain duplicates")
        return value

    @property
    def has_plan_changes(self) -> bool:
        return bool(self.upgrade_options or self.downgrade_options)

    def allowed_actions(self) -> List[ManagementAction]:
        """Return the state-dependent actions in display order."""

        actions: List[ManagementAction] = []
        if self.can_cancel:
            actions.append(ManagementAction.CANCEL)
        if self.can_reactivate:
            actions.append(ManagementAction.REACTIVATE)
        if self.upgrade_options:
            actions.append(ManagementAction.UPGRADE)
        if self.downgrade_options:
            actions.append(ManagementAction.DOWNGRADE)
        return actions


NO_ACTIONS = ActionAvailability()
