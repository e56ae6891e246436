"""Resolution of the management actions valid for a subscription."""
from __future__ import annotations

import logging
from typing import Optional

from ..feature_gates.exceptions import ActionNotAvailableError
from .catalog import DEFAULT_PLAN_CATALOG, PlanCatalog
from .models import (
    NO_ACTIONS,
    ActionAvailability,
    ManagementAction,
    PlanKey,
    Subscription,
    SubscriptionStatus,
)
from .status import coerce_status

logger = logging.getLogger(__name__)

_RECOVERABLE_STATUSES = {
    SubscriptionStatus.CANCELED,
    SubscriptionStatus.PAST_DUE,
    SubscriptionStatus.UNPAID,
}


def resolve_action_availability(
    subscription: Optional[Subscription],
    catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
) -> ActionAvailability:
    """Compute which management actions apply to ``subscription``.

    Plan changes are only offered while the subscription is billable.
    Canceled and payment-problem subscriptions converge on reactivation,
    and subscriptions whose setup never completed expose nothing.
    """

    if subscription is None:
        return NO_ACTIONS

    status = coerce_status(subscription.status)
    # Validates the plan even for statuses that never list plan options.
    catalog.order_of(subscription.plan)

    if status in {SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING}:
        scheduled = subscription.cancel_at_period_end
        return ActionAvailability(
            can_cancel=not scheduled,
            can_reactivate=scheduled,
            upgrade_options=catalog.tiers_above(subscription.plan),
            downgrade_options=catalog.tiers_below(subscription.plan),
        )

    if status in _RECOVERABLE_STATUSES:
        return ActionAvailability(can_reactivate=True)

    return NO_ACTIONS


def ensure_action_allowed(
    subscription: Optional[Subscription],
    action: ManagementAction,
    *,
    target_plan: Optional[PlanKey] = None,
    catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
) -> ActionAvailability:
    """Raise :class:`ActionNotAvailableError` unless ``action`` is currently valid."""

    availability = resolve_action_availability(subscription, catalog)
    status = subscription.status.value if subscription else "none"

    if action == ManagementAction.MANAGE_BILLING:
        allowed = subscription is not None
    elif action == ManagementAction.CANCEL:
        allowed = availability.can_cancel
    elif action == ManagementAction.REACTIVATE:
        allowed = availability.can_reactivate
    elif action in {ManagementAction.UPGRADE, ManagementAction.DOWNGRADE}:
        if target_plan is None:
            raise ValueError(f"{action.value} requires a target plan")
        options = (
            availability.upgrade_options
            if action == ManagementAction.UPGRADE
            else availability.downgrade_options
        )
        allowed = target_plan in options
    else:  # pragma: no cover - exhaustive over ManagementAction
        raise ValueError(f"Unsupported management action: {action}")

    if not allowed:
        logger.info(
            "Rejected subscription action %s status=%s target=%s",
            action.value,
            status,
            target_plan.value if target_plan else None,
        )
        raise ActionNotAvailableError.for_action(action.value, status, target_plan)
    return availability
