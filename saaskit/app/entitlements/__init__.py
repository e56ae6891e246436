"""Plan catalog, status classification and management action resolution."""

from .actions import ensure_action_allowed, resolve_action_availability
from .catalog import (
    DEFAULT_PLAN_CATALOG,
    PlanCatalog,
    PlanDefinition,
    get_plan_definition,
    is_payment_provider_configured,
)
from .models import (
    NO_ACTIONS,
    ActionAvailability,
    ManagementAction,
    PlanKey,
    StatusCategory,
    Subscription,
    SubscriptionStatus,
    UnknownPlanError,
    UnknownStatusError,
)
from .status import StatusClassification, classify_status, coerce_status

__all__ = [
    "DEFAULT_PLAN_CATALOG",
    "NO_ACTIONS",
    "ActionAvailability",
    "ManagementAction",
    "PlanCatalog",
    "PlanDefinition",
    "PlanKey",
    "StatusCategory",
    "StatusClassification",
    "Subscription",
    "SubscriptionStatus",
    "UnknownPlanError",
    "UnknownStatusError",
    "classify_status",
    "coerce_status",
    "ensure_action_allowed",
    "get_plan_definition",
    "is_payment_provider_configured",
    "resolve_action_availability",
]
