"""API schemas for subscription and admin permission endpoints."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..entitlements import ActionAvailability, ManagementAction, PlanCatalog, PlanKey
from ..presentation import StatusBadge, SubscriptionView, format_plan_name, format_price


class AvailabilityResponse(BaseModel):
    can_cancel: bool = Field(alias="canCancel")
    can_reactivate: bool = Field(alias="canReactivate")
    upgrade_options: List[PlanKey] = Field(alias="upgradeOptions")
    downgrade_options: List[PlanKey] = Field(alias="downgradeOptions")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_availability(cls, availability: ActionAvailability) -> "AvailabilityResponse":
        return cls(
            can_cancel=availability.can_cancel,
            can_reactivate=availability.can_reactivate,
            upgrade_options=list(availability.upgrade_options),
            downgrade_options=list(availability.downgrade_options),
        )


class StatusBadgeResponse(BaseModel):
    text: str
    icon: str
    variant: str
    description: str

    @classmethod
    def from_badge(cls, badge: StatusBadge) -> "StatusBadgeResponse":
        return cls(**badge.to_dict())


class SubscriptionDetailsResponse(BaseModel):
    plan_title: str = Field(alias="planTitle")
    price: str
    status: str
    category: str
    badge: StatusBadgeResponse
    billing_date_label: str = Field(alias="billingDateLabel")
    billing_date: Optional[str] = Field(alias="billingDate", default=None)
    trial_end: Optional[str] = Field(alias="trialEnd", default=None)
    notices: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_view(cls, view: SubscriptionView) -> "SubscriptionDetailsResponse":
        return cls(
            plan_title=view.plan_title,
            price=view.price,
            status=view.classification.status.value,
            category=view.classification.category.value,
            badge=StatusBadgeResponse.from_badge(view.badge),
            billing_date_label=view.billing_date_label,
            billing_date=view.billing_date,
            trial_end=view.trial_end,
            notices=list(view.notices),
        )


class SubscriptionResponse(BaseModel):
    subscription: Optional[SubscriptionDetailsResponse] = None
    availability: AvailabilityResponse

    model_config = ConfigDict(populate_by_name=True)


class ActionCheckRequest(BaseModel):
    target_plan: Optional[PlanKey] = Field(alias="targetPlan", default=None)

    model_config = ConfigDict(populate_by_name=True)


class ActionCheckResponse(BaseModel):
    action: ManagementAction
    allowed: bool
    target_plan: Optional[PlanKey] = Field(alias="targetPlan", default=None)

    model_config = ConfigDict(populate_by_name=True)


class PlanResponse(BaseModel):
    id: PlanKey
    title: str
    price: str
    features: List[str]
    popular: bool = False


class PlanListResponse(BaseModel):
    plans: List[PlanResponse]
    checkout_configured: bool = Field(alias="checkoutConfigured")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_catalog(cls, catalog: PlanCatalog, *, checkout_configured: bool) -> "PlanListResponse":
        return cls(
            plans=[
                PlanResponse(
                    id=plan.key,
                    title=format_plan_name(plan.key, catalog),
                    price=format_price(plan.monthly_price),
                    features=list(plan.features),
                    popular=plan.popular,
                )
                for plan in catalog
            ],
            checkout_configured=checkout_configured,
        )


class PermissionSummaryResponse(BaseModel):
    user_id: Optional[str] = Field(alias="userId", default=None)
    role: str
    permissions: Dict[str, bool]

    model_config = ConfigDict(populate_by_name=True)
