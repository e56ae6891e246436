"""API routes exposing subscription state and management affordances."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ..entitlements import ManagementAction, is_payment_provider_configured
from ..feature_gates import AccessDeniedError, require_principal
from ..schemas.subscriptions import (
    ActionCheckRequest,
    ActionCheckResponse,
    AvailabilityResponse,
    PlanListResponse,
    SubscriptionDetailsResponse,
    SubscriptionResponse,
)
from ..services import subscriptions as subscription_service
from .dependencies import get_optional_principal

router = APIRouter(prefix="/api", tags=["subscriptions"])


def _authenticated_user_id(current_principal) -> str:
    try:
        principal = require_principal(current_principal)
    except AccessDeniedError as exc:
        raise exc.to_http_exception() from exc
    if not principal.user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return principal.user_id


@router.get("/subscription", response_model=SubscriptionResponse)
def get_subscription(*, current_principal=Depends(get_optional_principal)) -> SubscriptionResponse:
    """Return the caller's subscription details and available actions."""

    user_id = _authenticated_user_id(current_principal)
    state = subscription_service.load_subscription_state(user_id)
    details = SubscriptionDetailsResponse.from_view(state.view) if state.view else None
    return SubscriptionResponse(
        subscription=details,
        availability=AvailabilityResponse.from_availability(state.availability),
    )


@router.post("/subscription/actions/{action}", response_model=ActionCheckResponse)
def check_action(
    action: ManagementAction,
    payload: Optional[ActionCheckRequest] = None,
    *,
    current_principal=Depends(get_optional_principal),
) -> ActionCheckResponse:
    """Confirm a management action is valid before handing off to the provider."""

    user_id = _authenticated_user_id(current_principal)
    target_plan = payload.target_plan if payload else None
    if action in {ManagementAction.UPGRADE, ManagementAction.DOWNGRADE} and target_plan is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{action.value} requires a target plan",
        )

    try:
        subscription_service.check_subscription_action(user_id, action, target_plan=target_plan)
    except AccessDeniedError as exc:
        raise exc.to_http_exception() from exc

    return ActionCheckResponse(action=action, allowed=True, target_plan=target_plan)


@router.get("/plans", response_model=PlanListResponse)
def list_plans() -> PlanListResponse:
    catalog = subscription_service.get_plan_catalog()
    return PlanListResponse.from_catalog(
        catalog,
        checkout_configured=is_payment_provider_configured(catalog),
    )
