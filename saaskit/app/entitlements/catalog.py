"""Static catalog definitions for subscription plans."""
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .models import PlanKey, UnknownPlanError

PLACEHOLDER_MARKER = "placeholder"


@dataclass(frozen=True)
class PlanDefinition:
    """Describes a subscription tier and its marketing metadata."""

    key: PlanKey
    display_name: str
    monthly_price: Decimal
    features: Tuple[str, ...] = ()
    price_id: str = ""
    popular: bool = False

    @property
    def has_placeholder_price(self) -> bool:
        return not self.price_id or PLACEHOLDER_MARKER in self.price_id


class PlanCatalog:
    """Immutable ordered collection of plans, lowest tier first."""

    def __init__(self, plans: Iterable[PlanDefinition]) -> None:
        ordered = tuple(plans)
        if not ordered:
            raise ValueError("a plan catalog requires at least one plan")

        index: Dict[PlanKey, int] = {}
        for position, plan in enumerate(ordered):
            if plan.key in index:
                raise ValueError(f"Duplicate plan key: {plan.key.value}")
            if plan.monthly_price < 0:
                raise ValueError(f"Plan {plan.key.value} has a negative price")
            index[plan.key] = position

        self._plans = ordered
        self._index = index

    def __iter__(self) -> Iterator[PlanDefinition]:
        return iter(self._plans)

    def __len__(self) -> int:
        return len(self._plans)

    def __contains__(self, plan_key: object) -> bool:
        return plan_key in self._index

    def __repr__(self) -> str:
        keys = ", ".join(plan.key.value for plan in self._plans)
        return f"PlanCatalog([{keys}])"

    @property
    def keys(self) -> Tuple[PlanKey, ...]:
        return tuple(plan.key for plan in self._plans)

    @property
    def lowest(self) -> PlanDefinition:
        return self._plans[0]

    @property
    def highest(self) -> PlanDefinition:
        return self._plans[-1]

    def find(self, plan_key: PlanKey) -> Optional[PlanDefinition]:
        """Return a plan definition or ``None`` when the key is not listed."""

        position = self._index.get(plan_key)
        return None if position is None else self._plans[position]

    def get(self, plan_key: PlanKey) -> PlanDefinition:
        """Return a plan definition, raising if unsupported."""

        plan = self.find(plan_key)
        if plan is None:
            raise UnknownPlanError(f"Unknown plan key: {getattr(plan_key, 'value', plan_key)}")
        return plan

    def order_of(self, plan_key: PlanKey) -> int:
        try:
            return self._index[plan_key]
        except KeyError as exc:
            raise UnknownPlanError(f"Unknown plan key: {getattr(plan_key, 'value', plan_key)}") from exc

    def compare(self, left: PlanKey, right: PlanKey) -> int:
        """Return -1, 0 or 1 depending on the relative tier of two plans."""

        left_order = self.order_of(left)
        right_order = self.order_of(right)
        return (left_order > right_order) - (left_order < right_order)

    def tiers_above(self, plan_key: PlanKey) -> Tuple[PlanKey, ...]:
        position = self.order_of(plan_key)
        return tuple(plan.key for plan in self._plans[position + 1 :])

    def tiers_below(self, plan_key: PlanKey) -> Tuple[PlanKey, ...]:
        position = self.order_of(plan_key)
        return tuple(plan.key for plan in self._plans[:position])

    def with_price_ids(self, price_ids: Mapping[PlanKey, str]) -> "PlanCatalog":
        """Return a copy of the catalog with provider price identifiers attached."""

        return PlanCatalog(
            replace(plan, price_id=price_ids.get(plan.key, plan.price_id)) for plan in self._plans
        )


DEFAULT_PLAN_CATALOG = PlanCatalog(
    (
        PlanDefinition(
            key=PlanKey.BASIC,
            display_name="Basic",
            monthly_price=Decimal("9.00"),
            features=("Basic features", "Email support", "1 user", "5 projects"),
            price_id="price_basic_placeholder",
        ),
        PlanDefinition(
            key=PlanKey.PRO,
            display_name="Pro",
            monthly_price=Decimal("29.00"),
            features=(
                "All basic features",
                "Priority support",
                "5 users",
                "20 projects",
                "Advanced analytics",
            ),
            price_id="price_pro_placeholder",
            popular=True,
        ),
        PlanDefinition(
            key=PlanKey.ENTERPRISE,
            display_name="Enterprise",
            monthly_price=Decimal("99.00"),
            features=(
                "All pro features",
                "24/7 support",
                "Unlimited users",
                "100 projects",
                "Custom integrations",
            ),
            price_id="price_enterprise_placeholder",
        ),
    )
)


def get_plan_definition(
    plan_key: PlanKey, catalog: PlanCatalog = DEFAULT_PLAN_CATALOG
) -> PlanDefinition:
    """Return a plan definition, raising if unsupported."""

    return catalog.get(plan_key)


def is_payment_provider_configured(catalog: PlanCatalog = DEFAULT_PLAN_CATALOG) -> bool:
    """Return whether every plan carries a real provider price identifier."""

    return not any(plan.has_placeholder_price for plan in catalog)
