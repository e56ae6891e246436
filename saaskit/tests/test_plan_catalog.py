from __future__ import annotations

from decimal import Decimal
from typing import List

import pytest

from saaskit.app.entitlements import (
    DEFAULT_PLAN_CATALOG,
    PlanCatalog,
    PlanDefinition,
    PlanKey,
    UnknownPlanError,
    get_plan_definition,
    is_payment_provider_configured,
)


def test_default_catalog_is_ordered_lowest_to_highest() -> None:
    assert DEFAULT_PLAN_CATALOG.keys == (PlanKey.BASIC, PlanKey.PRO, PlanKey.ENTERPRISE)
    assert DEFAULT_PLAN_CATALOG.lowest.key == PlanKey.BASIC
    assert DEFAULT_PLAN_CATALOG.highest.key == PlanKey.ENTERPRISE


def test_plan_definition_lookup() -> None:
    pro = get_plan_definition(PlanKey.PRO)

    assert pro.display_name == "Pro"
    assert pro.monthly_price == Decimal("29.00")
    assert pro.popular is True
    assert "Advanced analytics" in pro.features


def test_compare_reports_relative_order() -> None:
    assert DEFAULT_PLAN_CATALOG.compare(PlanKey.BASIC, PlanKey.PRO) == -1
    assert DEFAULT_PLAN_CATALOG.compare(PlanKey.ENTERPRISE, PlanKey.PRO) == 1
    assert DEFAULT_PLAN_CATALOG.compare(PlanKey.PRO, PlanKey.PRO) == 0


def test_tiers_above_and_below() -> None:
    assert DEFAULT_PLAN_CATALOG.tiers_above(PlanKey.BASIC) == (PlanKey.PRO, PlanKey.ENTERPRISE)
    assert DEFAULT_PLAN_CATALOG.tiers_below(PlanKey.BASIC) == ()
    assert DEFAULT_PLAN_CATALOG.tiers_above(PlanKey.ENTERPRISE) == ()
    assert DEFAULT_PLAN_CATALOG.tiers_below(PlanKey.ENTERPRISE) == (PlanKey.BASIC, PlanKey.PRO)


def test_unknown_plan_is_a_data_error() -> None:
    catalog = PlanCatalog(
        [PlanDefinition(key=PlanKey.BASIC, display_name="Basic", monthly_price=Decimal("9"))]
    )

    assert catalog.find(PlanKey.PRO) is None
    with pytest.raises(UnknownPlanError):
        catalog.get(PlanKey.PRO)
    with pytest.raises(UnknownPlanError):
        catalog.tiers_above(PlanKey.ENTERPRISE)


def test_unknown_plan_message_is_readable() -> None:
    catalog = PlanCatalog(
        [PlanDefinition(key=PlanKey.BASIC, display_name="Basic", monthly_price=Decimal("9"))]
    )

    with pytest.raises(UnknownPlanError) as exc:
        catalog.get(PlanKey.PRO)

    assert str(exc.value) == "Unknown plan key: pro"
    assert isinstance(exc.value, LookupError)
    assert not isinstance(exc.value, KeyError)


@pytest.mark.parametrize(
    "plans, message",
    [
        ([], "at least one plan"),
        (
            [
                PlanDefinition(key=PlanKey.BASIC, display_name="Basic", monthly_price=Decimal("9")),
                PlanDefinition(key=PlanKey.BASIC, display_name="Again", monthly_price=Decimal("19")),
            ],
            "Duplicate plan key",
        ),
        (
            [PlanDefinition(key=PlanKey.PRO, display_name="Pro", monthly_price=Decimal("-1"))],
            "negative price",
        ),
    ],
)
def test_catalog_rejects_invalid_definitions(plans: List[PlanDefinition], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        PlanCatalog(plans)


def test_with_price_ids_returns_new_catalog() -> None:
    configured = DEFAULT_PLAN_CATALOG.with_price_ids(
        {
            PlanKey.BASIC: "price_123",
            PlanKey.PRO: "price_456",
            PlanKey.ENTERPRISE: "price_789",
        }
    )

    assert configured.get(PlanKey.PRO).price_id == "price_456"
    assert DEFAULT_PLAN_CATALOG.get(PlanKey.PRO).price_id == "price_pro_placeholder"
    assert configured.keys == DEFAULT_PLAN_CATALOG.keys
    assert is_payment_provider_configured(configured) is True
    assert is_payment_provider_configured(DEFAULT_PLAN_CATALOG) is False


def test_partial_price_configuration_is_not_configured() -> None:
    configured = DEFAULT_PLAN_CATALOG.with_price_ids({PlanKey.BASIC: "price_123"})

    assert is_payment_provider_configured(configured) is False
