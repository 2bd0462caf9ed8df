"""Tests for the subscription pricing engine."""

from __future__ import annotations

from decimal import Decimal

import pytest

from app.pricing_engine.calculator import (
    ADDITIONAL_INSTANCE_FEE,
    LEGACY_POLICY,
    REFERENCE_POLICY,
    PricingCalculator,
    PricingPolicy,
    PricingRequest,
    additional_instances_fee,
    calculate_pricing,
    policy_from_settings,
    support_cost,
)
from app.pricing_engine.contract_terms import (
    ONE_THREE_FIVE_YEAR_TERMS,
    ONE_TWO_THREE_YEAR_TERMS,
)
from app.pricing_engine.errors import (
    InvalidCapacity,
    InvalidContractTerm,
    InvalidInstanceCount,
    PricingError,
)
from app.pricing_engine.tier_table import FLAT_RATE_TIERS, OVERAGE_TIERS


# ──────────────────────────────────────────────────────────────
# WORKED SCENARIOS
# ──────────────────────────────────────────────────────────────

class TestScenarios:
    def test_flat_rate_single_instance(self):
        flat = PricingPolicy(
            name="flat",
            tiers=FLAT_RATE_TIERS,
            contract_terms=ONE_TWO_THREE_YEAR_TERMS,
        )
        result = calculate_pricing(PricingRequest(10, 1, 1), flat)

        assert result.resolved_tier == "1-14 TBs"
        assert result.base_software_price == Decimal("12100")
        assert result.additional_instances_fee == 0
        assert result.total_software_cost == Decimal("12100")
        assert result.support_cost == Decimal("3025")
        assert result.subtotal == Decimal("15125")
        assert result.discount_amount == 0
        assert result.total_annual_cost == Decimal("15125.00")

    def test_legacy_policy_matches_flat_scenario(self):
        result = calculate_pricing(PricingRequest(10, 1, 1), LEGACY_POLICY)
        assert result.total_annual_cost == Decimal("15125")

    def test_overage_with_instances_and_discount(self):
        result = calculate_pricing(PricingRequest(20, 3, 3), REFERENCE_POLICY)

        assert result.resolved_tier == "15-29 TBs"
        assert result.overage_units == 5
        assert result.base_software_price == Decimal("18375")
        assert result.additional_instances_fee == Decimal("5000")
        assert result.total_software_cost == Decimal("23375")
        assert result.support_cost == Decimal("4593.75")
        assert result.subtotal == Decimal("27968.75")
        assert result.discount_rate == Decimal("0.05")
        assert result.discount_amount == Decimal("1398.4375")
        assert result.total_annual_cost == Decimal("26570.3125")

    def test_zero_capacity_rejected(self):
        with pytest.raises(InvalidCapacity):
            calculate_pricing(PricingRequest(0, 1, 1))

    def test_four_year_term_rejected(self):
        with pytest.raises(InvalidContractTerm) as exc:
            calculate_pricing(PricingRequest(20, 1, 4), REFERENCE_POLICY)
        assert exc.value.allowed == (1, 3, 5)


# ──────────────────────────────────────────────────────────────
# FEE COMPONENTS
# ──────────────────────────────────────────────────────────────

class TestAdditionalInstancesFee:
    def test_first_instance_included(self):
        assert additional_instances_fee(1) == 0

    @pytest.mark.parametrize("n", [1, 2, 3, 7, 10, 50])
    def test_linear_in_extra_instances(self, n):
        assert additional_instances_fee(n) == (n - 1) * ADDITIONAL_INSTANCE_FEE

    def test_custom_fee(self):
        assert additional_instances_fee(4, Decimal("100")) == Decimal("300")

    @pytest.mark.parametrize("bad", [0, -2, 1.5, "2", None, False])
    def test_invalid_count(self, bad):
        with pytest.raises(InvalidInstanceCount):
            additional_instances_fee(bad)


class TestSupportCost:
    def test_base_only(self):
        assert support_cost(Decimal("18375"), Decimal("23375"), "base") == Decimal("4593.75")

    def test_total(self):
        assert support_cost(Decimal("18375"), Decimal("23375"), "total") == Decimal("5843.75")

    def test_unknown_basis(self):
        with pytest.raises(ValueError):
            support_cost(Decimal("1"), Decimal("1"), "net")

    def test_basis_only_matters_with_extra_instances(self):
        on_base = calculate_pricing(PricingRequest(20, 1, 1), REFERENCE_POLICY)
        on_total = calculate_pricing(
            PricingRequest(20, 1, 1),
            policy_from_settings("reference", support_basis="total"),
        )
        assert on_base.support_cost == on_total.support_cost

        on_base = calculate_pricing(PricingRequest(20, 2, 1), REFERENCE_POLICY)
        on_total = calculate_pricing(
            PricingRequest(20, 2, 1),
            policy_from_settings("reference", support_basis="total"),
        )
        assert on_total.support_cost - on_base.support_cost == Decimal("625")


# ──────────────────────────────────────────────────────────────
# INVARIANTS
# ──────────────────────────────────────────────────────────────

class TestInvariants:
    @pytest.mark.parametrize("policy", [REFERENCE_POLICY, LEGACY_POLICY])
    def test_one_year_has_no_discount(self, policy):
        for capacity in (1, 20, 100, 400):
            result = calculate_pricing(PricingRequest(capacity, 3, 1), policy)
            assert result.discount_amount == 0
            assert result.total_annual_cost == result.subtotal

    def test_idempotent(self):
        req = PricingRequest(137, 4, 5)
        assert calculate_pricing(req) == calculate_pricing(req)
        assert repr(calculate_pricing(req)) == repr(calculate_pricing(req))

    @pytest.mark.parametrize("policy", [REFERENCE_POLICY, LEGACY_POLICY])
    def test_monotonic_in_capacity(self, policy):
        years = policy.contract_terms[-1].years
        previous = Decimal("0")
        for capacity in range(1, 451):
            total = calculate_pricing(PricingRequest(capacity, 2, years), policy).total_annual_cost
            assert total >= previous, capacity
            previous = total

    def test_flat_rate_ignores_capacity_within_tier(self):
        low = calculate_pricing(PricingRequest(15, 1, 1), LEGACY_POLICY)
        high = calculate_pricing(PricingRequest(29, 1, 1), LEGACY_POLICY)
        assert low.base_software_price == high.base_software_price
        assert high.overage_units == 14

    def test_overage_starts_at_tier_minimum(self):
        result = calculate_pricing(PricingRequest(15, 1, 1))
        assert result.overage_units == 0
        assert result.base_software_price == Decimal("16500")

    def test_top_tier_overage(self):
        result = calculate_pricing(PricingRequest(311, 1, 1))
        assert result.resolved_tier == "300+ TBs"
        assert result.overage_units == 10
        assert result.base_software_price == Decimal("82500") + 10 * Decimal("150")

    def test_breakdown_is_self_consistent(self):
        r = calculate_pricing(PricingRequest(88, 6, 3))
        assert r.total_software_cost == r.base_software_price + r.additional_instances_fee
        assert r.subtotal == r.total_software_cost + r.support_cost
        assert r.discount_amount == r.subtotal * r.discount_rate
        assert r.total_annual_cost == r.subtotal - r.discount_amount


# ──────────────────────────────────────────────────────────────
# INPUT ERRORS
# ──────────────────────────────────────────────────────────────

class TestInputErrors:
    @pytest.mark.parametrize("bad", [0, -5, 2.5])
    def test_bad_capacity(self, bad):
        with pytest.raises(InvalidCapacity):
            calculate_pricing(PricingRequest(bad, 1, 1))

    @pytest.mark.parametrize("bad", [0, -1, 1.5])
    def test_bad_instance_count(self, bad):
        with pytest.raises(InvalidInstanceCount):
            calculate_pricing(PricingRequest(10, bad, 1))

    def test_unknown_term_does_not_default_to_zero(self):
        with pytest.raises(InvalidContractTerm):
            calculate_pricing(PricingRequest(10, 1, 2), REFERENCE_POLICY)

    def test_all_errors_share_base_class(self):
        for req in (PricingRequest(0, 1, 1), PricingRequest(1, 0, 1), PricingRequest(1, 1, 9)):
            with pytest.raises(PricingError):
                calculate_pricing(req)


# ──────────────────────────────────────────────────────────────
# POLICY CONFIGURATION
# ──────────────────────────────────────────────────────────────

class TestPolicies:
    def test_reference_preset(self):
        assert REFERENCE_POLICY.tiers is OVERAGE_TIERS
        assert REFERENCE_POLICY.contract_terms is ONE_THREE_FIVE_YEAR_TERMS
        assert REFERENCE_POLICY.support_basis == "base"

    def test_legacy_preset(self):
        assert LEGACY_POLICY.tiers is FLAT_RATE_TIERS
        assert LEGACY_POLICY.contract_terms is ONE_TWO_THREE_YEAR_TERMS
        assert LEGACY_POLICY.support_basis == "total"

    def test_from_settings_without_overrides_returns_preset(self):
        assert policy_from_settings("legacy") is LEGACY_POLICY

    def test_from_settings_overrides(self):
        policy = policy_from_settings("legacy", contract_term_set="1-3-5")
        assert policy.tiers is FLAT_RATE_TIERS
        assert policy.contract_terms is ONE_THREE_FIVE_YEAR_TERMS
        assert policy.support_basis == "total"

    def test_unknown_policy(self):
        with pytest.raises(ValueError, match="Unknown pricing policy"):
            policy_from_settings("premium")

    def test_bad_support_basis(self):
        with pytest.raises(ValueError, match="support_basis"):
            policy_from_settings("reference", support_basis="net")

    def test_bad_support_rate(self):
        with pytest.raises(ValueError):
            PricingPolicy("x", OVERAGE_TIERS, ONE_TWO_THREE_YEAR_TERMS, support_rate=Decimal("1.5"))


class TestPricingCalculator:
    def test_defaults(self):
        calc = PricingCalculator()
        result = calc.calculate(10)
        assert result.instance_count == 1
        assert result.contract_years == 1
        assert result.base_software_price == Decimal("12100") + 9 * Decimal("300")

    def test_bound_policy(self):
        calc = PricingCalculator(LEGACY_POLICY)
        assert calc.calculate(10, 1, 2).discount_rate == Decimal("0.05")
        assert calc.resolve_tier(300).id == "150-300 TBs"
