"""
Annual subscription pricing: turns (capacity, instances, contract length) into
an itemized breakdown.

Evaluation order is fixed; each step feeds the next:

  1. resolve tier from capacity
  2. base software price = tier base + overage TB * tier rate
  3. additional instances fee (first instance included)
  4. total software cost = base + instance fee
  5. support = support rate * (base price | total software cost)
  6. subtotal = total software cost + support
  7. discount rate from the contract term set
  8. discount = subtotal * rate
  9. total annual cost = subtotal - discount

Flat-rate pricing is the same path with a zero overage rate.  All amounts are
unrounded Decimals; rounding to cents belongs to the presentation layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from app.pricing_engine.contract_terms import (
    ContractTerm,
    ONE_THREE_FIVE_YEAR_TERMS,
    ONE_TWO_THREE_YEAR_TERMS,
    get_term_set,
    resolve_discount_rate,
    validate_term_set,
)
from app.pricing_engine.errors import InvalidInstanceCount, is_whole_number
from app.pricing_engine.tier_table import (
    FLAT_RATE_TIERS,
    OVERAGE_TIERS,
    TierSpec,
    resolve_tier,
    validate_tier_table,
)

logger = logging.getLogger(__name__)

SUPPORT_COST_PERCENTAGE = Decimal("0.25")
ADDITIONAL_INSTANCE_FEE = Decimal("2500")

SUPPORT_ON_BASE = "base"    # support billed on base software price only
SUPPORT_ON_TOTAL = "total"  # support billed on base + instance fees
SUPPORT_BASES = (SUPPORT_ON_BASE, SUPPORT_ON_TOTAL)


# ──────────────────────────────────────────────────────────────────
# DATA CLASSES
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PricingPolicy:
    """Everything the engine is configured with besides the request."""
    name: str
    tiers: tuple[TierSpec, ...]
    contract_terms: tuple[ContractTerm, ...]
    support_basis: str = SUPPORT_ON_BASE
    support_rate: Decimal = SUPPORT_COST_PERCENTAGE
    additional_instance_fee: Decimal = ADDITIONAL_INSTANCE_FEE

    def __post_init__(self):
        if self.support_basis not in SUPPORT_BASES:
            raise ValueError(
                f"support_basis must be one of {SUPPORT_BASES}, got {self.support_basis!r}"
            )
        if not (Decimal("0") <= self.support_rate < Decimal("1")):
            raise ValueError(f"support_rate must be in [0, 1), got {self.support_rate}")
        if self.additional_instance_fee < 0:
            raise ValueError("additional_instance_fee cannot be negative")
        validate_tier_table(self.tiers)
        validate_term_set(self.contract_terms)


@dataclass(frozen=True)
class PricingRequest:
    capacity_tb: int
    instance_count: int = 1
    contract_years: int = 1


@dataclass(frozen=True)
class PricingBreakdown:
    """Itemized result of one computation."""
    resolved_tier: str
    capacity_tb: int
    instance_count: int
    contract_years: int
    overage_units: int
    base_software_price: Decimal
    additional_instances_fee: Decimal
    total_software_cost: Decimal
    support_cost: Decimal
    subtotal: Decimal
    discount_rate: Decimal
    discount_amount: Decimal
    total_annual_cost: Decimal

    def as_dict(self) -> dict:
        return {
            "resolved_tier": self.resolved_tier,
            "capacity_tb": self.capacity_tb,
            "instance_count": self.instance_count,
            "contract_years": self.contract_years,
            "overage_units": self.overage_units,
            "base_software_price": self.base_software_price,
            "additional_instances_fee": self.additional_instances_fee,
            "total_software_cost": self.total_software_cost,
            "support_cost": self.support_cost,
            "subtotal": self.subtotal,
            "discount_rate": self.discount_rate,
            "discount_amount": self.discount_amount,
            "total_annual_cost": self.total_annual_cost,
        }


# ──────────────────────────────────────────────────────────────────
# POLICIES
# ──────────────────────────────────────────────────────────────────

# Capacity-aware overage, support on base price only, 1/3/5-year terms.
REFERENCE_POLICY = PricingPolicy(
    name="reference",
    tiers=OVERAGE_TIERS,
    contract_terms=ONE_THREE_FIVE_YEAR_TERMS,
    support_basis=SUPPORT_ON_BASE,
)

# Flat tier prices, support on total software cost, 1/2/3-year terms.
LEGACY_POLICY = PricingPolicy(
    name="legacy",
    tiers=FLAT_RATE_TIERS,
    contract_terms=ONE_TWO_THREE_YEAR_TERMS,
    support_basis=SUPPORT_ON_TOTAL,
)

POLICIES: dict[str, PricingPolicy] = {
    REFERENCE_POLICY.name: REFERENCE_POLICY,
    LEGACY_POLICY.name: LEGACY_POLICY,
}


def policy_from_settings(
    policy_name: str,
    support_basis: Optional[str] = None,
    contract_term_set: Optional[str] = None,
) -> PricingPolicy:
    """Build the active policy from a preset name plus optional overrides."""
    try:
        base = POLICIES[policy_name]
    except KeyError:
        raise ValueError(
            f"Unknown pricing policy {policy_name!r} (expected one of: {', '.join(POLICIES)})"
        ) from None

    if not support_basis and not contract_term_set:
        return base

    return PricingPolicy(
        name=base.name,
        tiers=base.tiers,
        contract_terms=get_term_set(contract_term_set) if contract_term_set else base.contract_terms,
        support_basis=support_basis or base.support_basis,
        support_rate=base.support_rate,
        additional_instance_fee=base.additional_instance_fee,
    )


# ──────────────────────────────────────────────────────────────────
# FEE COMPONENTS
# ──────────────────────────────────────────────────────────────────

def additional_instances_fee(
    instance_count: int,
    fee: Decimal = ADDITIONAL_INSTANCE_FEE,
) -> Decimal:
    """Fee for instances 2..N; the first instance is part of the base price."""
    if not is_whole_number(instance_count) or instance_count < 1:
        raise InvalidInstanceCount(instance_count)
    return (instance_count - 1) * fee


def support_cost(
    base_software_price: Decimal,
    total_software_cost: Decimal,
    basis: str = SUPPORT_ON_BASE,
    rate: Decimal = SUPPORT_COST_PERCENTAGE,
) -> Decimal:
    if basis == SUPPORT_ON_BASE:
        return base_software_price * rate
    if basis == SUPPORT_ON_TOTAL:
        return total_software_cost * rate
    raise ValueError(f"Unknown support basis {basis!r}")


# ──────────────────────────────────────────────────────────────────
# ENGINE
# ──────────────────────────────────────────────────────────────────

def calculate_pricing(
    request: PricingRequest,
    policy: PricingPolicy = REFERENCE_POLICY,
) -> PricingBreakdown:
    """Compute the full breakdown for one request.

    Raises InvalidCapacity, InvalidInstanceCount or InvalidContractTerm;
    never returns a partial result.
    """
    if not is_whole_number(request.instance_count) or request.instance_count < 1:
        raise InvalidInstanceCount(request.instance_count)
    tier = resolve_tier(request.capacity_tb, policy.tiers)

    overage_units = max(0, request.capacity_tb - tier.min_capacity)
    base_price = tier.base_price + overage_units * tier.per_unit_overage_rate

    instance_fee = additional_instances_fee(request.instance_count, policy.additional_instance_fee)
    total_software = base_price + instance_fee

    support = support_cost(base_price, total_software, policy.support_basis, policy.support_rate)
    subtotal = total_software + support

    discount_rate = resolve_discount_rate(request.contract_years, policy.contract_terms)
    discount = subtotal * discount_rate
    total = subtotal - discount

    logger.debug(
        "Priced %s TB x %s instance(s), %s-year term under %s policy: tier=%s total=%s",
        request.capacity_tb, request.instance_count, request.contract_years,
        policy.name, tier.id, total,
    )

    return PricingBreakdown(
        resolved_tier=tier.id,
        capacity_tb=request.capacity_tb,
        instance_count=request.instance_count,
        contract_years=request.contract_years,
        overage_units=overage_units,
        base_software_price=base_price,
        additional_instances_fee=instance_fee,
        total_software_cost=total_software,
        support_cost=support,
        subtotal=subtotal,
        discount_rate=discount_rate,
        discount_amount=discount,
        total_annual_cost=total,
    )


class PricingCalculator:
    """Engine bound to one policy, for callers that price repeatedly."""

    def __init__(self, policy: PricingPolicy = REFERENCE_POLICY):
        self.policy = policy

    def calculate(
        self,
        capacity_tb: int,
        instance_count: int = 1,
        contract_years: int = 1,
    ) -> PricingBreakdown:
        return calculate_pricing(
            PricingRequest(capacity_tb, instance_count, contract_years),
            self.policy,
        )

    def resolve_tier(self, capacity_tb: int) -> TierSpec:
        return resolve_tier(capacity_tb, self.policy.tiers)
