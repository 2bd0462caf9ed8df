from __future__ import annotations

from app.pricing_engine.calculator import (
    PricingBreakdown,
    PricingCalculator,
    PricingPolicy,
    PricingRequest,
    calculate_pricing,
)
from app.pricing_engine.errors import (
    InvalidCapacity,
    InvalidContractTerm,
    InvalidInstanceCount,
    PricingError,
)
from app.pricing_engine.tier_table import TierSpec, resolve_tier

__all__ = [
    "PricingBreakdown",
    "PricingCalculator",
    "PricingPolicy",
    "PricingRequest",
    "calculate_pricing",
    "InvalidCapacity",
    "InvalidContractTerm",
    "InvalidInstanceCount",
    "PricingError",
    "TierSpec",
    "resolve_tier",
]
