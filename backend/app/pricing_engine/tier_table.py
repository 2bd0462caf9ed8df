"""
Capacity tier tables for the storage subscription.

A tier is a band of licensed capacity (whole TB) with a base price that
covers the tier minimum and, in the overage table, a per-TB rate for every
TB above that minimum.  Bounds are inclusive on both ends and the bands are
contiguous:

    1-14 | 15-29 | 30-74 | 75-149 | 150-300 | 301+

so a cutover value such as 14 or 15 belongs to exactly one tier.

Two tables ship:
  - FLAT_RATE_TIERS: base price only, capacity inside a tier is not billed
  - OVERAGE_TIERS:   base price plus per-TB overage above the tier minimum

Both are checked by ``validate_tier_table`` at import.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from app.pricing_engine.errors import InvalidCapacity, is_whole_number


@dataclass(frozen=True)
class TierSpec:
    """One row of a tier table."""
    id: str
    min_capacity: int
    max_capacity: Optional[int]  # None = unbounded top tier
    base_price: Decimal
    per_unit_overage_rate: Decimal = Decimal("0")

    def contains(self, capacity_tb: int) -> bool:
        if capacity_tb < self.min_capacity:
            return False
        return self.max_capacity is None or capacity_tb <= self.max_capacity


# ──────────────────────────────────────────────────────────────────
# TIER TABLES  (annual USD)
# ──────────────────────────────────────────────────────────────────
# Base prices per band.  Overage rates keep the price monotonic across
# cutovers: base + (max - min) * rate never exceeds the next base.
#   1-14:    12100 + 13 * 300  = 16000  <= 16500
#   15-29:   16500 + 14 * 375  = 21750  <= 23100
#   30-74:   23100 + 44 * 275  = 35200  <= 36300
#   75-149:  36300 + 74 * 150  = 47400  <= 49500
#   150-300: 49500 + 150 * 200 = 79500  <= 82500

_BANDS: tuple[tuple[str, int, Optional[int], int, int], ...] = (
    # id,            min,  max,  base,  overage/TB
    ("1-14 TBs",       1,   14, 12100, 300),
    ("15-29 TBs",     15,   29, 16500, 375),
    ("30-74 TBs",     30,   74, 23100, 275),
    ("75-149 TBs",    75,  149, 36300, 150),
    ("150-300 TBs",  150,  300, 49500, 200),
    ("300+ TBs",     301, None, 82500, 150),
)

FLAT_RATE_TIERS: tuple[TierSpec, ...] = tuple(
    TierSpec(id=tid, min_capacity=lo, max_capacity=hi, base_price=Decimal(base))
    for tid, lo, hi, base, _rate in _BANDS
)

OVERAGE_TIERS: tuple[TierSpec, ...] = tuple(
    TierSpec(
        id=tid,
        min_capacity=lo,
        max_capacity=hi,
        base_price=Decimal(base),
        per_unit_overage_rate=Decimal(rate),
    )
    for tid, lo, hi, base, rate in _BANDS
)


def validate_tier_table(tiers: Sequence[TierSpec]) -> None:
    """Raise ValueError unless ``tiers`` covers [1, inf) with no gap or overlap."""
    if not tiers:
        raise ValueError("Tier table is empty")
    if tiers[0].min_capacity != 1:
        raise ValueError(
            f"Tier table must start at 1 TB, first tier {tiers[0].id!r} "
            f"starts at {tiers[0].min_capacity}"
        )

    seen: set[str] = set()
    for idx, tier in enumerate(tiers):
        if tier.id in seen:
            raise ValueError(f"Duplicate tier id {tier.id!r}")
        seen.add(tier.id)

        if tier.base_price < 0 or tier.per_unit_overage_rate < 0:
            raise ValueError(f"Tier {tier.id!r} has a negative price")

        is_last = idx == len(tiers) - 1
        if tier.max_capacity is None:
            if not is_last:
                raise ValueError(f"Only the top tier may be unbounded, not {tier.id!r}")
            continue
        if is_last:
            raise ValueError(f"Top tier {tier.id!r} must be unbounded")
        if tier.max_capacity < tier.min_capacity:
            raise ValueError(f"Tier {tier.id!r} has max below min")

        nxt = tiers[idx + 1]
        if nxt.min_capacity != tier.max_capacity + 1:
            kind = "overlaps" if nxt.min_capacity <= tier.max_capacity else "leaves a gap before"
            raise ValueError(f"Tier {tier.id!r} {kind} tier {nxt.id!r}")


validate_tier_table(FLAT_RATE_TIERS)
validate_tier_table(OVERAGE_TIERS)


def resolve_tier(capacity_tb: int, tiers: Sequence[TierSpec] = OVERAGE_TIERS) -> TierSpec:
    """Return the unique tier containing ``capacity_tb``.

    Raises InvalidCapacity for non-integers and values below 1.
    """
    if not is_whole_number(capacity_tb) or capacity_tb <= 0:
        raise InvalidCapacity(capacity_tb)

    for tier in tiers:
        if tier.contains(capacity_tb):
            return tier

    # Only reachable with a table that failed validation
    raise InvalidCapacity(capacity_tb)


def get_tier(tier_id: str, tiers: Sequence[TierSpec] = OVERAGE_TIERS) -> TierSpec:
    """Look a tier up by id.  Raises KeyError for unknown ids."""
    for tier in tiers:
        if tier.id == tier_id:
            return tier
    raise KeyError(tier_id)


def is_flat_rate(tiers: Sequence[TierSpec]) -> bool:
    """True when no tier in the table bills overage."""
    return all(t.per_unit_overage_rate == 0 for t in tiers)
