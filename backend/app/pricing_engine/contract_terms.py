"""Contract lengths on offer and the discount each one carries."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from app.pricing_engine.errors import InvalidContractTerm, is_whole_number


@dataclass(frozen=True)
class ContractTerm:
    years: int
    discount_rate: Decimal


# 1-year contracts are always undiscounted.
ONE_TWO_THREE_YEAR_TERMS: tuple[ContractTerm, ...] = (
    ContractTerm(1, Decimal("0")),
    ContractTerm(2, Decimal("0.05")),
    ContractTerm(3, Decimal("0.10")),
)

ONE_THREE_FIVE_YEAR_TERMS: tuple[ContractTerm, ...] = (
    ContractTerm(1, Decimal("0")),
    ContractTerm(3, Decimal("0.05")),
    ContractTerm(5, Decimal("0.10")),
)

TERM_SETS: dict[str, tuple[ContractTerm, ...]] = {
    "1-2-3": ONE_TWO_THREE_YEAR_TERMS,
    "1-3-5": ONE_THREE_FIVE_YEAR_TERMS,
}


def validate_term_set(terms: Sequence[ContractTerm]) -> None:
    """Raise ValueError for empty, duplicated or out-of-range term sets."""
    if not terms:
        raise ValueError("Contract term set is empty")
    years = [t.years for t in terms]
    if len(set(years)) != len(years):
        raise ValueError(f"Duplicate contract lengths in {years}")
    if years != sorted(years):
        raise ValueError(f"Contract lengths must be ascending, got {years}")
    for t in terms:
        if t.years < 1:
            raise ValueError(f"Contract length must be at least 1 year, got {t.years}")
        if not (Decimal("0") <= t.discount_rate < Decimal("1")):
            raise ValueError(
                f"Discount for {t.years}-year term must be in [0, 1), got {t.discount_rate}"
            )


for _terms in TERM_SETS.values():
    validate_term_set(_terms)


def get_term_set(name: str) -> tuple[ContractTerm, ...]:
    try:
        return TERM_SETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown contract term set {name!r} (expected one of: {', '.join(TERM_SETS)})"
        ) from None


def allowed_years(terms: Sequence[ContractTerm]) -> tuple[int, ...]:
    return tuple(t.years for t in terms)


def resolve_discount_rate(contract_years: int, terms: Sequence[ContractTerm]) -> Decimal:
    """Exact lookup of the discount for ``contract_years``.

    Unknown lengths raise InvalidContractTerm; there is no zero-discount
    fallback.
    """
    if is_whole_number(contract_years):
        for term in terms:
            if term.years == contract_years:
                return term.discount_rate
    raise InvalidContractTerm(contract_years, allowed_years(terms))
