"""Display formatting for price breakdowns (USD, en-US grouping)."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from app.pricing_engine.calculator import PricingBreakdown
from app.pricing_engine.contract_terms import ContractTerm

CENT = Decimal("0.01")

Number = Union[Decimal, int, float]


def round_to_cents(amount: Number) -> Decimal:
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: Number) -> str:
    """Format as US dollars with two decimals, e.g. ``$26,570.31``."""
    cents = round_to_cents(amount)
    if cents < 0:
        return f"-${-cents:,.2f}"
    return f"${cents:,.2f}"


def format_percent(rate: Decimal) -> str:
    """0.05 -> '5%', 0.125 -> '12.5%'."""
    pct = (rate * 100).normalize()
    return f"{pct:f}%"


def contract_term_label(term: ContractTerm) -> str:
    """Label for the contract-length picker: '1 Year', '3 Years (5% off)'."""
    label = f"{term.years} Year{'s' if term.years > 1 else ''}"
    if term.discount_rate > 0:
        label += f" ({format_percent(term.discount_rate)} off)"
    return label


def build_statement(breakdown: PricingBreakdown) -> list[tuple[str, str]]:
    """Itemized (label, amount) lines in display order, total last."""
    return [
        ("Base Software Price", format_currency(breakdown.base_software_price)),
        ("Additional Instances Fee", format_currency(breakdown.additional_instances_fee)),
        ("Total Software Cost", format_currency(breakdown.total_software_cost)),
        ("Support Costs", format_currency(breakdown.support_cost)),
        ("Discount", format_currency(breakdown.discount_amount)),
        ("Total Annual Cost", format_currency(breakdown.total_annual_cost)),
    ]
