from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Optional


class EstimateRequest(BaseModel):
    capacity_tb: int = Field(..., description="Total licensed storage in whole TB")
    instance_count: int = Field(1, description="Deployed instances; the first is included")
    contract_years: int = Field(1, description="Contract length in years")


class PriceBreakdown(BaseModel):
    resolved_tier: str
    capacity_tb: int
    instance_count: int
    contract_years: int
    overage_units: int
    base_software_price: float
    additional_instances_fee: float
    total_software_cost: float
    support_cost: float
    subtotal: float
    discount_rate: float
    discount_amount: float
    total_annual_cost: float


class StatementLine(BaseModel):
    label: str
    amount: str


class EstimateResponse(BaseModel):
    policy: str
    breakdown: PriceBreakdown
    statement: list[StatementLine] = []


class TierInfo(BaseModel):
    id: str
    min_capacity: int
    max_capacity: Optional[int] = None  # None = no upper bound
    base_price: float
    per_unit_overage_rate: float = 0


class ContractTermInfo(BaseModel):
    years: int
    discount_rate: float
    label: str


class AccessRequest(BaseModel):
    keyword: str


class PricingErrorDetail(BaseModel):
    error: str
    message: str
    value: Optional[str] = None
    allowed: list[int] = []
