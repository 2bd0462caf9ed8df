from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.auth import DENIED_MESSAGE, require_access, verify_keyword
from app.config import settings
from app.models.schemas import (
    AccessRequest, ContractTermInfo, EstimateRequest, EstimateResponse,
    PriceBreakdown, PricingErrorDetail, StatementLine, TierInfo,
)
from app.pricing_engine.calculator import PricingCalculator, policy_from_settings
from app.pricing_engine.errors import InvalidContractTerm, PricingError
from app.services.formatting import build_statement, contract_term_label

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")
calculator = PricingCalculator(
    policy_from_settings(
        settings.pricing_policy,
        support_basis=settings.support_basis,
        contract_term_set=settings.contract_term_set,
    )
)


def _error_detail(exc: PricingError) -> dict:
    return PricingErrorDetail(
        error=exc.code,
        message=str(exc),
        value=None if exc.value is None else str(exc.value),
        allowed=list(exc.allowed) if isinstance(exc, InvalidContractTerm) else [],
    ).model_dump()


@router.post("/access")
async def check_access(req: AccessRequest):
    """Verify the shared keyword before the estimator is shown."""
    if not verify_keyword(req.keyword):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=DENIED_MESSAGE)
    return {"granted": True}


@router.post("/estimate", response_model=EstimateResponse, dependencies=[Depends(require_access)])
async def estimate(req: EstimateRequest):
    """Price one (capacity, instances, contract length) combination."""
    try:
        breakdown = calculator.calculate(req.capacity_tb, req.instance_count, req.contract_years)
    except PricingError as e:
        logger.warning("Rejected estimate input: %s", e)
        raise HTTPException(status_code=422, detail=_error_detail(e))

    return EstimateResponse(
        policy=calculator.policy.name,
        breakdown=PriceBreakdown(**breakdown.as_dict()),
        statement=[StatementLine(label=label, amount=amount)
                   for label, amount in build_statement(breakdown)],
    )


@router.get("/tiers", response_model=list[TierInfo])
async def list_tiers():
    """Capacity tiers of the active policy, lowest first."""
    return [
        TierInfo(
            id=t.id,
            min_capacity=t.min_capacity,
            max_capacity=t.max_capacity,
            base_price=t.base_price,
            per_unit_overage_rate=t.per_unit_overage_rate,
        )
        for t in calculator.policy.tiers
    ]


@router.get("/tiers/resolve", response_model=TierInfo, dependencies=[Depends(require_access)])
async def resolve_tier(capacity_tb: int):
    """Tier that a capacity falls into (drives the read-only tier display)."""
    try:
        t = calculator.resolve_tier(capacity_tb)
    except PricingError as e:
        raise HTTPException(status_code=422, detail=_error_detail(e))
    return TierInfo(
        id=t.id,
        min_capacity=t.min_capacity,
        max_capacity=t.max_capacity,
        base_price=t.base_price,
        per_unit_overage_rate=t.per_unit_overage_rate,
    )


@router.get("/contract-terms", response_model=list[ContractTermInfo])
async def list_contract_terms():
    return [
        ContractTermInfo(years=t.years, discount_rate=t.discount_rate, label=contract_term_label(t))
        for t in calculator.policy.contract_terms
    ]
