from __future__ import annotations

from app.models.schemas import (
    EstimateRequest,
    EstimateResponse,
    PriceBreakdown,
    TierInfo,
    ContractTermInfo,
)

__all__ = [
    "EstimateRequest",
    "EstimateResponse",
    "PriceBreakdown",
    "TierInfo",
    "ContractTermInfo",
]
