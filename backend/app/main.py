from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.routes import router, calculator
from app.api.auth import gate_enabled

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

VERSION = "1.0.0"

app = FastAPI(
    title="Storage Subscription Pricing Estimator",
    description=(
        "Estimate the annual subscription price for a storage deployment "
        "from licensed capacity, instance count, and contract length."
    ),
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    return {
        "name": "Storage Subscription Pricing Estimator",
        "version": VERSION,
        "endpoints": {
            "api_docs": "/docs",
            "health": "/health",
            "access": "POST /api/v1/access",
            "estimate": "POST /api/v1/estimate",
            "tiers": "GET /api/v1/tiers",
            "resolve_tier": "GET /api/v1/tiers/resolve?capacity_tb=...",
            "contract_terms": "GET /api/v1/contract-terms",
        },
    }


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "version": VERSION,
        "pricing_policy": calculator.policy.name,
        "support_basis": calculator.policy.support_basis,
        "contract_years": [t.years for t in calculator.policy.contract_terms],
        "access_gate": "enabled" if gate_enabled() else "disabled",
    }
