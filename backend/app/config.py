from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Shared keyword for the estimator gate; empty disables the gate (dev mode)
    access_keyword: str = ""

    # Pricing policy preset: "reference" (overage, support on base, 1/3/5 yrs)
    # or "legacy" (flat tiers, support on total, 1/2/3 yrs)
    pricing_policy: str = "reference"
    support_basis: Optional[str] = None  # "base" | "total"
    contract_term_set: Optional[str] = None  # "1-2-3" | "1-3-5"

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
