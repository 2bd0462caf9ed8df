"""Shared-keyword access gate for the estimator.

The gate only decides whether a caller may use the estimator; it never sees
pricing input.  Provides ``require_access`` dependency for protected routes.
"""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, status

from app.config import settings

logger = logging.getLogger(__name__)

ACCESS_HEADER = "X-Access-Keyword"
DENIED_MESSAGE = "Incorrect keyword. Please try again."


def gate_enabled() -> bool:
    # Dev mode: no keyword configured means the gate is open
    return bool(settings.access_keyword)


def verify_keyword(candidate: Optional[str]) -> bool:
    """Constant-time comparison against the configured keyword."""
    if not gate_enabled():
        return True
    if not candidate:
        return False
    return hmac.compare_digest(
        candidate.encode("utf-8"),
        settings.access_keyword.encode("utf-8"),
    )


async def require_access(
    x_access_keyword: Optional[str] = Header(default=None, alias=ACCESS_HEADER),
) -> None:
    """FastAPI dependency: reject requests without the shared keyword.

    Raises 401 if the header is missing or wrong.
    """
    if verify_keyword(x_access_keyword):
        return

    logger.info("Estimator access denied (keyword %s)", "missing" if not x_access_keyword else "mismatch")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=DENIED_MESSAGE,
    )
