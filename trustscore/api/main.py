"""
TrustScore FastAPI Application
==============================

REST API exposing trust score lookups.

Endpoints:
    GET /api/health                                - Health check
    GET /api/trust-score?domain={domain}           - Score by domain
    GET /api/trust-score/business-units/{unit_id}  - Score by business unit id

Error mapping:
    404 - business unit not found
    422 - no reviews to score
    502 - provider lookup or review page failed
    503 - provider credentials not configured

Usage:
    uvicorn trustscore.api.main:app --port 8000

    Or:
    python -m trustscore.api.main
"""

from dotenv import load_dotenv
load_dotenv()

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query

from ..data.config import get_settings
from ..data.errors import (
    BusinessUnitNotFoundError,
    ComputationError,
    FetchError,
    MissingCredentialsError,
    ResolutionError,
    TrustScoreError,
)
from ..orchestrator.engine import TrustScoreEngine, build_engine
from .models import HealthResponse, TrustScoreResponse

logger = logging.getLogger(__name__)

app = FastAPI(
    title="TrustScore API",
    description="Trust score from recent Trustpilot reviews",
    version="1.0.0",
)

_engine: Optional[TrustScoreEngine] = None


def get_engine() -> TrustScoreEngine:
    """Shared engine (lazy). Engines keep no per-lookup state."""
    global _engine
    if _engine is None:
        try:
            _engine = build_engine()
        except MissingCredentialsError as e:
            raise HTTPException(status_code=503, detail=str(e))
    return _engine


def _to_http_error(lookup: str, error: TrustScoreError) -> HTTPException:
    if isinstance(error, BusinessUnitNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ComputationError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, (ResolutionError, FetchError)):
        logger.error(f"Trust score lookup failed for {lookup}: {error}")
        return HTTPException(status_code=502, detail=str(error))
    logger.error(f"Unexpected trust score error for {lookup}: {error}")
    return HTTPException(status_code=500, detail=str(error))


# ============================================================================
# HEALTH ENDPOINT
# ============================================================================

@app.get("/api/health", response_model=HealthResponse)
def health():
    """Health check."""
    settings = get_settings()
    return HealthResponse(
        status="ok",
        version=settings.app_version,
        provider_configured=bool(settings.trustpilot.api_key),
        review_cap=settings.scoring.review_cap,
    )


# ============================================================================
# TRUST SCORE ENDPOINTS
# ============================================================================

# Sync handlers: FastAPI runs them in its threadpool, so blocking provider
# calls do not stall the event loop.

@app.get("/api/trust-score", response_model=TrustScoreResponse)
def trust_score_by_domain(
    domain: str = Query(..., min_length=1, description="Domain or business name"),
    engine: TrustScoreEngine = Depends(get_engine),
):
    """Trust score for a domain."""
    try:
        result = engine.get_trust_score(domain=domain)
    except TrustScoreError as e:
        raise _to_http_error(domain, e)
    return TrustScoreResponse(**result.to_dict())


@app.get("/api/trust-score/business-units/{unit_id}", response_model=TrustScoreResponse)
def trust_score_by_id(
    unit_id: str,
    engine: TrustScoreEngine = Depends(get_engine),
):
    """Trust score for a business unit id."""
    try:
        result = engine.get_trust_score(business_unit_id=unit_id)
    except TrustScoreError as e:
        raise _to_http_error(unit_id, e)
    return TrustScoreResponse(**result.to_dict())


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    from ..orchestrator.logging_config import setup_logging_from_settings

    setup_logging_from_settings()

    print("=" * 60)
    print("TRUSTSCORE API SERVER")
    print("=" * 60)
    print()
    print("Starting server at http://localhost:8000")
    print()
    print("Endpoints:")
    print("  GET /api/health                               - Health check")
    print("  GET /api/trust-score?domain=...               - Score by domain")
    print("  GET /api/trust-score/business-units/{unit_id} - Score by id")
    print()

    uvicorn.run(app, host="0.0.0.0", port=8000)
