"""
TrustScore API Models
=====================

Pydantic models for API response serialization.
Field names match the public JSON keys.
"""

from typing import Optional

from pydantic import BaseModel


class TrustScoreResponse(BaseModel):
    """Trust score of one business unit."""
    id: str
    domain: str
    trustScore: float


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    provider_configured: bool
    review_cap: Optional[int] = None
