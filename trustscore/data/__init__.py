"""
TrustScore Data Module
======================

Provider integration and shared data structures.

This module provides:
    - TrustpilotClient: Resolves business units and fetches review pages
    - Data models: Review, ReviewPage, BusinessUnit, TrustScoreResult
    - Error taxonomy shared by every stage of the aggregation

Configuration:
    Set environment variables or create a .env file.

Required Environment Variables:
    TRUSTPILOT_API_KEY: Your Trustpilot API key
"""

from .config import settings, get_settings, reset_settings, Settings, ScoringConfig
from .data_models import (
    Review,
    ReviewPage,
    BusinessUnit,
    TrustScoreResult,
)
from .errors import (
    TrustScoreError,
    MissingCredentialsError,
    TrustpilotAPIError,
    ResponseTooLargeError,
    TransportError,
    MalformedPayloadError,
    ProviderError,
    ResolutionError,
    BusinessUnitNotFoundError,
    FetchError,
    FetchCancelledError,
    ComputationError,
    InsufficientDataError,
)
from .review_source import BusinessUnitResolver, ReviewPageTransport, ReviewSource
from .trustpilot_client import TrustpilotClient

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    "reset_settings",
    "Settings",
    "ScoringConfig",
    # Data models
    "Review",
    "ReviewPage",
    "BusinessUnit",
    "TrustScoreResult",
    # Errors
    "TrustScoreError",
    "MissingCredentialsError",
    "TrustpilotAPIError",
    "ResponseTooLargeError",
    "TransportError",
    "MalformedPayloadError",
    "ProviderError",
    "ResolutionError",
    "BusinessUnitNotFoundError",
    "FetchError",
    "FetchCancelledError",
    "ComputationError",
    "InsufficientDataError",
    # Provider
    "BusinessUnitResolver",
    "ReviewPageTransport",
    "ReviewSource",
    "TrustpilotClient",
]
