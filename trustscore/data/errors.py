"""
TrustScore Error Taxonomy
=========================

Stage errors (what a caller of the engine sees):
    ResolutionError   - business unit could not be resolved
    FetchError        - a review page request failed
    ComputationError  - no score could be derived from the reviews

Configuration:
    MissingCredentialsError - no provider API key

Transport errors (what a single HTTP exchange can fail with):
    ResponseTooLargeError, TransportError, MalformedPayloadError, ProviderError

The client converts a transport error into the stage error of the operation
that failed and chains the original as ``cause``. Stage errors are never
re-wrapped after that point.
"""

from typing import Any, Dict, Optional


class TrustScoreError(Exception):
    """Base exception for all trust score failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


# =============================================================================
# Transport errors
# =============================================================================

class TrustpilotAPIError(TrustScoreError):
    """Base exception for Trustpilot API exchanges."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class ResponseTooLargeError(TrustpilotAPIError):
    """Response body exceeded the configured maximum size."""

    def __init__(self, limit: int, status_code: Optional[int] = None):
        self.limit = limit
        super().__init__(f"Request entity too large (limit {limit} bytes)", status_code=status_code)


class TransportError(TrustpilotAPIError):
    """Connection, timeout or other network-level failure."""
    pass


class MalformedPayloadError(TrustpilotAPIError):
    """Response body is not the JSON shape we expect."""
    pass


class ProviderError(TrustpilotAPIError):
    """The provider answered with an error message."""

    def __init__(
        self,
        message: str,
        error_code: Optional[Any] = None,
        status_code: Optional[int] = None,
        response: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        super().__init__(message, status_code=status_code, response=response)


# =============================================================================
# Stage errors
# =============================================================================

class ResolutionError(TrustScoreError):
    """Business unit lookup failed."""

    def __init__(self, message: str, lookup: Optional[str] = None, cause: Optional[Exception] = None):
        self.lookup = lookup
        self.cause = cause
        super().__init__(message)


class BusinessUnitNotFoundError(ResolutionError):
    """No business unit matches the domain or id."""
    pass


class FetchError(TrustScoreError):
    """A review page could not be retrieved."""

    def __init__(
        self,
        message: str,
        business_unit_id: Optional[str] = None,
        page: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        self.business_unit_id = business_unit_id
        self.page = page
        self.cause = cause
        super().__init__(message)


class FetchCancelledError(FetchError):
    """Retrieval was cancelled before all pages were requested."""
    pass


class ComputationError(TrustScoreError):
    """Score could not be computed from the fetched reviews."""
    pass


class InsufficientDataError(ComputationError):
    """No reviews available to score."""
    pass


class MissingCredentialsError(TrustScoreError):
    """No API key configured for the review provider."""
    pass
