"""
TrustScore Trustpilot Client
============================

Trustpilot public API client used to resolve business units and page
through their reviews.

Endpoints:
    GET /business-units/find?name={domain}         - domain -> business unit id
    GET /business-units/{id}                       - review total + identifying name
    GET /business-units/{id}/reviews?perPage&page  - one page of reviews

Every response body is streamed and discarded once it exceeds the configured
maximum size. No retries are performed: a failed request fails the operation.

Usage:
    from trustscore.data.trustpilot_client import TrustpilotClient

    client = TrustpilotClient()
    unit = client.resolve(domain="example.com")
    reviews = client.fetch_review_page(unit.id, page=1)
"""

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .config import REVIEWS_PER_PAGE
from .data_models import BusinessUnit, Review
from .errors import (
    BusinessUnitNotFoundError,
    FetchError,
    MalformedPayloadError,
    MissingCredentialsError,
    ProviderError,
    ResolutionError,
    ResponseTooLargeError,
    TransportError,
    TrustpilotAPIError,
)
from .review_source import ReviewSource

logger = logging.getLogger(__name__)


class TrustpilotClient(ReviewSource):
    """
    Trustpilot API client.

    Wraps the three endpoints the engine needs and turns every failure into
    a typed error: transport errors inside a single exchange, then the stage
    error (ResolutionError / FetchError) of the operation that was running.
    """

    FIND_BUSINESS_UNIT = "/business-units/find"
    BUSINESS_UNIT_INFO = "/business-units/{business_unit_id}"
    BUSINESS_UNIT_REVIEWS = "/business-units/{business_unit_id}/reviews"

    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        request_timeout: Optional[float] = None,
        max_response_size: Optional[int] = None,
    ):
        """
        Initialize client.

        Args:
            api_key: Trustpilot API key (if None, loaded from config)
            base_url: API root (if None, loaded from config)
            request_timeout: Per-request timeout in seconds
            max_response_size: Maximum accepted body size in bytes
        """
        if api_key is None or base_url is None or request_timeout is None or max_response_size is None:
            from .config import get_settings
            tp_settings = get_settings().trustpilot
            api_key = api_key if api_key is not None else tp_settings.api_key
            base_url = base_url if base_url is not None else tp_settings.base_url
            if request_timeout is None:
                request_timeout = tp_settings.request_timeout
            if max_response_size is None:
                max_response_size = tp_settings.max_response_size

        if not api_key:
            raise MissingCredentialsError(
                "Trustpilot API key not configured. Set TRUSTPILOT_API_KEY in .env"
            )

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self.max_response_size = max_response_size

        self._stats = {
            "requests_made": 0,
            "reviews_fetched": 0,
            "errors": 0,
        }

        logger.info(
            f"TrustpilotClient initialized: base_url={self.base_url}, "
            f"timeout={request_timeout}s, max_response_size={max_response_size}"
        )

    # =========================================================================
    # HTTP exchange
    # =========================================================================

    def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Perform one GET request and return the decoded JSON object.

        Raises:
            TransportError: Network failure or timeout
            ResponseTooLargeError: Body exceeded max_response_size
            ProviderError: Body carries an errorCode, or HTTP status >= 400
            MalformedPayloadError: Body is not a JSON object
        """
        url = f"{self.base_url}{path}"
        self._stats["requests_made"] += 1
        logger.debug(f"Trustpilot request: GET {path} params={params}")

        try:
            try:
                response = requests.get(
                    url,
                    params=params,
                    headers={"apikey": self.api_key, "Accept": "application/json"},
                    timeout=self.request_timeout,
                    stream=True,
                )
            except requests.RequestException as e:
                raise TransportError(f"Request to {path} failed: {e}") from e

            try:
                body = self._read_body(response)
            finally:
                response.close()

            return self._decode(path, response.status_code, body)

        except TrustpilotAPIError as e:
            self._stats["errors"] += 1
            logger.warning(f"Trustpilot request failed: GET {path}: {e}")
            raise

    def _read_body(self, response) -> bytes:
        """Read the streamed body, enforcing the size limit."""
        chunks = []
        received = 0
        try:
            for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                if not chunk:
                    continue
                received += len(chunk)
                if received > self.max_response_size:
                    raise ResponseTooLargeError(self.max_response_size, status_code=response.status_code)
                chunks.append(chunk)
        except requests.RequestException as e:
            raise TransportError(f"Reading response failed: {e}", status_code=response.status_code) from e
        return b"".join(chunks)

    def _decode(self, path: str, status_code: int, body: bytes) -> Dict[str, Any]:
        """Decode a body and map provider-reported errors."""
        try:
            payload = json.loads(body) if body else None
        except ValueError as e:
            if status_code >= 400:
                raise ProviderError(f"HTTP {status_code} from {path}", status_code=status_code) from e
            raise MalformedPayloadError(f"Invalid JSON from {path}: {e}", status_code=status_code) from e

        if isinstance(payload, dict) and payload.get("errorCode"):
            raise ProviderError(
                payload.get("message") or f"Provider error {payload['errorCode']}",
                error_code=payload["errorCode"],
                status_code=status_code,
                response=payload,
            )

        if status_code >= 400:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ProviderError(
                message or f"HTTP {status_code} from {path}",
                status_code=status_code,
                response=payload if isinstance(payload, dict) else None,
            )

        if not isinstance(payload, dict):
            raise MalformedPayloadError(f"Expected a JSON object from {path}", status_code=status_code)

        return payload

    # =========================================================================
    # Business unit resolution
    # =========================================================================

    def find_business_unit_id(self, domain: str) -> str:
        """Look up the business unit id for a domain or business name."""
        payload = self._request(self.FIND_BUSINESS_UNIT, params={"name": domain})
        business_unit_id = payload.get("id")
        if not business_unit_id or not isinstance(business_unit_id, str):
            raise MalformedPayloadError(f"No business unit id in find response for '{domain}'", response=payload)
        return business_unit_id

    def get_business_unit_info(self, business_unit_id: str) -> Dict[str, Any]:
        """Fetch the business unit record."""
        path = self.BUSINESS_UNIT_INFO.format(business_unit_id=quote(business_unit_id, safe=""))
        return self._request(path)

    def resolve(
        self,
        domain: Optional[str] = None,
        business_unit_id: Optional[str] = None,
    ) -> BusinessUnit:
        """
        Resolve a domain or business unit id to a BusinessUnit.

        Domain lookups call the find endpoint first; id lookups go straight
        to the business unit record.

        Raises:
            ValueError: Neither or both lookup keys given
            BusinessUnitNotFoundError: Provider reports no such unit (HTTP 404)
            ResolutionError: Any other failure
        """
        if (domain is None) == (business_unit_id is None):
            raise ValueError("Exactly one of domain or business_unit_id is required")

        lookup = domain if domain is not None else business_unit_id

        try:
            unit_id = self.find_business_unit_id(domain) if domain is not None else business_unit_id
            info = self.get_business_unit_info(unit_id)
            total = self._parse_total_reviews(info)
        except TrustpilotAPIError as e:
            if e.status_code == 404:
                raise BusinessUnitNotFoundError(
                    f"No business unit found for '{lookup}'", lookup=lookup, cause=e
                ) from e
            raise ResolutionError(
                f"Could not resolve business unit '{lookup}': {e}", lookup=lookup, cause=e
            ) from e

        name = info.get("name") if isinstance(info.get("name"), dict) else {}
        unit_domain = domain if domain is not None else (name.get("identifying") or unit_id)

        logger.info(f"Resolved '{lookup}' -> business unit {unit_id} ({total} reviews)")
        return BusinessUnit(id=unit_id, domain=unit_domain, total_review_count=total)

    def _parse_total_reviews(self, info: Dict[str, Any]) -> int:
        counts = info.get("numberOfReviews")
        total = counts.get("total") if isinstance(counts, dict) else None
        if isinstance(total, bool) or not isinstance(total, int) or total < 0:
            raise MalformedPayloadError(f"Invalid numberOfReviews.total: {total!r}", response=info)
        return total

    # =========================================================================
    # Reviews
    # =========================================================================

    def fetch_review_page(
        self,
        business_unit_id: str,
        page: int,
        page_size: int = REVIEWS_PER_PAGE,
    ) -> List[Review]:
        """
        Fetch one page of reviews.

        Args:
            business_unit_id: Resolved business unit id
            page: 1-based page index
            page_size: Reviews per page

        Raises:
            FetchError: Any failure, with the transport error as cause
        """
        path = self.BUSINESS_UNIT_REVIEWS.format(business_unit_id=quote(business_unit_id, safe=""))

        try:
            payload = self._request(path, params={"perPage": page_size, "page": page})
            raw_reviews = payload.get("reviews")
            if not isinstance(raw_reviews, list):
                raise MalformedPayloadError(f"No reviews list in page {page} response", response=payload)
            reviews = [Review.from_api(raw) for raw in raw_reviews]
        except TrustpilotAPIError as e:
            raise FetchError(
                f"Failed to fetch review page {page} for {business_unit_id}: {e}",
                business_unit_id=business_unit_id,
                page=page,
                cause=e,
            ) from e

        self._stats["reviews_fetched"] += len(reviews)
        return reviews

    def get_stats(self) -> Dict[str, Any]:
        """Get client statistics."""
        return dict(self._stats)
