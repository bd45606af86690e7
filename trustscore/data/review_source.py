"""
Review Source Interface
=======================

Contracts the aggregation engine needs from a review provider.
TrustpilotClient is the live implementation; tests use in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .config import REVIEWS_PER_PAGE
from .data_models import BusinessUnit, Review


class BusinessUnitResolver(ABC):
    """Resolves a domain or business unit id to a BusinessUnit."""

    @abstractmethod
    def resolve(
        self,
        domain: Optional[str] = None,
        business_unit_id: Optional[str] = None,
    ) -> BusinessUnit:
        """
        Resolve exactly one of domain / business_unit_id.

        Raises:
            ResolutionError: Unit not found or the lookup failed
        """


class ReviewPageTransport(ABC):
    """Fetches one page of reviews for a resolved business unit."""

    @abstractmethod
    def fetch_review_page(
        self,
        business_unit_id: str,
        page: int,
        page_size: int = REVIEWS_PER_PAGE,
    ) -> List[Review]:
        """
        Fetch a single 1-based page.

        Raises:
            FetchError: Any failure of the page request
        """


class ReviewSource(BusinessUnitResolver, ReviewPageTransport):
    """A provider that can both resolve units and serve their reviews."""
