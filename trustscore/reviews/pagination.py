"""
Review Pagination Controller
============================

Retrieves a bounded set of reviews for a business unit, one page at a time.

Page count is fixed before the first request:
    total > review_cap  -> review_cap / page_size pages
    otherwise           -> ceil(total / page_size) pages

Pages are requested strictly in sequence. The first failing page aborts the
whole retrieval and its error is re-raised as-is; nothing fetched so far is
returned.
"""

import logging
import math
import threading
from typing import List, Optional

from ..data.config import REVIEWS_PER_PAGE
from ..data.data_models import Review, ReviewPage
from ..data.errors import FetchCancelledError
from ..data.review_source import ReviewPageTransport

logger = logging.getLogger(__name__)

DEFAULT_REVIEW_CAP = 300


def compute_page_count(
    total_review_count: int,
    review_cap: int = DEFAULT_REVIEW_CAP,
    page_size: int = REVIEWS_PER_PAGE,
) -> int:
    """Number of pages to request for a unit reporting total_review_count reviews."""
    if total_review_count < 0:
        raise ValueError(f"total_review_count cannot be negative, got: {total_review_count}")
    if total_review_count > review_cap:
        return review_cap // page_size
    return math.ceil(total_review_count / page_size)


def fetch_reviews(
    transport: ReviewPageTransport,
    business_unit_id: str,
    total_review_count: int,
    review_cap: int = DEFAULT_REVIEW_CAP,
    page_size: int = REVIEWS_PER_PAGE,
    cancel_event: Optional[threading.Event] = None,
) -> List[Review]:
    """
    Fetch up to review_cap reviews, in page order.

    A unit with no reviews issues no requests.

    Args:
        transport: Page source (fetch_review_page)
        business_unit_id: Resolved business unit id
        total_review_count: Review total reported by the resolver
        review_cap: Maximum reviews considered
        page_size: Reviews per request
        cancel_event: When set, no further page is requested

    Returns:
        Reviews of all pages, concatenated in fetch order

    Raises:
        FetchError: From the first failing page, unchanged
        FetchCancelledError: cancel_event was set before all pages were fetched
    """
    pages = compute_page_count(total_review_count, review_cap=review_cap, page_size=page_size)
    logger.debug(
        f"Fetching {pages} page(s) for {business_unit_id} "
        f"(total={total_review_count}, cap={review_cap})"
    )

    reviews: List[Review] = []
    page = 1
    while page <= pages:
        if cancel_event is not None and cancel_event.is_set():
            raise FetchCancelledError(
                f"Review retrieval for {business_unit_id} cancelled before page {page}",
                business_unit_id=business_unit_id,
                page=page,
            )

        batch = ReviewPage(
            page=page,
            reviews=tuple(transport.fetch_review_page(business_unit_id, page, page_size)),
        )
        reviews.extend(batch.reviews)
        logger.debug(f"Page {batch.page}/{pages} for {business_unit_id}: {len(batch)} reviews")
        page += 1

    logger.info(f"Fetched {len(reviews)} reviews in {pages} page(s) for {business_unit_id}")
    return reviews
