"""
TrustScore Review Aggregation
=============================

The two algorithmic stages of a trust score lookup.

Modules:
    pagination        - Bounded, sequential retrieval of review pages
    score_calculator  - Age-weighted fold of reviews into one rounded score
"""

from .pagination import compute_page_count, fetch_reviews, DEFAULT_REVIEW_CAP
from .score_calculator import compute_score, score_review, months_since, round_score, DEFAULT_MAX_REVIEW_AGE

__all__ = [
    # Pagination
    "compute_page_count",
    "fetch_reviews",
    "DEFAULT_REVIEW_CAP",
    # Scoring
    "compute_score",
    "score_review",
    "months_since",
    "round_score",
    "DEFAULT_MAX_REVIEW_AGE",
]
