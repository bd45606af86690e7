"""
Trust Score Calculator
======================

Folds a set of reviews into one score, weighted by review age.

Per review, with age in whole calendar months:

    age_modifier    = 0 if age >= MAX_AGE else 1 - age / MAX_AGE
    age_score       = (stars / (max(age, 1) * 2)) / MAX_STARS
    rating_score    = min(2, stars / MAX_STARS + age_modifier + age_score)
    effective_stars = stars * MAX_AGE / age if age > MAX_AGE else stars
    review_score    = effective_stars + effective_stars * rating_score / 2

The trust score is the mean review_score, rounded half-up to one decimal.
Recent reviews push rating_score toward its 2.0 ceiling, so one review
contributes at most twice its (effective) stars. Reviews older than MAX_AGE
keep counting, with their stars scaled down linearly.

Age is the plain calendar-month difference: current month is 0, last month
is 1. It is not the "difference minus one" count, under which last month
is also 0 and every older review looks a month younger.

A review from the current month has age 0; age_score then uses 1 as the
age so the term stays bounded.
"""

import logging
import math
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from ..data.config import MAX_REVIEW_STARS
from ..data.data_models import Review
from ..data.errors import ComputationError, InsufficientDataError

logger = logging.getLogger(__name__)

DEFAULT_MAX_REVIEW_AGE = 36

# rating_score ceiling
MAX_RATING_SCORE = 2.0


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def months_since(date: datetime, now: Optional[datetime] = None) -> int:
    """
    Whole calendar months between date and now, never negative.

    Only year and month fields are compared: any day of the current month
    is 0, any day of the previous month is 1.
    """
    date = _as_utc(date)
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    months = (now.year - date.year) * 12 + (now.month - date.month)
    return max(months, 0)


def round_score(value: float) -> float:
    """Round half-up to one decimal."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def score_review(
    review: Review,
    now: Optional[datetime] = None,
    max_age: int = DEFAULT_MAX_REVIEW_AGE,
    max_stars: int = MAX_REVIEW_STARS,
) -> float:
    """Unrounded contribution of a single review."""
    stars = review.stars
    age = months_since(review.created_at, now)

    age_modifier = 0.0 if age >= max_age else 1 - (age / max_age)
    age_score = (stars / (max(age, 1) * 2)) / max_stars
    rating_score = min(MAX_RATING_SCORE, (stars / max_stars) + age_modifier + age_score)

    if age > max_age:
        stars = stars * (max_age / age)

    return stars + (stars * rating_score) / 2


def compute_score(
    reviews: Sequence[Review],
    now: Optional[datetime] = None,
    max_age: int = DEFAULT_MAX_REVIEW_AGE,
    max_stars: int = MAX_REVIEW_STARS,
) -> float:
    """
    Compute the trust score for a set of reviews.

    Args:
        reviews: Reviews to score (order does not matter)
        now: Reference time for review ages (default: current UTC time)
        max_age: Months until a review stops gaining age bonus
        max_stars: Top of the star scale

    Returns:
        Mean review score rounded to one decimal

    Raises:
        InsufficientDataError: reviews is empty
        ComputationError: A review produced a non-finite score
    """
    if not reviews:
        raise InsufficientDataError("Cannot compute a trust score without reviews")

    now = now if now is not None else datetime.now(timezone.utc)

    values = []
    for review in reviews:
        value = score_review(review, now=now, max_age=max_age, max_stars=max_stars)
        if not math.isfinite(value):
            raise ComputationError(f"Non-finite score for review {review.review_id or review.created_at}")
        values.append(value)

    # fsum is exact, so the mean does not depend on review order
    score = round_score(math.fsum(values) / len(values))
    logger.debug(f"Scored {len(reviews)} reviews: {score}", extra={"score": score})
    return score
