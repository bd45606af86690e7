"""
Tests for the TrustScore score calculator.

Covers the per-review formula term by term, the calendar month age,
the zero-age and empty-input policies, and half-up rounding.

Usage:
    pytest tests/test_score_calculator.py -v
"""

import pytest
from datetime import datetime, timezone

from trustscore.data.data_models import Review
from trustscore.data.errors import ComputationError, InsufficientDataError
from trustscore.reviews.score_calculator import (
    compute_score,
    months_since,
    round_score,
    score_review,
)


NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


def review_aged(stars, months: int, day: int = 10) -> Review:
    """Review created `months` calendar months before NOW."""
    year = NOW.year
    month = NOW.month - months
    while month < 1:
        month += 12
        year -= 1
    return Review(stars=stars, created_at=datetime(year, month, day, tzinfo=timezone.utc))


# ============================================================================
# MONTH AGE
# ============================================================================

class TestMonthsSince:
    """Tests for months_since()."""

    def test_same_month_is_zero(self):
        assert months_since(datetime(2026, 10, 1, tzinfo=timezone.utc), NOW) == 0
        assert months_since(datetime(2026, 10, 31, tzinfo=timezone.utc), NOW) == 0

    def test_previous_month_is_one_regardless_of_day(self):
        """Only calendar fields count, not elapsed days."""
        now = datetime(2026, 10, 1, tzinfo=timezone.utc)
        assert months_since(datetime(2026, 9, 30, tzinfo=timezone.utc), now) == 1
        assert months_since(datetime(2026, 9, 1, tzinfo=timezone.utc), NOW) == 1

    def test_across_year_boundary(self):
        now = datetime(2026, 1, 5, tzinfo=timezone.utc)
        assert months_since(datetime(2025, 12, 20, tzinfo=timezone.utc), now) == 1
        assert months_since(datetime(2023, 1, 5, tzinfo=timezone.utc), now) == 36

    def test_future_date_clamped_to_zero(self):
        assert months_since(datetime(2027, 3, 1, tzinfo=timezone.utc), NOW) == 0

    def test_naive_datetime_treated_as_utc(self):
        assert months_since(datetime(2026, 8, 15), NOW) == 2

    def test_defaults_to_current_time(self):
        assert months_since(datetime.now(timezone.utc)) == 0


# ============================================================================
# SINGLE REVIEW TERMS
# ============================================================================

class TestScoreReview:
    """Tests for score_review()."""

    def test_recent_review_hits_rating_ceiling(self):
        """stars=5, age=1: rating_score = min(2, 1 + 35/36 + 0.5) = 2."""
        value = score_review(review_aged(5, 1), now=NOW)
        assert value == pytest.approx(5 + 5 * 2 / 2)

    def test_mid_age_review(self):
        """stars=4, age=12: rating_score = 0.8 + 2/3 + 1/30 = 1.5."""
        value = score_review(review_aged(4, 12), now=NOW)
        assert value == pytest.approx(4 + 4 * 1.5 / 2)

    def test_review_at_max_age_has_no_age_modifier(self):
        """stars=4, age=36: rating_score = 0.8 + 0 + (4/72)/5, stars unchanged."""
        rating_score = 0.8 + (4 / 72) / 5
        value = score_review(review_aged(4, 36), now=NOW)
        assert value == pytest.approx(4 + 4 * rating_score / 2)

    def test_review_beyond_max_age_discounts_stars(self):
        """stars=3, age=72: effective stars = 3 * 36/72 = 1.5."""
        rating_score = 0.6 + (3 / 144) / 5
        value = score_review(review_aged(3, 72), now=NOW)
        assert value == pytest.approx(1.5 + 1.5 * rating_score / 2)

    def test_zero_age_uses_one_month_in_age_score(self):
        """age=0 must stay finite: age_score uses 1 as the denominator age."""
        value = score_review(review_aged(5, 0), now=NOW)
        assert value == pytest.approx(10.0)

    def test_last_month_review_ages_one_month(self):
        """A review from the last day of last month already loses age bonus."""
        last_month = review_aged(1, 1, day=30)
        rating_score = 0.2 + (1 - 1 / 36) + (1 / 2) / 5
        value = score_review(last_month, now=NOW)
        assert value == pytest.approx(1 + rating_score / 2)
        assert value < score_review(review_aged(1, 0), now=NOW)

    def test_zero_stars_scores_zero(self):
        assert score_review(review_aged(0, 0), now=NOW) == 0
        assert score_review(review_aged(0, 80), now=NOW) == 0

    def test_contribution_bounded_by_twice_the_stars(self):
        """rating_score <= 2, so a review adds at most stars + stars."""
        for months in (0, 1, 2, 6, 12, 24, 35, 36, 48):
            for stars in (1, 2, 3, 4, 5):
                assert score_review(review_aged(stars, months), now=NOW) <= 2 * stars + 1e-9

    def test_custom_max_age(self):
        """With max_age=12, a 24 month review is discounted by half."""
        rating_score = 0.8 + (4 / 48) / 5
        value = score_review(review_aged(4, 24), now=NOW, max_age=12)
        assert value == pytest.approx(2 + 2 * rating_score / 2)


# ============================================================================
# AGGREGATE SCORE
# ============================================================================

class TestComputeScore:
    """Tests for compute_score()."""

    def test_single_fresh_five_star_review(self):
        assert compute_score([review_aged(5, 0)], now=NOW) == 10.0

    def test_single_review_at_max_age_rounds_to_one_decimal(self):
        """4 + 4 * 0.8111 / 2 = 5.6222 -> 5.6"""
        assert compute_score([review_aged(4, 36)], now=NOW) == 5.6

    def test_single_review_beyond_max_age(self):
        """1.5 + 1.5 * 0.6042 / 2 = 1.9531 -> 2.0"""
        assert compute_score([review_aged(3, 72)], now=NOW) == 2.0

    def test_mean_over_reviews(self):
        reviews = [review_aged(5, 0), review_aged(4, 36), review_aged(3, 72)]
        # (10 + 5.6222 + 1.9531) / 3 = 5.8584
        assert compute_score(reviews, now=NOW) == 5.9

    def test_discount_applied_before_mean(self):
        """Old review weight is scaled before averaging, not after."""
        old = review_aged(3, 72)
        fresh = review_aged(3, 12)
        expected = round_score((score_review(old, NOW) + score_review(fresh, NOW)) / 2)
        assert compute_score([old, fresh], now=NOW) == expected

    def test_order_independent(self):
        reviews = [review_aged(s, m) for s, m in [(1, 3), (5, 0), (2, 40), (4, 18), (3, 90)]]
        forward = compute_score(reviews, now=NOW)
        backward = compute_score(list(reversed(reviews)), now=NOW)
        shuffled = compute_score([reviews[i] for i in (2, 4, 0, 3, 1)], now=NOW)
        assert forward == backward == shuffled

    def test_empty_reviews_raise_insufficient_data(self):
        with pytest.raises(InsufficientDataError):
            compute_score([], now=NOW)

    def test_insufficient_data_is_computation_error(self):
        with pytest.raises(ComputationError):
            compute_score((), now=NOW)

    def test_accepts_tuple(self):
        assert compute_score((review_aged(5, 0),), now=NOW) == 10.0


class TestRoundScore:
    """Tests for half-up rounding."""

    def test_rounds_half_up(self):
        assert round_score(2.25) == 2.3
        assert round_score(2.35) == 2.4
        assert round_score(0.05) == 0.1

    def test_rounds_down_below_half(self):
        assert round_score(5.6222) == 5.6
        assert round_score(1.94) == 1.9

    def test_whole_numbers_unchanged(self):
        assert round_score(10.0) == 10.0
        assert round_score(0.0) == 0.0
