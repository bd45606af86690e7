"""
TrustScore Aggregation Engine
=============================

Composition root for one trust score lookup:

    1. Resolve     - domain / id -> BusinessUnit (id, total review count)
    2. Fetch       - bounded sequential review pages
    3. Score       - age-weighted mean, rounded to one decimal
    4. Assemble    - TrustScoreResult

Each stage runs only after the previous one succeeded. The first error is
re-raised unchanged and no partial result is produced. Engines hold no
per-lookup state, so one engine may serve concurrent lookups.

Usage:
    from trustscore.orchestrator.engine import TrustScoreEngine
    from trustscore.data import TrustpilotClient

    engine = TrustScoreEngine(TrustpilotClient())
    result = engine.get_trust_score(domain="example.com")
    print(result.to_dict())
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from ..data.config import ScoringConfig, get_settings
from ..data.data_models import TrustScoreResult
from ..data.review_source import BusinessUnitResolver, ReviewPageTransport
from ..reviews.pagination import fetch_reviews
from ..reviews.score_calculator import compute_score

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrustScoreEngine:
    """
    Orchestrates resolver -> pagination -> scoring.

    The resolver usually doubles as the page transport (TrustpilotClient
    implements both); pass transport explicitly to split them.
    """

    def __init__(
        self,
        resolver: BusinessUnitResolver,
        transport: Optional[ReviewPageTransport] = None,
        scoring_config: Optional[ScoringConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize engine.

        Args:
            resolver: Business unit resolver
            transport: Review page source (default: resolver)
            scoring_config: Cap and age parameters (default: from settings)
            clock: Returns "now" for review ages (default: current UTC time)
        """
        self.resolver = resolver
        self.transport = transport if transport is not None else resolver
        self.scoring_config = scoring_config if scoring_config is not None else get_settings().scoring
        self._clock = clock or _utcnow

    def get_trust_score(
        self,
        domain: Optional[str] = None,
        business_unit_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> TrustScoreResult:
        """
        Compute the trust score for a business unit.

        Args:
            domain: Domain or business name to look up
            business_unit_id: Business unit id to look up
            cancel_event: Stops page retrieval when set

        Returns:
            TrustScoreResult

        Raises:
            ValueError: Neither or both lookup keys given
            ResolutionError: Business unit lookup failed
            FetchError: A review page failed or retrieval was cancelled
            ComputationError: No reviews, or a non-finite score
        """
        if (domain is None) == (business_unit_id is None):
            raise ValueError("Exactly one of domain or business_unit_id is required")

        config = self.scoring_config
        started = time.monotonic()

        if domain is not None:
            unit = self.resolver.resolve(domain=domain)
        else:
            unit = self.resolver.resolve(business_unit_id=business_unit_id)

        reviews = fetch_reviews(
            self.transport,
            unit.id,
            unit.total_review_count,
            review_cap=config.review_cap,
            page_size=config.page_size,
            cancel_event=cancel_event,
        )
        unit = unit.with_reviews(reviews)

        score = compute_score(
            unit.reviews,
            now=self._clock(),
            max_age=config.max_review_age,
            max_stars=config.max_review_stars,
        )

        result = TrustScoreResult(
            id=unit.id,
            domain=domain if domain is not None else unit.domain,
            trust_score=score,
        )

        duration = time.monotonic() - started
        logger.info(
            f"Trust score for {result.domain} ({result.id}): {score} "
            f"from {len(unit.reviews)} reviews in {duration:.2f}s",
            extra={"business_unit_id": result.id, "score": score, "duration": round(duration, 3)},
        )
        return result


def build_engine() -> TrustScoreEngine:
    """Engine backed by a TrustpilotClient configured from settings."""
    from ..data.trustpilot_client import TrustpilotClient
    return TrustScoreEngine(TrustpilotClient())


def get_trust_score(
    domain: Optional[str] = None,
    business_unit_id: Optional[str] = None,
) -> TrustScoreResult:
    """One-shot lookup using settings from the environment."""
    return build_engine().get_trust_score(domain=domain, business_unit_id=business_unit_id)
