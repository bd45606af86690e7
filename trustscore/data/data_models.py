"""
TrustScore Data Models
======================

Immutable dataclasses flowing through the aggregation chain:
resolve -> page fetch -> fold.

Models:
    - Review: One star rating with its creation timestamp
    - ReviewPage: Reviews returned by a single page request
    - BusinessUnit: Resolved entity plus the reviews gathered for it
    - TrustScoreResult: Final output of an aggregation
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple

from .config import MAX_REVIEW_STARS
from .errors import MalformedPayloadError


@dataclass(frozen=True)
class Review:
    """
    A single review as scored by the engine.

    Only the fields the score depends on are kept.
    """
    stars: float
    created_at: datetime
    review_id: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.stars, bool) or not isinstance(self.stars, (int, float)):
            raise ValueError(f"Invalid stars: {self.stars!r}. Must be a number")
        if not (0 <= self.stars <= MAX_REVIEW_STARS):
            raise ValueError(f"Invalid stars: {self.stars}. Must be 0-{MAX_REVIEW_STARS}")
        if not isinstance(self.created_at, datetime):
            raise ValueError(f"Invalid created_at: {self.created_at!r}. Must be a datetime")

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Review":
        """
        Create from a Trustpilot review object.

        Expected keys: ``stars`` and ``createdAt`` (ISO-8601). ``id`` is optional.

        Raises:
            MalformedPayloadError: If a required field is missing or invalid
        """
        if not isinstance(raw, dict):
            raise MalformedPayloadError(f"Review entry is not an object: {raw!r}")

        stars = raw.get("stars")
        created_raw = raw.get("createdAt")
        if stars is None or not created_raw:
            raise MalformedPayloadError(
                f"Review {raw.get('id', '?')} is missing 'stars' or 'createdAt'", response=raw
            )

        try:
            return cls(
                stars=stars,
                created_at=parse_timestamp(created_raw),
                review_id=raw.get("id"),
            )
        except (TypeError, ValueError) as e:
            raise MalformedPayloadError(f"Invalid review {raw.get('id', '?')}: {e}", response=raw) from e


@dataclass(frozen=True)
class ReviewPage:
    """Reviews returned by one page request (1-based page index)."""
    page: int
    reviews: Tuple[Review, ...] = ()

    def __len__(self) -> int:
        return len(self.reviews)


@dataclass(frozen=True)
class BusinessUnit:
    """
    Business unit being scored.

    id, domain and total_review_count come from the resolver. Reviews are
    attached afterwards with with_reviews(), which returns a new instance.
    """
    id: str
    domain: str
    total_review_count: int
    reviews: Tuple[Review, ...] = field(default=())

    def __post_init__(self):
        if not self.id:
            raise ValueError("Business unit id is required")
        if self.total_review_count < 0:
            raise ValueError(f"total_review_count cannot be negative, got: {self.total_review_count}")

    def with_reviews(self, reviews: Sequence[Review]) -> "BusinessUnit":
        return replace(self, reviews=tuple(reviews))


@dataclass(frozen=True)
class TrustScoreResult:
    """Final aggregation output."""
    id: str
    domain: str
    trust_score: float

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the public response keys."""
        return {
            "id": self.id,
            "domain": self.domain,
            "trustScore": self.trust_score,
        }


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp as returned by the API.

    A trailing ``Z`` is accepted. Naive values are treated as UTC.
    """
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string, got: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
