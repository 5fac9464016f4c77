"""Trust score calculation service.

Mention trust score (0-99) is a heuristic over the current request's mentions:
- Volume (more mentions -> higher, capped)
- Source diversity (distinct sources beyond the first)
- Freshness (age in days of the most recent mention)

The reviews feature uses a separate, simpler rating-based score
(see calculate_rating_trust_score). The two are intentionally not unified.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
import math

from app.services.mentions import Mention

BASE_SCORE = 45
MAX_SCORE = 99

# Used when no mention carries a timestamp
DEFAULT_FRESHEST_DAYS = 30.0

_SECONDS_PER_DAY = 86_400


@dataclass(frozen=True)
class TrustScore:
    """Computed per request, never stored as authoritative."""

    score: int
    volume: int
    source_count: int
    freshest_days: int | None
    calculated_at: datetime


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return math.floor(value + 0.5)


def calculate_trust_score(
    mentions: Sequence[Mention],
    *,
    now: datetime | None = None,
) -> TrustScore:
    """Calculate the mention trust score.

    Args:
        mentions: Deduplicated mentions for the current request.
        now: Clock reading (defaults to current UTC time).

    Returns:
        TrustScore with the clamped score and its inputs.
    """
    now = now or datetime.now(timezone.utc)
    volume = len(mentions)
    source_count = len({m.source or "" for m in mentions}) or 1

    ages = [
        (now - m.created_at).total_seconds() / _SECONDS_PER_DAY
        for m in mentions
        if m.created_at is not None
    ]
    freshest = min(ages) if ages else DEFAULT_FRESHEST_DAYS

    volume_score = min(30, volume * 3)
    source_score = min(15, max(0, (source_count - 1) * 4))
    freshness_score = min(20.0, max(0.0, 20 - freshest))

    raw = BASE_SCORE + volume_score + source_score + freshness_score
    score = max(0, min(MAX_SCORE, round_half_up(raw)))

    return TrustScore(
        score=score,
        volume=volume,
        source_count=source_count,
        freshest_days=round_half_up(freshest) if ages else None,
        calculated_at=now,
    )


def calculate_rating_trust_score(avg_rating: float) -> int:
    """Score (0-100) shown next to stored reviews: average rating as a percentage."""
    return max(0, min(100, round_half_up(avg_rating / 5 * 100)))
