"""Reviews feed and stats.

The feed is never empty: stored reviews come first, then a few generic
external mentions, then the bundled demo reviews, truncated to `limit`.

Stats use the rating-based score (average rating as a percentage), which is
deliberately different from the mention trust score used by search.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Review, Widget
from app.services.aggregator import fetch_external_mentions
from app.services.mentions import Mention, to_display_date
from app.services.settle import settle_all
from app.services.trust import calculate_rating_trust_score
from app.stores.postgres import ensure_schema, get_session, is_db_ready

logger = logging.getLogger("uvicorn.error")

DEMO_WIDGET_ID = "demo-widget"
DEMO_WIDGET_NAME = "Default Demo Widget"


@dataclass(frozen=True)
class ReviewItem:
    """One entry of the reviews feed. External mentions carry no rating."""

    source: str
    author: str
    rating: int | None
    text: str
    date: str
    link: str | None = None


@dataclass(frozen=True)
class BundledReview:
    source: str
    author: str
    rating: int
    text: str
    created_at: datetime

    def to_item(self) -> ReviewItem:
        return ReviewItem(
            source=self.source,
            author=self.author,
            rating=self.rating,
            text=self.text,
            date=to_display_date(self.created_at),
        )


@dataclass(frozen=True)
class ReviewStats:
    total_reviews: int
    avg_rating: float
    trust_score: int


FALLBACK_REVIEWS: tuple[BundledReview, ...] = (
    BundledReview(
        source="Google",
        author="Sarah M.",
        rating=5,
        text="Absolutely amazing service! Highly recommended.",
        created_at=datetime(2024, 10, 12, tzinfo=timezone.utc),
    ),
    BundledReview(
        source="Facebook",
        author="John D.",
        rating=5,
        text="Best experience I have had in a long time.",
        created_at=datetime(2024, 9, 29, tzinfo=timezone.utc),
    ),
    BundledReview(
        source="Twitter",
        author="@techguru",
        rating=4,
        text="InstantProof is a game changer for social proof.",
        created_at=datetime(2024, 9, 10, tzinfo=timezone.utc),
    ),
    BundledReview(
        source="Reddit",
        author="u/growth_hacker",
        rating=5,
        text="We boosted conversions by 3x in a week.",
        created_at=datetime(2024, 9, 5, tzinfo=timezone.utc),
    ),
)

FALLBACK_STATS = ReviewStats(total_reviews=1248, avg_rating=4.9, trust_score=98)


def mention_to_item(mention: Mention) -> ReviewItem:
    return ReviewItem(
        source=mention.source,
        author=mention.author,
        rating=None,
        text=mention.text,
        date=mention.date,
        link=mention.link,
    )


async def seed_demo_data(session: AsyncSession) -> None:
    """Insert bundled reviews and the demo widget into empty tables."""
    review_count = await session.scalar(select(func.count()).select_from(Review))
    if not review_count:
        session.add_all(
            Review(
                source=r.source,
                author=r.author,
                rating=r.rating,
                text=r.text,
                created_at=r.created_at,
            )
            for r in FALLBACK_REVIEWS
        )
        logger.info(f"Seeded {len(FALLBACK_REVIEWS)} demo reviews")

    widget_count = await session.scalar(select(func.count()).select_from(Widget))
    if not widget_count:
        session.add(Widget(id=DEMO_WIDGET_ID, name=DEMO_WIDGET_NAME))
    await session.flush()


async def _load_stored_reviews(limit: int) -> list[ReviewItem]:
    if not is_db_ready():
        return []
    try:
        await ensure_schema()
        async with get_session() as session:
            result = await session.execute(
                select(Review).order_by(Review.created_at.desc()).limit(limit)
            )
            rows = result.scalars().all()
    except Exception:
        logger.exception("Failed to fetch reviews from database, falling back to static data")
        return []

    return [
        ReviewItem(
            source=row.source,
            author=row.author,
            rating=row.rating,
            text=row.text,
            date=to_display_date(row.created_at),
        )
        for row in rows
    ]


async def get_reviews(limit: int = 12) -> list[ReviewItem]:
    """Stored reviews + generic external mentions + bundled reviews, up to `limit`.

    Args:
        limit: Maximum number of entries.

    Returns:
        At least min(limit, len(FALLBACK_REVIEWS)) entries, even with no
        database and no network.
    """
    if limit <= 0:
        return []

    stored, external = await settle_all(
        _load_stored_reviews(limit),
        fetch_external_mentions(limit),
    )
    if external.error is not None:
        logger.warning(f"External mentions unavailable: {external.error!r}")

    fallback = [r.to_item() for r in FALLBACK_REVIEWS[:limit]]
    combined = [
        *stored.value_or([]),
        *(mention_to_item(m) for m in external.value_or([])),
        *fallback,
    ]
    return combined[:limit]


async def get_stats() -> ReviewStats:
    """Review totals and rating-based trust score; fixed demo stats without a store."""
    if not is_db_ready():
        return FALLBACK_STATS

    try:
        await ensure_schema()
        async with get_session() as session:
            result = await session.execute(
                select(func.count(Review.id), func.coalesce(func.avg(Review.rating), 0))
            )
            total, avg = result.one()
    except Exception:
        logger.exception("Failed to fetch stats from database, using fallback")
        return FALLBACK_STATS

    avg_rating = round(float(avg or 0), 2)
    return ReviewStats(
        total_reviews=int(total or 0),
        avg_rating=avg_rating,
        trust_score=calculate_rating_trust_score(avg_rating),
    )
