"""Schemas for the reviews and widget endpoints."""

from pydantic import BaseModel, Field

from app.services.reviews import ReviewItem, ReviewStats
from app.services.widget import WidgetConfig


class ReviewOut(BaseModel):
    """A feed entry. Rating is null for external mentions."""

    source: str
    author: str
    rating: int | None = Field(default=None, ge=1, le=5)
    text: str
    date: str
    link: str | None = None

    @classmethod
    def from_item(cls, item: ReviewItem) -> "ReviewOut":
        return cls(
            source=item.source,
            author=item.author,
            rating=item.rating,
            text=item.text,
            date=item.date,
            link=item.link,
        )


class StatsOut(BaseModel):
    total_reviews: int = Field(alias="totalReviews", ge=0)
    avg_rating: float = Field(alias="avgRating", ge=0, le=5)
    trust_score: int = Field(alias="trustScore", ge=0, le=100)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_stats(cls, stats: ReviewStats) -> "StatsOut":
        return cls(
            total_reviews=stats.total_reviews,
            avg_rating=stats.avg_rating,
            trust_score=stats.trust_score,
        )


class ReviewsResponse(BaseModel):
    """Response payload for GET /api/reviews."""

    reviews: list[ReviewOut]
    stats: StatsOut


class WidgetOut(BaseModel):
    id: str
    snippet: str
    share_url: str = Field(alias="shareUrl")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_config(cls, config: WidgetConfig) -> "WidgetOut":
        return cls(id=config.id, snippet=config.snippet, share_url=config.share_url)


class WidgetResponse(BaseModel):
    """Response payload for GET /api/widget."""

    widget: WidgetOut
    stats: StatsOut
