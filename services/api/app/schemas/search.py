"""Schemas for the mention search endpoint (/api/search)."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.services.aggregator import SearchResult
from app.services.mentions import Mention
from app.services.trust import TrustScore


class MentionOut(BaseModel):
    """A normalized external mention."""

    source: str
    author: str
    title: str
    text: str
    link: str | None = None
    created_at: datetime | None = None
    date: str

    @classmethod
    def from_mention(cls, m: Mention) -> "MentionOut":
        return cls(
            source=m.source,
            author=m.author,
            title=m.title,
            text=m.text,
            link=m.link,
            created_at=m.created_at,
            date=m.date,
        )


class TrustScoreOut(BaseModel):
    """Heuristic trust score computed from the returned mentions."""

    score: int = Field(ge=0, le=99)
    volume: int = Field(ge=0)
    source_count: int = Field(alias="sourceCount", ge=1)
    freshest_days: int | None = Field(alias="freshestDays", default=None)
    calculated_at: datetime = Field(alias="calculatedAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_trust_score(cls, t: TrustScore) -> "TrustScoreOut":
        return cls(
            score=t.score,
            volume=t.volume,
            source_count=t.source_count,
            freshest_days=t.freshest_days,
            calculated_at=t.calculated_at,
        )


class SearchResponse(BaseModel):
    """Response payload for GET /api/search."""

    mentions: list[MentionOut]
    total: int = Field(ge=0)
    trust_score: TrustScoreOut = Field(alias="trustScore")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResponse":
        return cls(
            mentions=[MentionOut.from_mention(m) for m in result.mentions],
            total=result.total,
            trust_score=TrustScoreOut.from_trust_score(result.trust_score),
        )
