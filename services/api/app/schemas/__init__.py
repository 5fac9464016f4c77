"""Pydantic schemas for API request/response validation."""

from app.schemas.common import ErrorDetail, ErrorResponse
from app.schemas.reviews import (
    ReviewOut,
    ReviewsResponse,
    StatsOut,
    WidgetOut,
    WidgetResponse,
)
from app.schemas.search import MentionOut, SearchResponse, TrustScoreOut

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "MentionOut",
    "ReviewOut",
    "ReviewsResponse",
    "SearchResponse",
    "StatsOut",
    "TrustScoreOut",
    "WidgetOut",
    "WidgetResponse",
]
