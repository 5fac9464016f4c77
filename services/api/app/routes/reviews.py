"""Reviews feed and widget configuration endpoints.

GET /api/reviews - feed entries + rating stats
GET /api/widget  - embed snippet + rating stats for the requesting host
"""

import asyncio

from fastapi import APIRouter, Request

from app.schemas import ReviewOut, ReviewsResponse, StatsOut, WidgetOut, WidgetResponse
from app.services.reviews import get_reviews, get_stats
from app.services.widget import get_widget_config

router = APIRouter()

REVIEWS_LIMIT = 12


@router.get("/reviews", response_model=ReviewsResponse)
async def list_reviews() -> ReviewsResponse:
    """Reviews feed; never empty thanks to bundled fallback reviews."""
    reviews, stats = await asyncio.gather(get_reviews(REVIEWS_LIMIT), get_stats())
    return ReviewsResponse(
        reviews=[ReviewOut.from_item(item) for item in reviews],
        stats=StatsOut.from_stats(stats),
    )


@router.get("/widget", response_model=WidgetResponse)
async def widget_config(request: Request) -> WidgetResponse:
    """Embed snippet pointing at this host."""
    hostname = request.headers.get("host", "")
    widget, stats = await asyncio.gather(get_widget_config(hostname), get_stats())
    return WidgetResponse(
        widget=WidgetOut.from_config(widget),
        stats=StatsOut.from_stats(stats),
    )
