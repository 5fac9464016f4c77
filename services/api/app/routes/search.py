"""Mention search endpoint.

GET /api/search?q=... - external mentions + trust score for a business.

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Query

from app.schemas import ErrorResponse, SearchResponse
from app.services.aggregator import search_mentions
from app.services.errors import ValidationError

router = APIRouter()

SEARCH_LIMIT = 12


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse, "description": "Missing query"}},
)
async def search(
    q: str | None = Query(
        default=None,
        description="Business name or keyword",
        examples=["instantproof"],
    ),
    query: str | None = Query(
        default=None,
        description="Alias for q",
    ),
) -> SearchResponse:
    """Search Hacker News, Reddit and (optionally) GNews for mentions.

    Raises:
        ValidationError: If the query is missing or blank (HTTP 400).
    """
    term = (q or query or "").strip()
    if not term:
        raise ValidationError("MISSING_QUERY", "Missing query")

    result = await search_mentions(term, SEARCH_LIMIT)
    return SearchResponse.from_result(result)
