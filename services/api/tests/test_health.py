"""Tests for HTTP endpoints."""

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.services.aggregator import SearchResult
from app.services.trust import calculate_trust_score


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def no_external_mentions(monkeypatch: pytest.MonkeyPatch):
    """Keep the reviews feed off the network."""
    from app.services import reviews as reviews_service

    async def fake_fetch_external_mentions(limit: int = 6):
        return []

    monkeypatch.setattr(reviews_service, "fetch_external_mentions", fake_fetch_external_mentions)


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health endpoint returns ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_search_requires_query(client: AsyncClient):
    response = await client.get("/api/search", params={"q": "   "})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_QUERY"

    response = await client.get("/api/search")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_search_returns_camel_case_payload(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch, make_mention
):
    from app.routes import search as search_routes

    created = datetime(2024, 10, 10, tzinfo=timezone.utc)
    seen: list[tuple[str, int]] = []

    async def fake_search_mentions(query: str, limit: int = 10) -> SearchResult:
        seen.append((query, limit))
        mentions = [make_mention(source="Reddit", created_at=created)]
        return SearchResult(
            mentions=mentions,
            total=1,
            trust_score=calculate_trust_score(mentions, now=created),
        )

    monkeypatch.setattr(search_routes, "search_mentions", fake_search_mentions)

    response = await client.get("/api/search", params={"query": " acme "})
    assert response.status_code == 200
    assert seen == [("acme", 12)]

    data = response.json()
    assert data["total"] == 1
    assert data["mentions"][0]["source"] == "Reddit"
    assert data["mentions"][0]["date"] == "Oct 10, 2024"
    trust = data["trustScore"]
    assert trust["score"] == 45 + 3 + 20
    assert trust["sourceCount"] == 1
    assert trust["freshestDays"] == 0
    assert "calculatedAt" in trust


@pytest.mark.asyncio
async def test_reviews_without_store(client: AsyncClient, no_external_mentions):
    response = await client.get("/api/reviews")
    assert response.status_code == 200

    data = response.json()
    assert 4 <= len(data["reviews"]) <= 12
    assert data["reviews"][0]["author"] == "Sarah M."
    assert data["reviews"][0]["date"] == "Oct 12, 2024"
    assert data["stats"] == {"totalReviews": 1248, "avgRating": 4.9, "trustScore": 98}


@pytest.mark.asyncio
async def test_widget_snippet_uses_request_host(client: AsyncClient):
    response = await client.get("/api/widget")
    assert response.status_code == 200

    widget = response.json()["widget"]
    assert widget["id"] == "demo-widget"
    assert widget["snippet"] == (
        '<script src="https://test/api/widget-embed.js?id=demo-widget" defer></script>'
    )
    assert widget["shareUrl"] == "https://test"


@pytest.mark.asyncio
async def test_long_query_is_not_rejected(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    from app.routes import search as search_routes
    from app.services.aggregator import empty_search_result

    seen: list[str] = []

    async def fake_search_mentions(query: str, limit: int = 10) -> SearchResult:
        seen.append(query)
        return empty_search_result()

    monkeypatch.setattr(search_routes, "search_mentions", fake_search_mentions)

    long_query = "acme " * 100
    response = await client.get("/api/search", params={"q": long_query})
    assert response.status_code == 200
    assert seen == [long_query.strip()]
