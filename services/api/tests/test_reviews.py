"""Tests for the reviews feed, stats and widget config."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services import reviews as reviews_service
from app.services.errors import FetchError
from app.services.reviews import FALLBACK_REVIEWS, FALLBACK_STATS, get_reviews, get_stats
from app.services.widget import build_widget_config, get_widget_config


@pytest.fixture
def external(monkeypatch: pytest.MonkeyPatch):
    """Replace the generic mention fetch; returns a list to fill per test."""
    mentions: list = []

    async def fake_fetch_external_mentions(limit: int = 6):
        return list(mentions)

    monkeypatch.setattr(reviews_service, "fetch_external_mentions", fake_fetch_external_mentions)
    return mentions


class TestGetReviews:
    @pytest.mark.asyncio
    async def test_never_empty_without_store_or_network(self, external):
        items = await get_reviews(12)
        assert len(items) == len(FALLBACK_REVIEWS)
        assert [i.author for i in items] == [r.author for r in FALLBACK_REVIEWS]
        assert all(i.rating is not None for i in items)

    @pytest.mark.asyncio
    async def test_external_mentions_come_before_fallback(self, external, make_mention):
        external.extend(
            make_mention(source="HackerNews", link=f"https://example.com/{i}") for i in range(3)
        )
        items = await get_reviews(5)

        assert len(items) == 5
        assert [i.source for i in items[:3]] == ["HackerNews"] * 3
        assert items[0].rating is None
        assert items[0].link == "https://example.com/0"
        assert items[3].author == "Sarah M."

    @pytest.mark.asyncio
    async def test_limit_smaller_than_fallback(self, external):
        items = await get_reviews(2)
        assert [i.author for i in items] == ["Sarah M.", "John D."]

    @pytest.mark.asyncio
    async def test_zero_limit(self, external):
        assert await get_reviews(0) == []

    @pytest.mark.asyncio
    async def test_external_failure_still_returns_fallback(self, monkeypatch):
        async def failing_fetch(limit: int = 6):
            raise FetchError("HackerNews", "down")

        monkeypatch.setattr(reviews_service, "fetch_external_mentions", failing_fetch)
        items = await get_reviews(12)
        assert len(items) == len(FALLBACK_REVIEWS)


@pytest.mark.asyncio
async def test_stats_fallback_without_store():
    stats = await get_stats()
    assert stats == FALLBACK_STATS
    assert (stats.total_reviews, stats.avg_rating, stats.trust_score) == (1248, 4.9, 98)


class TestWidgetConfig:
    def test_snippet_for_host(self):
        config = build_widget_config("w1", "proof.example.com")
        assert config.snippet == (
            '<script src="https://proof.example.com/api/widget-embed.js?id=w1" defer></script>'
        )
        assert config.share_url == "https://proof.example.com"

    def test_explicit_scheme_is_kept(self):
        config = build_widget_config("w1", "http://localhost:3001")
        assert config.share_url == "http://localhost:3001"

    def test_public_base_url_when_no_host(self, monkeypatch: pytest.MonkeyPatch):
        from app.settings import get_settings

        monkeypatch.setenv("PUBLIC_BASE_URL", "widgets.example.com")
        get_settings.cache_clear()
        config = build_widget_config("w1", None)
        assert config.share_url == "https://widgets.example.com"

    def test_default_share_url_without_any_host(self):
        config = build_widget_config("w1", "")
        assert config.snippet == '<script src="/api/widget-embed.js?id=w1" defer></script>'
        assert config.share_url == "https://instantproof.app"

    @pytest.mark.asyncio
    async def test_demo_widget_without_store(self):
        config = await get_widget_config("proof.example.com")
        assert config.id == "demo-widget"


class FakeResult:
    def __init__(self, row=None, rows=None):
        self._row = row
        self._rows = rows or []

    def one(self):
        return self._row

    def scalars(self):
        return self

    def all(self):
        return self._rows


class FakeSession:
    def __init__(self, result):
        self.result = result
        self.statements = []

    async def execute(self, stmt):
        self.statements.append(stmt)
        return self.result


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch):
    """Pretend a database is configured; tests set `store.result`."""
    state = SimpleNamespace(result=FakeResult(), sessions=[])

    async def fake_ensure_schema():
        return None

    @asynccontextmanager
    async def fake_get_session():
        session = FakeSession(state.result)
        state.sessions.append(session)
        yield session

    monkeypatch.setattr(reviews_service, "is_db_ready", lambda: True)
    monkeypatch.setattr(reviews_service, "ensure_schema", fake_ensure_schema)
    monkeypatch.setattr(reviews_service, "get_session", fake_get_session)
    return state


class TestStoredReviews:
    @pytest.mark.asyncio
    async def test_stats_from_store_round_to_two_decimals(self, store):
        store.result = FakeResult(row=(3, Decimal("4.3333333333")))
        stats = await get_stats()

        assert stats.total_reviews == 3
        assert stats.avg_rating == 4.33
        assert stats.trust_score == 87

    @pytest.mark.asyncio
    async def test_stats_for_empty_table(self, store):
        store.result = FakeResult(row=(0, 0))
        stats = await get_stats()
        assert (stats.total_reviews, stats.avg_rating, stats.trust_score) == (0, 0.0, 0)

    @pytest.mark.asyncio
    async def test_stats_fall_back_when_store_fails(self, store):
        store.result = FakeResult(row=None)
        assert await get_stats() == FALLBACK_STATS

    @pytest.mark.asyncio
    async def test_stored_reviews_come_first_and_are_not_seeded_per_request(self, store, external):
        row = SimpleNamespace(
            source="Google",
            author="Dana K.",
            rating=4,
            text="Solid.",
            created_at=datetime(2024, 11, 2, tzinfo=timezone.utc),
        )
        store.result = FakeResult(rows=[row])

        items = await get_reviews(3)

        assert [i.author for i in items] == ["Dana K.", "Sarah M.", "John D."]
        assert items[0].date == "Nov 2, 2024"
        # One read, no count/insert statements from seeding
        assert [len(s.statements) for s in store.sessions] == [1]
