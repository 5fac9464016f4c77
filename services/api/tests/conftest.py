"""Shared test fixtures.

Tests run without Postgres, Redis or network: settings are reset to an
empty environment and outbound HTTP is always mocked.
"""

from datetime import datetime, timezone

import pytest

from app.services.mentions import Mention, to_display_date
from app.settings import get_settings

_ENV_VARS = (
    "DATABASE_URL",
    "POSTGRES_URL",
    "POSTGRES_URL_NON_POOLING",
    "REDIS_URL",
    "GNEWS_API_KEY",
    "PUBLIC_BASE_URL",
    "CORS_ORIGINS",
    "ALLOWED_ORIGINS",
    "REDDIT_SUBREDDITS",
    "MENTIONS_USER_AGENT",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _make_mention(
    source: str = "HackerNews",
    title: str = "Some title",
    link: str | None = "https://example.com/a",
    created_at: datetime | None = None,
    author: str = "someone",
    text: str | None = None,
) -> Mention:
    return Mention(
        source=source,
        author=author,
        title=title,
        text=text if text is not None else title,
        link=link,
        created_at=created_at,
        date=to_display_date(created_at),
    )


@pytest.fixture
def make_mention():
    """Factory for Mention objects with sensible defaults."""
    return _make_mention


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 10, 12, 12, 0, tzinfo=timezone.utc)
