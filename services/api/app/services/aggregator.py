"""Mention aggregation: sources → settle-all → dedup → truncate → persist → score.

Flow for search():
1. Blank query -> empty result, no network calls
2. Query Hacker News and Reddit (and GNews when a key is configured)
   concurrently; a failing source contributes nothing
3. Concatenate in provider order, dedupe (first seen wins)
4. Truncate to `limit`
5. Best-effort persist (errors logged, never raised)
6. Score the surviving mentions

fetch_external() is the decorative variant used by the reviews feed: fixed
query, free sources only, no persistence, no score.
"""

import logging
import math
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from app.settings import Settings, get_settings
from app.services.errors import FetchError, PersistenceError
from app.services.mentions import Mention, dedupe_mentions
from app.services.persistence import store_mentions
from app.services.settle import settle_all
from app.services.sources import (
    DEFAULT_QUERY,
    HackerNewsClient,
    MentionProvider,
    MentionSourceClient,
    NewsClient,
    RedditClient,
)
from app.services.trust import TrustScore, calculate_trust_score

logger = logging.getLogger("uvicorn.error")

PersistFn = Callable[[Sequence[Mention]], Awaitable[int]]


@dataclass
class SearchResult:
    mentions: list[Mention]
    total: int
    trust_score: TrustScore


def empty_search_result() -> SearchResult:
    return SearchResult(mentions=[], total=0, trust_score=calculate_trust_score([]))


class MentionAggregator:
    """Fan out to a fixed, ordered set of mention sources."""

    def __init__(
        self,
        sources: Sequence[MentionProvider],
        *,
        persist: PersistFn | None = store_mentions,
    ):
        self.sources = list(sources)
        self._persist = persist

    async def search(self, query: str, limit: int = 10) -> SearchResult:
        """Search all sources for `query` and score what comes back.

        Args:
            query: Business name or keyword.
            limit: Maximum number of mentions returned.

        Returns:
            SearchResult with deduplicated mentions, total and trust score.
        """
        q = (query or "").strip()
        if not q:
            return empty_search_result()

        combined = await self._collect(q, limit)
        mentions = dedupe_mentions(combined)[: max(0, limit)]
        logger.info(f"Mention search query={q!r}: {len(combined)} fetched, {len(mentions)} kept")

        await self._try_persist(mentions)

        return SearchResult(
            mentions=mentions,
            total=len(mentions),
            trust_score=calculate_trust_score(mentions),
        )

    async def fetch_external(self, limit: int = 6, query: str = DEFAULT_QUERY) -> list[Mention]:
        """Fetch a few generic mentions; each source is asked for ceil(limit / 2)."""
        if limit <= 0:
            return []
        per_source = math.ceil(limit / 2)
        combined = await self._collect(query, per_source)
        return dedupe_mentions(combined)[:limit]

    async def _collect(self, query: str, limit: int) -> list[Mention]:
        settled = await settle_all(*(source.fetch(query, limit) for source in self.sources))

        combined: list[Mention] = []
        for source, res in zip(self.sources, settled):
            if res.error is not None:
                if isinstance(res.error, FetchError):
                    logger.warning(f"{source.name} fetch failed: {res.error}")
                else:
                    logger.error(f"{source.name} fetch crashed: {res.error!r}")
                continue
            combined.extend(res.value_or([]))
        return combined

    async def _try_persist(self, mentions: list[Mention]) -> None:
        if self._persist is None or not mentions:
            return
        try:
            await self._persist(mentions)
        except PersistenceError as e:
            logger.warning(f"Mention persistence skipped: {e}")


def build_sources(
    client: httpx.AsyncClient,
    settings: Settings,
    *,
    include_news: bool = True,
) -> list[MentionSourceClient]:
    """Sources in provider order: Hacker News, Reddit, then GNews if keyed."""
    ua = settings.mentions_user_agent
    sources: list[MentionSourceClient] = [
        HackerNewsClient(client, user_agent=ua),
        RedditClient(client, subreddits=settings.reddit_subreddits, user_agent=ua),
    ]
    if include_news and settings.gnews_api_key:
        sources.append(NewsClient(client, api_key=settings.gnews_api_key, user_agent=ua))
    return sources


@asynccontextmanager
async def open_aggregator(
    settings: Settings | None = None,
    *,
    include_news: bool = True,
    persist: PersistFn | None = store_mentions,
) -> AsyncIterator[MentionAggregator]:
    """Aggregator whose sources share one HTTP client for the duration of the block."""
    settings = settings or get_settings()
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield MentionAggregator(
            build_sources(client, settings, include_news=include_news),
            persist=persist,
        )


async def search_mentions(query: str, limit: int = 10) -> SearchResult:
    """Search external mentions for a business and compute its trust score."""
    if not (query or "").strip():
        return empty_search_result()
    async with open_aggregator() as aggregator:
        return await aggregator.search(query, limit)


async def fetch_external_mentions(limit: int = 6) -> list[Mention]:
    """Generic mentions for the reviews feed. Never raises on source failure."""
    async with open_aggregator(include_news=False, persist=None) as aggregator:
        return await aggregator.fetch_external(limit)
