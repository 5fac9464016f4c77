"""Mention source adapters (Hacker News, Reddit, GNews).

Each adapter turns (query, limit) into at most `limit` normalized mentions,
in the provider's own order. Adapters never swallow errors:
- transport failure / non-2xx status -> FetchError
- body that is not the expected JSON shape -> ParseError

The aggregator decides what a failure means (an empty contribution).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

import httpx

from app.services.errors import FetchError, ParseError
from app.services.mentions import Mention, MentionSource, normalize_mention

logger = logging.getLogger("uvicorn.error")

DEFAULT_QUERY = "reviews"
DEFAULT_USER_AGENT = "instantproof-widget"
DEFAULT_SUBREDDITS = ("entrepreneur", "smallbusiness", "saas")


@runtime_checkable
class MentionProvider(Protocol):
    """Anything the aggregator can fan out to."""

    name: str

    async def fetch(self, query: str, limit: int) -> list[Mention]: ...


class MentionSourceClient:
    """Shared HTTP plumbing for one external mention provider.

    The httpx client is owned by the caller (see aggregator.open_aggregator),
    so adapters never close it.
    """

    name: str = MentionSource.UNKNOWN.value
    BASE_URL: str = ""

    @property
    def search_url(self) -> str:
        return self.BASE_URL

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._http_client = http_client
        self.user_agent = user_agent

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self._http_client.get(
                url,
                params=params,
                headers={"User-Agent": self.user_agent},
            )
        except httpx.HTTPError as e:
            raise FetchError(self.name, f"request failed: {e!r}") from e

        if not resp.is_success:
            raise FetchError(self.name, f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ParseError(self.name, "response body is not JSON") from e
        if not isinstance(data, dict):
            raise ParseError(self.name, f"expected JSON object, got {type(data).__name__}")
        return data


def _effective_query(query: str) -> str:
    return (query or "").strip() or DEFAULT_QUERY


def _records(container: dict[str, Any], key: str, source: str) -> list[Any]:
    value = container.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParseError(source, f"'{key}' is not a list")
    return value


class HackerNewsClient(MentionSourceClient):
    """Hacker News stories via the Algolia search API."""

    name = MentionSource.HACKER_NEWS.value
    BASE_URL = "https://hn.algolia.com/api/v1/search"
    ITEM_URL = "https://news.ycombinator.com/item?id="
    PLACEHOLDER_TITLE = "Mention on Hacker News"

    async def fetch(self, query: str, limit: int) -> list[Mention]:
        if limit <= 0:
            return []
        data = await self._get_json(
            self.search_url,
            {
                "query": _effective_query(query),
                "tags": "story",
                "hitsPerPage": max(10, limit * 2),
            },
        )
        hits = _records(data, "hits", self.name)
        now = datetime.now(timezone.utc)
        return [self._parse_hit(hit, now) for hit in hits[:limit] if isinstance(hit, dict)]

    def _parse_hit(self, item: dict[str, Any], now: datetime) -> Mention:
        title = item.get("title") or self.PLACEHOLDER_TITLE
        link = item.get("url")
        if not link and item.get("objectID"):
            link = f"{self.ITEM_URL}{item['objectID']}"
        return normalize_mention(
            {
                "source": self.name,
                "author": item.get("author") or "hn-user",
                "title": title,
                "text": item.get("story_text") or item.get("title") or self.PLACEHOLDER_TITLE,
                "link": link,
                "created_at": item.get("created_at"),
            },
            now=now,
        )


class RedditClient(MentionSourceClient):
    """Reddit posts from a fixed set of communities via the public search JSON."""

    name = MentionSource.REDDIT.value
    PERMALINK_BASE = "https://reddit.com"
    PLACEHOLDER_TITLE = "Mention on Reddit"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        subreddits: list[str] | tuple[str, ...] = DEFAULT_SUBREDDITS,
        **kwargs: Any,
    ):
        super().__init__(http_client, **kwargs)
        self.subreddits = tuple(subreddits) or DEFAULT_SUBREDDITS

    @property
    def search_url(self) -> str:
        return f"https://www.reddit.com/r/{'+'.join(self.subreddits)}/search.json"

    async def fetch(self, query: str, limit: int) -> list[Mention]:
        if limit <= 0:
            return []
        data = await self._get_json(
            self.search_url,
            {
                "q": _effective_query(query),
                "sort": "new",
                "restrict_sr": "on",
            },
        )
        listing = data.get("data") or {}
        if not isinstance(listing, dict):
            raise ParseError(self.name, "'data' is not an object")
        children = _records(listing, "children", self.name)
        posts = [c.get("data") for c in children if isinstance(c, dict)]
        posts = [p for p in posts if isinstance(p, dict) and p]
        now = datetime.now(timezone.utc)
        return [self._parse_post(post, now) for post in posts[:limit]]

    def _parse_post(self, post: dict[str, Any], now: datetime) -> Mention:
        title = post.get("title") or self.PLACEHOLDER_TITLE
        permalink = post.get("permalink")
        return normalize_mention(
            {
                "source": self.name,
                "author": post.get("author") or "reddit-user",
                "title": title,
                "text": title,
                "link": f"{self.PERMALINK_BASE}{permalink}" if permalink else None,
                # created_utc is epoch seconds
                "created_at": post.get("created_utc"),
            },
            now=now,
        )


class NewsClient(MentionSourceClient):
    """News articles via the GNews search API. Requires an API key."""

    name = MentionSource.NEWS.value
    BASE_URL = "https://gnews.io/api/v4/search"
    PLACEHOLDER_TITLE = "News mention"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        api_key: str = "",
        **kwargs: Any,
    ):
        super().__init__(http_client, **kwargs)
        self.api_key = api_key

    async def fetch(self, query: str, limit: int) -> list[Mention]:
        if not self.api_key:
            logger.debug("GNews key not configured, skipping news mentions")
            return []
        if limit <= 0:
            return []
        data = await self._get_json(
            self.search_url,
            {
                "q": _effective_query(query),
                "lang": "en",
                "max": max(5, limit),
                "token": self.api_key,
            },
        )
        articles = _records(data, "articles", self.name)
        now = datetime.now(timezone.utc)
        return [
            self._parse_article(article, now)
            for article in articles[:limit]
            if isinstance(article, dict)
        ]

    def _parse_article(self, article: dict[str, Any], now: datetime) -> Mention:
        outlet = article.get("source")
        outlet_name = outlet.get("name") if isinstance(outlet, dict) else None
        title = article.get("title") or self.PLACEHOLDER_TITLE
        return normalize_mention(
            {
                "source": self.name,
                "author": outlet_name or article.get("author") or "newswire",
                "title": title,
                "text": article.get("description") or article.get("title") or self.PLACEHOLDER_TITLE,
                "link": article.get("url"),
                "created_at": article.get("publishedAt"),
            },
            now=now,
        )
