"""Mention normalization and de-duplication.

Every source adapter hands raw records to normalize_mention() so the rest of
the pipeline only ever sees one shape.

Dedup key:
- (source, link, title-or-text), each lowercased
- Typed tuple rather than a joined string, so a "|" inside a title can never
  make two different mentions collide
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, NamedTuple


class MentionSource(str, Enum):
    """Where a mention was found."""

    HACKER_NEWS = "HackerNews"
    REDDIT = "Reddit"
    NEWS = "News"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Mention:
    """A normalized third-party reference to the business."""

    source: str
    author: str
    title: str
    text: str
    link: str | None
    created_at: datetime | None
    date: str


class MentionKey(NamedTuple):
    source: str
    link: str
    title: str


def to_display_date(value: datetime | None) -> str:
    """Render a timestamp as e.g. "Oct 12, 2024" (UTC)."""
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value:%b} {value.day}, {value.year}"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string, epoch seconds, or datetime into an aware datetime.

    Returns None when the value cannot be interpreted.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def normalize_mention(raw: dict[str, Any], *, now: datetime | None = None) -> Mention:
    """Build a Mention from a loosely shaped record.

    Missing created_at defaults to `now`; a present but unparsable one yields
    a mention without timestamp.
    """
    raw_created = raw.get("created_at")
    if raw_created is None or raw_created == "":
        created_at = now or datetime.now(timezone.utc)
    else:
        created_at = parse_timestamp(raw_created)

    title = raw.get("title") or raw.get("text") or ""
    text = raw.get("text") or raw.get("title") or ""

    return Mention(
        source=raw.get("source") or MentionSource.UNKNOWN.value,
        author=raw.get("author") or "",
        title=str(title),
        text=str(text),
        link=raw.get("link") or None,
        created_at=created_at,
        date=to_display_date(created_at),
    )


def mention_key(mention: Mention) -> MentionKey:
    return MentionKey(
        source=(mention.source or "").lower(),
        link=(mention.link or "").lower(),
        title=(mention.title or mention.text or "").lower(),
    )


def dedupe_mentions(mentions: Iterable[Mention]) -> list[Mention]:
    """Drop repeated mentions, keeping the first one seen.

    A mention whose key is blank in every component is dropped as well.
    """
    seen: set[MentionKey] = set()
    out: list[Mention] = []
    for mention in mentions:
        key = mention_key(mention)
        if not any(part.strip() for part in key):
            continue
        if key in seen:
            continue
        seen.add(key)
        out.append(mention)
    return out
