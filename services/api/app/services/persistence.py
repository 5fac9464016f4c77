"""Best-effort persistence of fetched mentions.

Rules:
- No store configured -> skip silently
- Each mention is inserted in its own transaction with ON CONFLICT DO NOTHING,
  so an existing (source, link) row is not an error
- A failing insert is logged and the loop continues
- Schema bootstrap failure raises PersistenceError; callers log and move on
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from redis.exceptions import RedisError
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError

from app.models import MentionRecord
from app.services.errors import PersistenceError
from app.services.mentions import Mention
from app.stores.postgres import ensure_schema, get_session, is_db_ready

logger = logging.getLogger("uvicorn.error")


async def store_mentions(mentions: Sequence[Mention]) -> int:
    """Persist mentions, skipping duplicates.

    Args:
        mentions: Deduplicated mentions to write.

    Returns:
        Number of mentions whose insert did not fail (conflicts included).

    Raises:
        PersistenceError: If the schema could not be ensured.
    """
    if not mentions or not is_db_ready():
        return 0

    try:
        await ensure_schema()
    except (SQLAlchemyError, RedisError, OSError, RuntimeError) as e:
        raise PersistenceError(f"schema bootstrap failed: {e}") from e

    written = 0
    for mention in mentions:
        try:
            await _insert_mention(mention)
            written += 1
        except PersistenceError as e:
            logger.warning(f"Failed to store mention {mention.source} {mention.link}: {e}")
    return written


async def _insert_mention(mention: Mention) -> None:
    stmt = (
        pg_insert(MentionRecord)
        .values(
            source=mention.source,
            author=mention.author or None,
            title=mention.title or None,
            text=mention.text or None,
            link=mention.link or None,
            created_at=mention.created_at or datetime.now(timezone.utc),
        )
        .on_conflict_do_nothing()
    )
    try:
        async with get_session() as session:
            await session.execute(stmt)
    except (SQLAlchemyError, OSError) as e:
        raise PersistenceError(str(e)) from e
