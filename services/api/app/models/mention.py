"""MentionRecord model.

Write-only log of deduplicated external mentions. Nothing in the API reads
these rows back; trust scores always come from the live fetch.

At most one row per (source, link), enforced by mentions_source_link_idx.
Rows with a NULL link are never considered duplicates by Postgres.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class MentionRecord(Base):
    """Persisted copy of a normalized mention."""

    __tablename__ = "mentions"
    __table_args__ = (Index("mentions_source_link_idx", "source", "link", unique=True),)

    id: Mapped[int] = mapped_column(primary_key=True)

    source: Mapped[str] = mapped_column(Text)
    author: Mapped[str | None] = mapped_column(Text)
    title: Mapped[str | None] = mapped_column(Text)
    text: Mapped[str | None] = mapped_column(Text)
    link: Mapped[str | None] = mapped_column(Text)

    # When the mention was published upstream
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    # When we stored it
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<MentionRecord {self.source} {self.link}>"
