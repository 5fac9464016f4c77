"""Review model.

Stored first-party reviews shown by the reviews feed and widget.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class Review(Base):
    """A rated review from a named source (Google, Facebook, ...)."""

    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="reviews_rating_check"),)

    id: Mapped[int] = mapped_column(primary_key=True)

    source: Mapped[str] = mapped_column(Text)
    author: Mapped[str] = mapped_column(Text)
    rating: Mapped[int] = mapped_column(Integer)
    text: Mapped[str] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Review {self.source} {self.author} ({self.rating})>"
