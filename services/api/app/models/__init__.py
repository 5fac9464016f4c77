"""SQLAlchemy ORM models.

Models represent database tables:
- reviews: Stored first-party reviews (rating 1-5)
- widgets: Embeddable widget ids
- mentions: Write-only log of external mentions, unique on (source, link)
"""

from app.models.mention import MentionRecord
from app.models.review import Review
from app.models.widget import Widget

__all__ = ["MentionRecord", "Review", "Widget"]
