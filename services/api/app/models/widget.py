"""Widget model."""

from datetime import datetime

from sqlalchemy import DateTime, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class Widget(Base):
    """An embeddable widget, addressed by a public text id (e.g. "demo-widget")."""

    __tablename__ = "widgets"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Widget {self.id}>"
