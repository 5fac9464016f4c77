"""Widget configuration: embed snippet and share URL."""

import logging
from dataclasses import dataclass

from sqlalchemy import select

from app.models import Widget
from app.services.reviews import DEMO_WIDGET_ID
from app.settings import get_settings
from app.stores.postgres import ensure_schema, get_session, is_db_ready

logger = logging.getLogger("uvicorn.error")

DEFAULT_SHARE_URL = "https://instantproof.app"
EMBED_PATH = "/api/widget-embed.js"


@dataclass(frozen=True)
class WidgetConfig:
    id: str
    snippet: str
    share_url: str


def _base_url(hostname: str | None) -> str:
    host = (hostname or get_settings().public_base_url or "").strip()
    if not host:
        return ""
    return host if host.startswith("http") else f"https://{host}"


def build_widget_config(widget_id: str, hostname: str | None) -> WidgetConfig:
    base = _base_url(hostname)
    src = f"{base}{EMBED_PATH}?id={widget_id}"
    return WidgetConfig(
        id=widget_id,
        snippet=f'<script src="{src}" defer></script>',
        share_url=base or DEFAULT_SHARE_URL,
    )


async def get_widget_config(hostname: str | None = None) -> WidgetConfig:
    """Config for the first stored widget, or the demo widget without a store."""
    if not is_db_ready():
        return build_widget_config(DEMO_WIDGET_ID, hostname)

    try:
        await ensure_schema()
        async with get_session() as session:
            widget_id = await session.scalar(select(Widget.id).limit(1))
    except Exception:
        logger.exception("Failed to fetch widget config, using fallback")
        return build_widget_config(DEMO_WIDGET_ID, hostname)

    return build_widget_config(widget_id or DEMO_WIDGET_ID, hostname)
