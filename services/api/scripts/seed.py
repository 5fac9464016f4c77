#!/usr/bin/env python3
"""Seed database with demo data.

Creates (only when the tables are empty):
- The bundled demo reviews (same set the API falls back to without a store)
- The "demo-widget" widget

Tables are created first if missing, so this also works on a fresh database
without running Alembic.

Usage:
    cd services/api
    python -m scripts.seed
"""

import asyncio
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402
from sqlalchemy import func, select  # noqa: E402

load_dotenv()

from app.models import Review, Widget  # noqa: E402
from app.services.reviews import seed_demo_data  # noqa: E402
from app.settings import get_settings  # noqa: E402
from app.stores.postgres import close_db, ensure_schema, get_session, init_db  # noqa: E402


async def seed_database() -> None:
    """Seed database with demo data."""
    if not get_settings().has_database:
        print("DATABASE_URL is not set, nothing to seed")
        return

    await init_db(seed=seed_demo_data)
    try:
        print("Seeding database...")
        await ensure_schema()

        async with get_session() as session:
            reviews = await session.scalar(select(func.count()).select_from(Review))
            widgets = await session.scalar(select(func.count()).select_from(Widget))

        print(f"  reviews: {reviews}")
        print(f"  widgets: {widgets}")
        print("Database seeded successfully!")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(seed_database())
