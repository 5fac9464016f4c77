"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: DB session, repositories, ORM operations
- Redis: distributed locks

No business logic in stores - that belongs in services.
"""
