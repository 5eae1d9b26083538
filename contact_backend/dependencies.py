"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from contact_backend.config import get_settings
from contact_backend.db import DbClient, InMemoryDbClient, SqlAlchemyDbClient

_db_client: DbClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so submissions persist across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = SqlAlchemyDbClient(settings.database_url)
    return _db_client


def reset_db_client() -> None:
    """Drop the cached client so the next call re-reads settings."""
    global _db_client
    _db_client = None
