"""
Engine factory.

This module provides a factory function for creating LogbookEngine instances.
The factory pattern allows for:
- Easy testing with custom settings or an injected store
- Several engines with different configurations
- Clear separation of engine creation from the services it wires

Usage:
    from logbook.main import create_engine
    from logbook.settings import Settings

    # Default engine (uses get_settings(), Supabase store)
    engine = await create_engine()

    # Test engine with custom settings and an in-memory store
    test_settings = Settings(environment="test", _env_file=None)
    test_engine = await create_engine(settings=test_settings, store=FakeDataStore())
"""

import logging
from typing import Optional

import sentry_sdk
from supabase import acreate_client

from application.ports import DataStore
from infrastructure.db import SupabaseDataStore
from logbook.engine import LogbookEngine
from logbook.settings import Settings, get_settings

logger = logging.getLogger(__name__)


async def create_engine(
    settings: Optional[Settings] = None,
    store: Optional[DataStore] = None,
) -> LogbookEngine:
    """
    Create and configure a LogbookEngine.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.
        store: Optional DataStore. If not provided, a Supabase store is built
               from settings.

    Returns:
        Configured LogbookEngine instance.

    Raises:
        ValueError: If no store is given and Supabase is not configured.
    """
    if settings is None:
        settings = get_settings()

    _init_sentry(settings)

    if store is None:
        store = await _create_supabase_store(settings)

    return LogbookEngine(store, settings=settings)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )
        logger.info("Sentry initialized for logbook engine")


async def _create_supabase_store(settings: Settings) -> SupabaseDataStore:
    if not settings.supabase_configured:
        raise ValueError(
            "Supabase is not configured: set SUPABASE_URL and a Supabase key, or pass a store"
        )
    client = await acreate_client(settings.supabase_url, settings.supabase_key)
    logger.info(f"Connected to Supabase at {settings.supabase_url}")
    return SupabaseDataStore(client, access_token=settings.supabase_access_token)
