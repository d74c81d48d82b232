"""
Infrastructure Database Layer.

This package provides the Supabase-backed implementation of the DataStore
port defined in application.ports. The implementation can be injected into
the engine's services for clean separation of concerns and testability.

Usage:
    from supabase import acreate_client
    from infrastructure.db import SupabaseDataStore

    # Create async Supabase client
    client = await acreate_client(SUPABASE_URL, SUPABASE_KEY)

    # Instantiate the store with the injected client
    store = SupabaseDataStore(client, access_token=user_jwt)
"""

from infrastructure.db.data_store import SupabaseDataStore

__all__ = [
    "SupabaseDataStore",
]
