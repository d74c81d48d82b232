"""
Infrastructure Layer for the logbook engine.

This package contains concrete implementations of the application ports:
- db/: Supabase database implementation of the DataStore
"""

from infrastructure.db import SupabaseDataStore

__all__ = [
    "SupabaseDataStore",
]
