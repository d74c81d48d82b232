"""
Fake Implementations for Testing.

This package provides an in-memory fake implementation of the DataStore port
for fast, isolated testing. No database or external dependencies required.

Features:
- Implements the same Protocol interface as the Supabase store
- Supports seeding with test data and reset() for test isolation
- Failure injection for partial-write scenarios

Usage:
    from tests.fakes import FakeDataStore

    store = FakeDataStore(user_id="user-1")
    store.seed_workout("user-1", "2024-01-01", "Push Day", [("Bench Press", [(5, 52.5)])])
"""
from tests.fakes.data_store import FakeDataStore, parse_select, value_matches

__all__ = [
    "FakeDataStore",
    "parse_select",
    "value_matches",
]
