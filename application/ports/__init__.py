"""
Repository Interfaces (Ports) for the logbook engine.

This package defines the abstract interface that decouples the engine from
the record store. The Supabase implementation lives in infrastructure/,
in-memory fakes in tests/fakes/.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import DataStore, eq, Order

    class HistoryReader:
        def __init__(self, store: DataStore):
            self._store = store

        async def read(self, user_id):
            return await self._store.query(
                "workouts",
                filters=[eq("user_id", user_id)],
                order=[Order("date", desc=True)],
            )
"""

from application.ports.carry_over import CarryOverWeights
from application.ports.data_store import (
    DataStore,
    Filter,
    FilterOp,
    Order,
    eq,
    escape_like,
    gte,
    ilike_exact,
    in_,
    lt,
    lte,
    neq,
)

__all__ = [
    "DataStore",
    "CarryOverWeights",
    "Filter",
    "FilterOp",
    "Order",
    # Filter helpers
    "eq",
    "neq",
    "gte",
    "lt",
    "lte",
    "in_",
    "ilike_exact",
    "escape_like",
]
