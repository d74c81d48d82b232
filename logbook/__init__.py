"""
Gym logbook progress analytics and template-generation engine.

Usage:
    from logbook import create_engine

    engine = await create_engine()
    series = await engine.max_weight_series("Bench Press")
"""

from logbook.engine import LogbookEngine
from logbook.main import create_engine
from logbook.settings import Settings, get_settings

__all__ = [
    "LogbookEngine",
    "create_engine",
    "Settings",
    "get_settings",
]
