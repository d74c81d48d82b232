"""
Domain layer for the logbook engine.

Pure models, week arithmetic and row converters, independent of the store
and of the screen layer.
"""

from domain.models import (
    DayBlueprint,
    Exercise,
    ExerciseBlueprint,
    SetBlueprint,
    WeekTemplate,
    Workout,
)

__all__ = [
    "DayBlueprint",
    "Exercise",
    "ExerciseBlueprint",
    "SetBlueprint",
    "WeekTemplate",
    "Workout",
]
