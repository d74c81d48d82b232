"""
Domain models for the logbook engine.

Pure models, independent of the store:
- Live entities: Exercise, Workout, WorkoutExercise, WorkoutSet, PersonalRecord
- Blueprint rows: WeekTemplate, DayTemplate, ExerciseTemplate, TemplateSet,
  ExerciseLibraryItem, DayLibraryItem
- Blueprint values: DayBlueprint, ExerciseBlueprint, SetBlueprint

Usage:
    >>> from domain.models import DayBlueprint, ExerciseBlueprint, SetBlueprint

    >>> day = DayBlueprint(
    ...     name="Monday",
    ...     exercises=[
    ...         ExerciseBlueprint(
    ...             name="Squat",
    ...             sets=[SetBlueprint(reps=5, weight=100)],
    ...         )
    ...     ],
    ... )
"""

from domain.models.blueprint import DayBlueprint, ExerciseBlueprint, SetBlueprint
from domain.models.exercise import Exercise, names_match, normalize_name
from domain.models.library import DayLibraryItem, ExerciseLibraryItem, LibrarySortMode
from domain.models.template import (
    DayTemplate,
    DayTemplateInfo,
    ExerciseTemplate,
    TemplateSet,
    WeekTemplate,
)
from domain.models.workout import PersonalRecord, Workout, WorkoutExercise, WorkoutSet

__all__ = [
    # Live entities
    "Exercise",
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
    "PersonalRecord",
    # Blueprint rows
    "WeekTemplate",
    "DayTemplate",
    "DayTemplateInfo",
    "ExerciseTemplate",
    "TemplateSet",
    "ExerciseLibraryItem",
    "DayLibraryItem",
    "LibrarySortMode",
    # Blueprint values
    "DayBlueprint",
    "ExerciseBlueprint",
    "SetBlueprint",
    # Name matching
    "normalize_name",
    "names_match",
]
