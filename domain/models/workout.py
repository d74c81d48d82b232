"""
Live workout entities - the user's actual logged history.

Workout -> WorkoutExercise -> WorkoutSet. None of these models has a field
that can hold a reference to a blueprint row; every blueprint-to-live
transition goes through a value copy (see domain.models.blueprint).
"""

import datetime as dt
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.models.exercise import Exercise


class WorkoutSet(BaseModel):
    """A single logged set (the `sets` table)."""

    id: Optional[str] = Field(default=None, description="Set UUID")
    workout_exercise_id: Optional[str] = Field(default=None)
    reps: int = Field(..., ge=1, description="Repetitions performed")
    weight: float = Field(..., ge=0, description="Load in the user's unit")
    order_index: int = Field(default=0, description="Position within the exercise")

    @property
    def volume(self) -> float:
        """Weight x reps, unrounded."""
        return self.weight * self.reps


class WorkoutExercise(BaseModel):
    """An exercise performed within a workout, owning its sets."""

    id: Optional[str] = Field(default=None, description="WorkoutExercise UUID")
    workout_id: Optional[str] = Field(default=None)
    exercise_id: Optional[str] = Field(default=None)
    exercise: Optional[Exercise] = Field(
        default=None, description="Embedded exercise row when read with a join"
    )
    notes: Optional[str] = Field(default=None)
    order_index: int = Field(default=0, description="Position within the workout")
    sets: List[WorkoutSet] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.exercise.name if self.exercise else ""

    @property
    def max_weight(self) -> float:
        return max((s.weight for s in self.sets), default=0.0)

    @property
    def max_reps(self) -> int:
        return max((s.reps for s in self.sets), default=0)


class Workout(BaseModel):
    """
    A logged workout on a calendar date.

    One workout may exist per (user, date, title); the store rejects
    duplicates with a constraint violation.

    Examples:
        >>> workout = Workout(
        ...     date=dt.date(2024, 1, 1),
        ...     title="Push Day",
        ...     exercises=[
        ...         WorkoutExercise(
        ...             exercise=Exercise(name="Bench Press"),
        ...             sets=[WorkoutSet(reps=5, weight=60)],
        ...         )
        ...     ],
        ... )
        >>> workout.total_volume
        300.0
    """

    id: Optional[str] = Field(default=None, description="Workout UUID")
    user_id: Optional[str] = Field(default=None, description="Owning user")
    date: dt.date = Field(..., description="Calendar date of the workout")
    title: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = Field(default=None)
    created_at: Optional[datetime] = Field(default=None)
    exercises: List[WorkoutExercise] = Field(default_factory=list)

    @property
    def total_sets(self) -> int:
        return sum(len(we.sets) for we in self.exercises)

    @property
    def total_volume(self) -> float:
        return sum(s.volume for we in self.exercises for s in we.sets)

    @property
    def exercise_names(self) -> List[str]:
        return [we.name for we in self.exercises]


class PersonalRecord(BaseModel):
    """
    A personal-record row.

    The tracker only ever appends; the current max for an exercise is the
    max-weight row among all records with a matching name.
    """

    id: Optional[str] = Field(default=None)
    user_id: Optional[str] = Field(default=None)
    exercise_name: str = Field(..., min_length=1)
    weight: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    date: dt.date
    created_at: Optional[datetime] = Field(default=None)
