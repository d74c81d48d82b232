"""
Blueprint value types.

A DayBlueprint is the id-free, in-memory copy of a day: a name, ordered
exercises and ordered sets. Every blueprint -> live and blueprint ->
blueprint copy passes through this shape, so a clone can never carry a row
identity from its source. Order is carried by list position only.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SetBlueprint(BaseModel):
    """Reps and weight of one set, nothing else."""

    model_config = ConfigDict(extra="forbid")

    reps: int = Field(..., description="Target repetitions")
    weight: float = Field(..., description="Target load")

    def sanitized(self) -> "SetBlueprint":
        """Copy with reps clamped to >= 1 and weight to >= 0."""
        return SetBlueprint(reps=max(1, int(self.reps)), weight=max(0.0, float(self.weight)))


class ExerciseBlueprint(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Exercise name, matched case-insensitively")
    muscle_group: Optional[str] = Field(default=None)
    sets: List[SetBlueprint] = Field(default_factory=list)


class DayBlueprint(BaseModel):
    """
    A reusable day as plain values.

    Examples:
        >>> day = DayBlueprint(
        ...     name="Push Day",
        ...     exercises=[
        ...         ExerciseBlueprint(
        ...             name="Bench Press",
        ...             sets=[SetBlueprint(reps=5, weight=40)],
        ...         )
        ...     ],
        ... )
        >>> day.total_sets
        1
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Day name (a weekday name inside week templates)")
    exercises: List[ExerciseBlueprint] = Field(default_factory=list)

    @property
    def total_sets(self) -> int:
        return sum(len(ex.sets) for ex in self.exercises)
