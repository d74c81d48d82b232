"""
Comparison Engine.

Finds the most recent *other* workout in which an exercise was performed and
compares it with the best set of the current workout.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional
import logging

from application.exceptions import DataStoreError
from application.ports import DataStore, Order, eq, neq
from domain.converters import WORKOUT_WITH_EXERCISES_SELECT, workout_from_row
from domain.models import names_match
from domain.week import iso_week_number, weekday_name

logger = logging.getLogger(__name__)

DEFAULT_SCAN_LIMIT = 50


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


@dataclass(frozen=True)
class ExerciseComparison:
    """
    The prior occurrence of an exercise.

    previous_weight and previous_reps are independent maxima over the prior
    occurrence's sets; they need not come from the same set.
    """
    previous_weight: float
    previous_reps: int
    previous_date: date
    label: str
    trend: Trend
    workout_id: Optional[str] = None


def trend_between(current: float, previous: float) -> Trend:
    """
    Direction of the current weight relative to the previous one.

    Examples:
        >>> trend_between(85, 80).value
        'up'
        >>> trend_between(80, 80).value
        'same'
    """
    if current > previous:
        return Trend.UP
    if current < previous:
        return Trend.DOWN
    return Trend.SAME


def occurrence_label(value: date) -> str:
    """Label of a prior occurrence, e.g. "Week 2 – Monday"."""
    return f"Week {iso_week_number(value)} – {weekday_name(value)}"


class ComparisonEngine:
    """Compares the current workout's exercise against its last occurrence."""

    def __init__(self, store: DataStore, scan_limit: int = DEFAULT_SCAN_LIMIT):
        self._store = store
        self._scan_limit = scan_limit

    async def compare(
        self,
        user_id: str,
        exercise_name: str,
        exclude_workout_id: Optional[str],
        current_max_weight: float,
    ) -> Optional[ExerciseComparison]:
        """
        Compare against the most recent other workout containing the exercise.

        Only the user's most recent workouts (up to the scan limit) are
        searched. Occurrences without any sets are skipped.

        Args:
            user_id: Owner of the workouts
            exercise_name: Exercise name, matched case-insensitively
            exclude_workout_id: The workout being edited, never its own prior
            current_max_weight: Best weight of the exercise in that workout

        Returns:
            ExerciseComparison, or None when there is no prior occurrence or
            the lookup failed
        """
        filters = [eq("user_id", user_id)]
        if exclude_workout_id:
            filters.append(neq("id", exclude_workout_id))

        try:
            rows = await self._store.query(
                "workouts",
                columns=WORKOUT_WITH_EXERCISES_SELECT,
                filters=filters,
                order=[Order("date", desc=True), Order("created_at", desc=True)],
                limit=self._scan_limit,
            )
        except DataStoreError as e:
            logger.warning(f"Comparison lookup failed for '{exercise_name}': {e}")
            return None

        for row in rows:
            if row.get("user_id") != user_id or row.get("id") == exclude_workout_id:
                continue
            workout = workout_from_row(row)
            for workout_exercise in workout.exercises:
                if not workout_exercise.sets or not names_match(workout_exercise.name, exercise_name):
                    continue
                previous_weight = workout_exercise.max_weight
                return ExerciseComparison(
                    previous_weight=previous_weight,
                    previous_reps=workout_exercise.max_reps,
                    previous_date=workout.date,
                    label=occurrence_label(workout.date),
                    trend=trend_between(current_max_weight, previous_weight),
                    workout_id=workout.id,
                )
        return None
