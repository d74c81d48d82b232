"""
Unit tests for domain/models
"""

from datetime import date

import pytest
from pydantic import ValidationError

from domain.models import (
    Exercise,
    ExerciseBlueprint,
    SetBlueprint,
    Workout,
    WorkoutExercise,
    WorkoutSet,
    names_match,
    normalize_name,
)


@pytest.mark.unit
class TestNameMatching:

    @pytest.mark.parametrize(
        "left,right",
        [("Bench Press", "bench press"), ("  Squat", "SQUAT  "), ("Straße", "STRASSE")],
    )
    def test_same_logical_name(self, left, right):
        assert names_match(left, right)

    @pytest.mark.parametrize(
        "left,right",
        [("Bench Press", "Bench  Press"), ("", ""), (None, None), ("Squat", None)],
    )
    def test_different_or_empty_names(self, left, right):
        assert not names_match(left, right)

    def test_normalized_name_property(self):
        assert Exercise(name=" Deadlift ").normalized_name == normalize_name("deadlift")


@pytest.mark.unit
class TestBlueprints:

    def test_set_sanitized_clamps_values(self):
        assert SetBlueprint(reps=0, weight=-2.5).sanitized() == SetBlueprint(reps=1, weight=0)

    def test_set_sanitized_returns_new_value(self):
        original = SetBlueprint(reps=5, weight=40)

        assert original.sanitized() is not original

    def test_blueprints_reject_ids(self):
        with pytest.raises(ValidationError):
            ExerciseBlueprint(name="Squat", id="et-1")


@pytest.mark.unit
class TestWorkout:

    def test_set_rules(self):
        with pytest.raises(ValidationError):
            WorkoutSet(reps=0, weight=10)
        with pytest.raises(ValidationError):
            WorkoutSet(reps=5, weight=-1)

    def test_totals_and_maxima(self):
        workout = Workout(
            date=date(2024, 1, 1),
            exercises=[
                WorkoutExercise(
                    exercise=Exercise(name="Bench Press"),
                    sets=[WorkoutSet(reps=8, weight=75), WorkoutSet(reps=5, weight=80)],
                ),
                WorkoutExercise(exercise=Exercise(name="Dips"), sets=[WorkoutSet(reps=10, weight=0)]),
            ],
        )

        assert workout.total_sets == 3
        assert workout.total_volume == 8 * 75 + 5 * 80
        assert workout.exercise_names == ["Bench Press", "Dips"]
        assert workout.exercises[0].max_weight == 80
        assert workout.exercises[0].max_reps == 8

    def test_exercise_without_sets(self):
        empty = WorkoutExercise()

        assert empty.name == ""
        assert empty.max_weight == 0
        assert empty.max_reps == 0
