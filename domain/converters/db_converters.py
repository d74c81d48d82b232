"""
Converters: store rows <-> domain models.

Each `*_SELECT` constant is the PostgREST select string whose result shape
the matching `*_from_row` function understands. Embedded relations are read
through `row_shapes.one` / `row_shapes.many`, never by inspecting the raw
value.

Children are sorted by `order_index` (missing -> 0, stable, so rows without
an index keep the store's order).
"""

from typing import Any, Dict, Iterable, List

from domain.converters.row_shapes import many, one
from domain.models import (
    DayLibraryItem,
    DayTemplate,
    Exercise,
    ExerciseLibraryItem,
    ExerciseTemplate,
    PersonalRecord,
    TemplateSet,
    WeekTemplate,
    Workout,
    WorkoutExercise,
    WorkoutSet,
)

# =============================================================================
# Select strings
# =============================================================================

WORKOUT_TREE_SELECT = (
    "id, user_id, date, title, notes, created_at, "
    "workout_exercises ( id, workout_id, exercise_id, notes, order_index, "
    "exercise:exercises ( id, name ), "
    "sets ( id, workout_exercise_id, reps, weight, order_index ) )"
)

# Same tree, but workouts without any exercise rows are left out.
WORKOUT_WITH_EXERCISES_SELECT = (
    "id, user_id, date, title, notes, created_at, "
    "workout_exercises!inner ( id, workout_id, exercise_id, notes, order_index, "
    "exercise:exercises ( id, name ), "
    "sets ( id, workout_exercise_id, reps, weight, order_index ) )"
)

# Rooted at workout_exercises; `workout` is an inner join so the owner filter
# can be applied to the embedded row.
WORKOUT_HISTORY_SELECT = (
    "id, exercise_id, order_index, "
    "workout:workouts!inner ( id, user_id, date, title, created_at ), "
    "sets ( id, reps, weight, order_index )"
)

WEEK_TEMPLATE_TREE_SELECT = (
    "*, day_templates ( *, exercise_templates ( *, template_sets ( * ) ) )"
)

# The owning week is embedded so ownership can be checked through it.
DAY_TEMPLATE_TREE_SELECT = (
    "*, week:week_templates!inner ( id, user_id, name ), "
    "exercise_templates ( *, template_sets ( * ) )"
)

DAY_LIBRARY_TREE_SELECT = "*, day_library_exercises ( *, day_library_sets ( * ) )"


def _ordered(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda r: r.get("order_index") or 0)


def _pick(row: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    return {k: row[k] for k in keys if row.get(k) is not None}


# =============================================================================
# Live entities
# =============================================================================


def exercise_from_row(row: Dict[str, Any]) -> Exercise:
    return Exercise.model_validate(_pick(row, "id", "user_id", "name", "created_at"))


def workout_set_from_row(row: Dict[str, Any]) -> WorkoutSet:
    return WorkoutSet(
        id=row.get("id"),
        workout_exercise_id=row.get("workout_exercise_id"),
        reps=int(row.get("reps") or 0),
        weight=float(row.get("weight") or 0),
        order_index=row.get("order_index") or 0,
    )


def workout_exercise_from_row(row: Dict[str, Any]) -> WorkoutExercise:
    exercise_row = one(row.get("exercise"))
    return WorkoutExercise(
        id=row.get("id"),
        workout_id=row.get("workout_id"),
        exercise_id=row.get("exercise_id") or (exercise_row or {}).get("id"),
        exercise=exercise_from_row(exercise_row) if exercise_row else None,
        notes=row.get("notes"),
        order_index=row.get("order_index") or 0,
        sets=[workout_set_from_row(s) for s in _ordered(many(row.get("sets")))],
    )


def workout_from_row(row: Dict[str, Any]) -> Workout:
    """
    Convert a workout row (optionally with embedded exercises and sets).

    Args:
        row: Row selected with WORKOUT_TREE_SELECT or a flat `workouts` row.

    Returns:
        Workout with exercises and sets in `order_index` order.
    """
    data = _pick(row, "id", "user_id", "date", "title", "notes", "created_at")
    data["exercises"] = [
        workout_exercise_from_row(we)
        for we in _ordered(many(row.get("workout_exercises")))
    ]
    return Workout.model_validate(data)


def personal_record_from_row(row: Dict[str, Any]) -> PersonalRecord:
    return PersonalRecord(
        id=row.get("id"),
        user_id=row.get("user_id"),
        exercise_name=row["exercise_name"],
        weight=float(row.get("weight") or 0),
        reps=int(row.get("reps") or 0),
        date=row["date"],
        created_at=row.get("created_at"),
    )


# =============================================================================
# Blueprints
# =============================================================================


def template_set_from_row(row: Dict[str, Any]) -> TemplateSet:
    return TemplateSet(
        id=row.get("id"),
        reps=int(row.get("reps") or 0),
        weight=float(row.get("weight") or 0),
        order_index=row.get("order_index") or 0,
    )


def exercise_template_from_row(row: Dict[str, Any], sets_key: str = "template_sets") -> ExerciseTemplate:
    return ExerciseTemplate(
        id=row.get("id"),
        name=row["name"],
        muscle_group=row.get("muscle_group"),
        order_index=row.get("order_index") or 0,
        sets=[template_set_from_row(s) for s in _ordered(many(row.get(sets_key)))],
    )


def day_template_from_row(row: Dict[str, Any]) -> DayTemplate:
    return DayTemplate(
        id=row.get("id"),
        template_id=row.get("template_id"),
        name=row["name"],
        order_index=row.get("order_index") or 0,
        exercises=[
            exercise_template_from_row(ex)
            for ex in _ordered(many(row.get("exercise_templates")))
        ],
    )


def week_template_from_row(row: Dict[str, Any]) -> WeekTemplate:
    data = _pick(row, "id", "user_id", "name", "created_at")
    data["days"] = [
        day_template_from_row(day) for day in _ordered(many(row.get("day_templates")))
    ]
    return WeekTemplate.model_validate(data)


def day_library_item_from_row(row: Dict[str, Any]) -> DayLibraryItem:
    data = _pick(row, "id", "user_id", "name", "usage_count", "last_used_at", "created_at")
    data["exercises"] = [
        exercise_template_from_row(ex, sets_key="day_library_sets")
        for ex in _ordered(many(row.get("day_library_exercises")))
    ]
    return DayLibraryItem.model_validate(data)


def exercise_library_item_from_row(row: Dict[str, Any]) -> ExerciseLibraryItem:
    return ExerciseLibraryItem.model_validate(
        _pick(
            row,
            "id",
            "user_id",
            "name",
            "muscle_group",
            "default_reps",
            "default_weight",
            "usage_count",
            "last_used_at",
            "created_at",
        )
    )
