"""
Domain converters between store rows and domain models.

- row_shapes: tagged union for embedded relations (Single | Collection)
- db_converters: select strings and row -> model functions

All converters are pure functions with no side effects.
"""

from domain.converters.db_converters import (
    DAY_LIBRARY_TREE_SELECT,
    DAY_TEMPLATE_TREE_SELECT,
    WEEK_TEMPLATE_TREE_SELECT,
    WORKOUT_HISTORY_SELECT,
    WORKOUT_TREE_SELECT,
    WORKOUT_WITH_EXERCISES_SELECT,
    day_library_item_from_row,
    day_template_from_row,
    exercise_from_row,
    exercise_library_item_from_row,
    personal_record_from_row,
    week_template_from_row,
    workout_from_row,
)
from domain.converters.row_shapes import Collection, RelatedRows, Single, classify, many, one

__all__ = [
    # Row shapes
    "Single",
    "Collection",
    "RelatedRows",
    "classify",
    "one",
    "many",
    # Select strings
    "WORKOUT_TREE_SELECT",
    "WORKOUT_WITH_EXERCISES_SELECT",
    "WORKOUT_HISTORY_SELECT",
    "WEEK_TEMPLATE_TREE_SELECT",
    "DAY_TEMPLATE_TREE_SELECT",
    "DAY_LIBRARY_TREE_SELECT",
    # Row -> model
    "exercise_from_row",
    "workout_from_row",
    "personal_record_from_row",
    "week_template_from_row",
    "day_template_from_row",
    "day_library_item_from_row",
    "exercise_library_item_from_row",
]
