"""
Library Service.

Business logic for the user's exercise library and day library:
- Exercise library CRUD with input sanitation
- Turning a library exercise into a blueprint for a workout
- Day library reads and deletes
- Sorting and grouping for the library picker

Usage tracking is best-effort: a failed bump never fails the operation that
used the item.
"""
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from application.ports import DataStore, Order, eq
from application.use_cases import bump_usage, fetch_owned, load_library_day
from domain.converters import DAY_LIBRARY_TREE_SELECT, day_library_item_from_row, exercise_library_item_from_row
from domain.models import (
    DayLibraryItem,
    ExerciseBlueprint,
    ExerciseLibraryItem,
    LibrarySortMode,
    SetBlueprint,
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


# =============================================================================
# Sanitation
# =============================================================================


def _clean_name(name: str) -> str:
    clean = (name or "").strip()
    if not clean:
        raise ValueError("Name must not be empty")
    return clean


def _clean_group(muscle_group: Optional[str]) -> Optional[str]:
    if muscle_group is None:
        return None
    return muscle_group.strip() or None


def _aware(value: Optional[datetime]) -> datetime:
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# Sorting and grouping
# =============================================================================


def sort_exercise_library(
    items: List[ExerciseLibraryItem],
    mode: LibrarySortMode = LibrarySortMode.RECENT,
) -> List[ExerciseLibraryItem]:
    """
    Order library exercises for display.

    Args:
        items: Library items, any order
        mode: Sort mode (see LibrarySortMode)

    Returns:
        A new sorted list; the input is left untouched
    """
    mode = LibrarySortMode(mode)
    if mode == LibrarySortMode.RECENT:
        used = [i for i in items if i.last_used_at is not None]
        never_used = [i for i in items if i.last_used_at is None]
        used.sort(key=lambda i: _aware(i.last_used_at), reverse=True)
        return used + never_used
    if mode == LibrarySortMode.FREQUENT:
        return sorted(items, key=lambda i: i.usage_count, reverse=True)
    if mode == LibrarySortMode.ALPHA:
        return sorted(items, key=lambda i: i.name.casefold())
    if mode == LibrarySortMode.MUSCLE:
        return sorted(
            items,
            key=lambda i: (i.muscle_group is None, (i.muscle_group or "").casefold(), i.name.casefold()),
        )
    return sorted(items, key=lambda i: _aware(i.created_at), reverse=True)


def group_by_muscle(items: List[ExerciseLibraryItem]) -> "OrderedDict[str, List[ExerciseLibraryItem]]":
    """Group items by muscle group in first-seen order; no group -> "Uncategorized"."""
    groups: "OrderedDict[str, List[ExerciseLibraryItem]]" = OrderedDict()
    for item in items:
        groups.setdefault(item.muscle_group or UNCATEGORIZED, []).append(item)
    return groups


def exercise_as_blueprint(item: ExerciseLibraryItem, set_count: int = 3) -> ExerciseBlueprint:
    """A library exercise as a blueprint with `set_count` default sets."""
    template_set = SetBlueprint(reps=item.default_reps, weight=item.default_weight).sanitized()
    return ExerciseBlueprint(
        name=item.name.strip(),
        muscle_group=_clean_group(item.muscle_group),
        sets=[template_set.model_copy() for _ in range(max(1, set_count))],
    )


# =============================================================================
# Service
# =============================================================================


class LibraryService:
    """Exercise library and day library operations."""

    def __init__(self, store: DataStore):
        self._store = store

    # -------------------------------------------------------------------------
    # Exercise library
    # -------------------------------------------------------------------------

    async def list_exercises(
        self,
        user_id: str,
        mode: Optional[LibrarySortMode] = None,
    ) -> List[ExerciseLibraryItem]:
        rows = await self._store.query(
            "exercise_library",
            filters=[eq("user_id", user_id)],
            order=[Order("name")],
        )
        items = [exercise_library_item_from_row(row) for row in rows if row.get("user_id") == user_id]
        if mode is not None:
            items = sort_exercise_library(items, mode)
        return items

    async def create_exercise(
        self,
        user_id: str,
        name: str,
        muscle_group: Optional[str] = None,
        default_reps: int = 10,
        default_weight: float = 0.0,
    ) -> ExerciseLibraryItem:
        """
        Add an exercise to the library.

        Names are trimmed, a blank muscle group is stored as none, reps are
        clamped to at least 1 and weight to at least 0.

        Raises:
            ValueError: If the name is blank
            ConstraintViolation: If the library already has this name
        """
        row: Dict[str, Any] = {
            "user_id": user_id,
            "name": _clean_name(name),
            "muscle_group": _clean_group(muscle_group),
            "default_reps": max(1, int(default_reps)),
            "default_weight": max(0.0, float(default_weight)),
        }
        rows = await self._store.insert("exercise_library", [row])
        logger.info(f"Added '{row['name']}' to exercise library")
        return exercise_library_item_from_row(rows[0])

    async def update_exercise(
        self,
        user_id: str,
        item_id: str,
        name: Optional[str] = None,
        muscle_group: Optional[str] = None,
        default_reps: Optional[int] = None,
        default_weight: Optional[float] = None,
    ) -> ExerciseLibraryItem:
        """
        Update a library exercise. Arguments left as None are unchanged;
        pass an empty muscle_group to clear it.

        Raises:
            NotFound: If the item is missing or not the user's
        """
        current = await fetch_owned(self._store, "exercise_library", item_id, user_id, entity="Library exercise")

        patch: Dict[str, Any] = {}
        if name is not None:
            patch["name"] = _clean_name(name)
        if muscle_group is not None:
            patch["muscle_group"] = _clean_group(muscle_group)
        if default_reps is not None:
            patch["default_reps"] = max(1, int(default_reps))
        if default_weight is not None:
            patch["default_weight"] = max(0.0, float(default_weight))

        if not patch:
            return exercise_library_item_from_row(current)

        row = await self._store.update("exercise_library", item_id, patch)
        return exercise_library_item_from_row(row)

    async def delete_exercise(self, user_id: str, item_id: str) -> None:
        await fetch_owned(self._store, "exercise_library", item_id, user_id, entity="Library exercise")
        await self._store.delete("exercise_library", item_id)

    async def use_exercise(self, user_id: str, item_id: str, set_count: int = 3) -> ExerciseBlueprint:
        """
        Take a library exercise into a workout being edited.

        Returns the exercise as a blueprint and bumps its usage.
        """
        row = await fetch_owned(self._store, "exercise_library", item_id, user_id, entity="Library exercise")
        blueprint = exercise_as_blueprint(exercise_library_item_from_row(row), set_count)
        await self.bump_usage("exercise_library", item_id)
        return blueprint

    # -------------------------------------------------------------------------
    # Day library
    # -------------------------------------------------------------------------

    async def list_days(self, user_id: str) -> List[DayLibraryItem]:
        """Library days with their exercises, newest first."""
        rows = await self._store.query(
            "day_library",
            columns=DAY_LIBRARY_TREE_SELECT,
            filters=[eq("user_id", user_id)],
            order=[Order("created_at", desc=True)],
        )
        return [day_library_item_from_row(row) for row in rows if row.get("user_id") == user_id]

    async def get_day(self, user_id: str, day_id: str) -> DayLibraryItem:
        """
        Raises:
            NotFound: If the day is missing or not the user's
        """
        return await load_library_day(self._store, user_id, day_id)

    async def delete_day(self, user_id: str, day_id: str) -> None:
        await fetch_owned(self._store, "day_library", day_id, user_id, entity="Library day")
        await self._store.delete("day_library", day_id)
        logger.info(f"Deleted library day {day_id}")

    # -------------------------------------------------------------------------
    # Usage tracking
    # -------------------------------------------------------------------------

    async def bump_usage(self, table: str, item_id: str) -> None:
        """Increment usage of an exercise_library or day_library row. Never raises store errors."""
        if table not in ("exercise_library", "day_library"):
            raise ValueError(f"Usage is not tracked for table '{table}'")
        await bump_usage(self._store, table, item_id)

