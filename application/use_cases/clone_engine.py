"""
Clone Engine.

Copies reusable blueprints (day/week templates, library days, past
workouts) into new, independently editable rows. Every copy goes through
the id-free DayBlueprint value, so no written row can hold an id of its
source.

Writes are parent-first: the root row is inserted, then its children in
order. There is no transaction; when a child write fails after rows were
written, a PartialWriteFailure reports how far the write got and the rows
stay in place.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from application.exceptions import DataStoreError, PartialWriteFailure
from application.ports import DataStore, Order, eq, ilike_exact
from application.use_cases.loaders import fetch_owned, load_library_day, load_week_template
from domain.converters import day_library_item_from_row, week_template_from_row
from domain.models import (
    DayBlueprint,
    DayLibraryItem,
    DayTemplate,
    ExerciseBlueprint,
    ExerciseTemplate,
    SetBlueprint,
    TemplateSet,
    WeekTemplate,
    Workout,
    names_match,
    normalize_name,
)
from domain.week import weekday_name

logger = logging.getLogger(__name__)

DaySource = Union[DayBlueprint, DayTemplate, DayLibraryItem, Workout]


@dataclass(frozen=True)
class _BlueprintTables:
    exercise_table: str
    parent_key: str
    set_table: str
    exercise_key: str


TEMPLATE_TABLES = _BlueprintTables(
    exercise_table="exercise_templates",
    parent_key="day_template_id",
    set_table="template_sets",
    exercise_key="exercise_template_id",
)

LIBRARY_TABLES = _BlueprintTables(
    exercise_table="day_library_exercises",
    parent_key="day_library_id",
    set_table="day_library_sets",
    exercise_key="day_library_exercise_id",
)


@dataclass
class LiveDayWrite:
    """
    Result of writing one live workout.

    steps_completed counts the workout, workout_exercises and sets rows
    written; exercise rows created on the way are not counted.
    """

    workout_id: str
    steps_completed: int
    workout_exercise_ids: List[str] = field(default_factory=list)


@dataclass
class _WriteProgress:
    steps: int = 0
    root_id: Optional[str] = None
    created_ids: List[str] = field(default_factory=list)


def _clean_group(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _copy_sets(sets: Sequence[Any]) -> List[SetBlueprint]:
    return [SetBlueprint(reps=s.reps, weight=s.weight).sanitized() for s in sets]


def require_exercise_names(blueprint: DayBlueprint) -> None:
    """Raise ValueError when an exercise of the day has a blank name."""
    for exercise in blueprint.exercises:
        if not normalize_name(exercise.name):
            raise ValueError(f"Exercise name must not be empty in day '{blueprint.name}'")


async def bump_usage(store: DataStore, table: str, item_id: str) -> None:
    """
    Increment a library item's usage count and stamp last_used_at.

    Non-critical: store failures are logged and swallowed.
    """
    try:
        rows = await store.query(table, columns="id, usage_count", filters=[eq("id", item_id)], limit=1)
        if not rows:
            return
        await store.update(
            table,
            item_id,
            {
                "usage_count": (rows[0].get("usage_count") or 0) + 1,
                "last_used_at": datetime.now(timezone.utc).isoformat(),
            },
        )
    except DataStoreError as e:
        logger.warning(f"Failed to bump usage for {table} {item_id}: {e}")


class CloneEngine:
    """
    Deep-copies blueprints into new rows.

    Usage:
        >>> engine = CloneEngine(store)
        >>> blueprint = CloneEngine.copy_day(day_template)
        >>> write = await engine.write_live_day(user_id, blueprint, date(2024, 1, 1), "Push Day")
        >>> write.workout_id
        'w-123'
    """

    def __init__(self, store: DataStore) -> None:
        self._store = store

    # =========================================================================
    # Pure copy
    # =========================================================================

    @staticmethod
    def copy_day(source: DaySource) -> DayBlueprint:
        """
        Copy a day into a DayBlueprint value.

        Only names, muscle groups, reps and weights are copied; reps are
        clamped to at least 1 and weights to at least 0. Ids, timestamps and
        ordering metadata are dropped, order is kept as list position.

        Args:
            source: DayTemplate, DayLibraryItem, Workout or DayBlueprint

        Returns:
            A new DayBlueprint sharing nothing with the source

        Raises:
            TypeError: If the source is not a day-like value
        """
        if isinstance(source, Workout):
            name = (source.title or "").strip() or weekday_name(source.date)
            exercises = [
                ExerciseBlueprint(
                    name=workout_exercise.name.strip(),
                    sets=_copy_sets(sorted(workout_exercise.sets, key=lambda s: s.order_index)),
                )
                for workout_exercise in sorted(source.exercises, key=lambda we: we.order_index)
                if workout_exercise.name.strip()
            ]
        elif isinstance(source, DayBlueprint):
            name = source.name
            exercises = [
                ExerciseBlueprint(
                    name=exercise.name.strip(),
                    muscle_group=_clean_group(exercise.muscle_group),
                    sets=_copy_sets(exercise.sets),
                )
                for exercise in source.exercises
            ]
        elif isinstance(source, (DayTemplate, DayLibraryItem)):
            name = source.name
            exercises = [
                ExerciseBlueprint(
                    name=exercise.name.strip(),
                    muscle_group=_clean_group(exercise.muscle_group),
                    sets=_copy_sets(sorted(exercise.sets, key=lambda s: s.order_index)),
                )
                for exercise in sorted(source.exercises, key=lambda ex: ex.order_index)
            ]
        else:
            raise TypeError(f"Cannot copy a day from {type(source).__name__}")

        return DayBlueprint(name=name.strip(), exercises=exercises)

    # =========================================================================
    # Exercises
    # =========================================================================

    async def find_or_create_exercise(self, user_id: str, name: str) -> str:
        """
        Get the id of the user's exercise with this name, creating it if needed.

        Matching ignores case and surrounding whitespace. When several rows
        match, the oldest one wins.

        Returns:
            Exercise id
        """
        clean_name = name.strip()
        if not clean_name:
            raise ValueError("Exercise name must not be empty")

        rows = await self._store.query(
            "exercises",
            columns="id, user_id, name, created_at",
            filters=[eq("user_id", user_id), ilike_exact("name", clean_name)],
            order=[Order("created_at")],
        )
        for row in rows:
            if row.get("user_id") == user_id and names_match(row.get("name"), clean_name):
                return row["id"]

        created = await self._store.insert("exercises", [{"user_id": user_id, "name": clean_name}])
        logger.info(f"Created exercise '{clean_name}' for user {user_id}")
        return created[0]["id"]

    # =========================================================================
    # Blueprint -> live
    # =========================================================================

    async def write_live_day(
        self,
        user_id: str,
        blueprint: DayBlueprint,
        workout_date: date,
        title: str,
    ) -> LiveDayWrite:
        """
        Write a blueprint as a new workout with its exercises and sets.

        The workout row is inserted first; a failure there (including a
        duplicate (date, title) ConstraintViolation) propagates unchanged
        because nothing was written.

        Raises:
            PartialWriteFailure: If a later write fails; the workout row and
                any children written so far remain
        """
        require_exercise_names(blueprint)

        rows = await self._store.insert(
            "workouts",
            [{"user_id": user_id, "date": workout_date.isoformat(), "title": title}],
        )
        workout_id = rows[0]["id"]
        progress = _WriteProgress(steps=1, root_id=workout_id)
        workout_exercise_ids: List[str] = []

        try:
            for position, exercise in enumerate(blueprint.exercises):
                exercise_id = await self.find_or_create_exercise(user_id, exercise.name)
                workout_exercise_rows = await self._store.insert(
                    "workout_exercises",
                    [{"workout_id": workout_id, "exercise_id": exercise_id, "order_index": position}],
                )
                progress.steps += 1
                workout_exercise_id = workout_exercise_rows[0]["id"]
                workout_exercise_ids.append(workout_exercise_id)

                if exercise.sets:
                    set_rows = [
                        {
                            "workout_exercise_id": workout_exercise_id,
                            "reps": s.reps,
                            "weight": s.weight,
                            "order_index": index,
                        }
                        for index, s in enumerate(_copy_sets(exercise.sets))
                    ]
                    await self._store.insert("sets", set_rows)
                    progress.steps += len(set_rows)
        except DataStoreError as e:
            logger.error(f"Workout '{title}' on {workout_date} failed after {progress.steps} rows: {e}")
            raise PartialWriteFailure(
                f"Writing workout '{title}' failed",
                steps_completed=progress.steps,
                root_id=workout_id,
                created_ids=[workout_id],
            ) from e

        return LiveDayWrite(
            workout_id=workout_id,
            steps_completed=progress.steps,
            workout_exercise_ids=workout_exercise_ids,
        )

    async def clone_library_day_to_workout(
        self,
        user_id: str,
        library_day_id: str,
        workout_date: date,
        title: Optional[str] = None,
    ) -> str:
        """
        Create a workout from a day library item and bump the item's usage.

        Args:
            user_id: Owner of the library item and the new workout
            library_day_id: Day library item to copy
            workout_date: Date of the new workout
            title: Workout title (defaults to the library day's name)

        Returns:
            The new workout id

        Raises:
            NotFound: If the library day is missing or not the user's
            PartialWriteFailure: If the write failed midway
        """
        item = await load_library_day(self._store, user_id, library_day_id)
        blueprint = self.copy_day(item)
        write = await self.write_live_day(
            user_id,
            blueprint,
            workout_date,
            (title or "").strip() or blueprint.name,
        )
        await bump_usage(self._store, "day_library", library_day_id)
        logger.info(f"Cloned library day {library_day_id} into workout {write.workout_id}")
        return write.workout_id

    # =========================================================================
    # Blueprint -> blueprint
    # =========================================================================

    async def clone_day_to_library(
        self,
        user_id: str,
        source: DaySource,
        name: Optional[str] = None,
    ) -> DayLibraryItem:
        """
        Save a copy of a day into the user's day library.

        Args:
            user_id: Owner of the new library item
            source: Day to copy (template day, workout, library day, blueprint)
            name: Library item name (defaults to the source day's name)

        Returns:
            The new DayLibraryItem with its exercises and sets
        """
        blueprint = self.copy_day(source)
        day_name = (name or "").strip() or blueprint.name
        if not day_name:
            raise ValueError("Library day name must not be empty")
        require_exercise_names(blueprint)

        rows = await self._store.insert("day_library", [{"user_id": user_id, "name": day_name}])
        root = rows[0]
        progress = _WriteProgress(steps=1, root_id=root["id"], created_ids=[root["id"]])
        try:
            exercises = await self._write_blueprint_exercises(
                LIBRARY_TABLES, root["id"], blueprint.exercises, progress
            )
        except DataStoreError as e:
            raise self._partial_failure(f"Saving library day '{day_name}' failed", progress) from e

        logger.info(f"Saved day '{day_name}' to library ({progress.steps} rows)")
        return day_library_item_from_row(root).model_copy(update={"exercises": exercises})

    async def clone_week_template(
        self,
        user_id: str,
        template_id: str,
        new_name: Optional[str] = None,
    ) -> WeekTemplate:
        """
        Copy a week template with all of its days, exercises and sets.

        Args:
            user_id: Owner of the source and the copy
            template_id: Week template to copy
            new_name: Name of the copy (defaults to "<name> (Copy)")

        Returns:
            The new WeekTemplate, fully nested

        Raises:
            NotFound: If the source template is missing or not the user's
            PartialWriteFailure: If the copy failed midway
        """
        source = await load_week_template(self._store, user_id, template_id)
        name = (new_name or "").strip() or f"{source.name} (Copy)"
        days = [self.copy_day(day) for day in source.days]
        for day in days:
            require_exercise_names(day)

        rows = await self._store.insert("week_templates", [{"user_id": user_id, "name": name}])
        root = rows[0]
        progress = _WriteProgress(steps=1, root_id=root["id"], created_ids=[root["id"]])
        try:
            written_days = await self._write_template_days(root["id"], days, progress)
        except DataStoreError as e:
            raise self._partial_failure(f"Copying week template '{source.name}' failed", progress) from e

        logger.info(f"Copied week template {template_id} to {root['id']} ({progress.steps} rows)")
        return week_template_from_row(root).model_copy(update={"days": written_days})

    async def replace_week_days(
        self,
        user_id: str,
        template_id: str,
        name: str,
        days: Sequence[DaySource],
    ) -> WeekTemplate:
        """
        Save a week template from an edited form.

        Renames the template, deletes its days (their exercises and sets
        cascade), inserts the submitted days in order and makes sure every
        exercise name exists in the user's exercises.

        Raises:
            NotFound: If the template is missing or not the user's
            PartialWriteFailure: If a write failed after the first one
        """
        await fetch_owned(self._store, "week_templates", template_id, user_id, entity="Week template")
        clean_name = name.strip()
        if not clean_name:
            raise ValueError("Week template name must not be empty")
        blueprints = [self.copy_day(day) for day in days]
        for blueprint in blueprints:
            require_exercise_names(blueprint)

        progress = _WriteProgress(root_id=template_id)
        try:
            updated = await self._store.update("week_templates", template_id, {"name": clean_name})
            progress.steps += 1

            existing = await self._store.query(
                "day_templates", columns="id", filters=[eq("template_id", template_id)]
            )
            for row in existing:
                await self._store.delete("day_templates", row["id"])
                progress.steps += 1

            written_days = await self._write_template_days(template_id, blueprints, progress)

            synced = set()
            for blueprint in blueprints:
                for exercise in blueprint.exercises:
                    key = normalize_name(exercise.name)
                    if key not in synced:
                        synced.add(key)
                        await self.find_or_create_exercise(user_id, exercise.name)
        except DataStoreError as e:
            if progress.steps == 0:
                raise
            raise self._partial_failure(f"Saving week template '{clean_name}' failed", progress) from e

        logger.info(f"Saved week template {template_id} with {len(written_days)} days")
        return week_template_from_row(updated).model_copy(update={"days": written_days})

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _write_template_days(
        self,
        template_id: str,
        days: Sequence[DayBlueprint],
        progress: _WriteProgress,
    ) -> List[DayTemplate]:
        written: List[DayTemplate] = []
        for position, day in enumerate(days):
            rows = await self._store.insert(
                "day_templates",
                [{"template_id": template_id, "name": day.name, "order_index": position}],
            )
            progress.steps += 1
            day_id = rows[0]["id"]
            exercises = await self._write_blueprint_exercises(TEMPLATE_TABLES, day_id, day.exercises, progress)
            written.append(
                DayTemplate(
                    id=day_id,
                    template_id=template_id,
                    name=day.name,
                    order_index=position,
                    exercises=exercises,
                )
            )
        return written

    async def _write_blueprint_exercises(
        self,
        tables: _BlueprintTables,
        parent_id: str,
        exercises: Sequence[ExerciseBlueprint],
        progress: _WriteProgress,
    ) -> List[ExerciseTemplate]:
        written: List[ExerciseTemplate] = []
        for position, exercise in enumerate(exercises):
            exercise_row: Dict[str, Any] = {
                tables.parent_key: parent_id,
                "name": exercise.name.strip(),
                "muscle_group": _clean_group(exercise.muscle_group),
                "order_index": position,
            }
            rows = await self._store.insert(tables.exercise_table, [exercise_row])
            progress.steps += 1
            exercise_id = rows[0]["id"]

            sets: List[TemplateSet] = []
            if exercise.sets:
                set_rows = [
                    {tables.exercise_key: exercise_id, "reps": s.reps, "weight": s.weight, "order_index": index}
                    for index, s in enumerate(_copy_sets(exercise.sets))
                ]
                inserted = await self._store.insert(tables.set_table, set_rows)
                progress.steps += len(set_rows)
                sets = [
                    TemplateSet(id=row["id"], reps=row["reps"], weight=row["weight"], order_index=row["order_index"])
                    for row in inserted
                ]

            written.append(
                ExerciseTemplate(
                    id=exercise_id,
                    name=exercise_row["name"],
                    muscle_group=exercise_row["muscle_group"],
                    order_index=position,
                    sets=sets,
                )
            )
        return written

    @staticmethod
    def _partial_failure(message: str, progress: _WriteProgress) -> PartialWriteFailure:
        logger.error(f"{message} after {progress.steps} rows (root {progress.root_id})")
        return PartialWriteFailure(
            message,
            steps_completed=progress.steps,
            root_id=progress.root_id,
            created_ids=progress.created_ids,
        )
