"""
History Reader.

Reads a user's logged sets for one exercise name, or their workouts in a
date range, and flattens the nested store rows into plain entries.

Exercise names are matched on their trimmed, case-folded form: two exercise
rows with different ids but the same name are one logical exercise. Every
query carries an explicit user filter, and the rows that come back are
checked against the user again before they are used.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple
import logging

from application.ports import DataStore, Order, eq, gte, ilike_exact, in_, lt, lte
from domain.converters import WORKOUT_HISTORY_SELECT, WORKOUT_TREE_SELECT, many, one, workout_from_row
from domain.models import Workout, names_match, normalize_name
from domain.week import parse_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """One logged set of an exercise, with the workout it belongs to."""
    reps: int
    weight: float
    workout_date: date
    workout_title: Optional[str]
    order_index: int
    workout_id: Optional[str] = None


class HistoryReader:
    """
    Reads logged history through the data store.

    Usage:
        >>> reader = HistoryReader(store)
        >>> entries = await reader.read_exercise_history(user_id, "bench press")
        >>> entries[0].weight  # most recent set
        52.5
    """

    def __init__(self, store: DataStore):
        self._store = store

    async def read_exercise_history(
        self,
        user_id: str,
        exercise_name: str,
        limit: Optional[int] = None,
    ) -> List[HistoryEntry]:
        """
        Get every logged set of an exercise, most recent first.

        Sets are ordered by workout date descending. Within one date the most
        recently logged set comes first: later workouts before earlier ones,
        later exercise positions before earlier ones, later sets before
        earlier ones.

        Args:
            user_id: Owner of the history
            exercise_name: Exercise name, matched case-insensitively
            limit: Maximum number of entries to return

        Returns:
            List of HistoryEntry (empty when the exercise was never logged)
        """
        if not normalize_name(exercise_name):
            return []

        exercise_ids = await self._exercise_ids(user_id, exercise_name)
        if not exercise_ids:
            return []

        rows = await self._store.query(
            "workout_exercises",
            columns=WORKOUT_HISTORY_SELECT,
            filters=[in_("exercise_id", exercise_ids), eq("workout.user_id", user_id)],
        )

        keyed: List[Tuple[Tuple[Any, ...], HistoryEntry]] = []
        for row in rows:
            workout = one(row.get("workout"))
            if workout is None or workout.get("user_id") != user_id:
                continue
            workout_date = parse_date(workout["date"])
            for set_row in many(row.get("sets")):
                set_index = set_row.get("order_index") or 0
                entry = HistoryEntry(
                    reps=int(set_row.get("reps") or 0),
                    weight=float(set_row.get("weight") or 0),
                    workout_date=workout_date,
                    workout_title=workout.get("title"),
                    order_index=set_index,
                    workout_id=workout.get("id"),
                )
                sort_key = (
                    workout_date,
                    str(workout.get("created_at") or ""),
                    row.get("order_index") or 0,
                    set_index,
                )
                keyed.append((sort_key, entry))

        keyed.sort(key=lambda item: item[0], reverse=True)
        entries = [entry for _, entry in keyed]
        if limit is not None:
            entries = entries[:limit]
        return entries

    async def read_workouts(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Workout]:
        """
        Get fully nested workouts in an inclusive date range, most recent first.

        Args:
            user_id: Owner of the workouts
            start: First date to include (unbounded when None)
            end: Last date to include (unbounded when None)

        Returns:
            Workouts with exercises and sets in stored order
        """
        filters = [eq("user_id", user_id)]
        if start is not None:
            filters.append(gte("date", start.isoformat()))
        if end is not None:
            filters.append(lte("date", end.isoformat()))

        rows = await self._store.query(
            "workouts",
            columns=WORKOUT_TREE_SELECT,
            filters=filters,
            order=[Order("date", desc=True), Order("created_at", desc=True)],
        )
        return [workout_from_row(row) for row in rows if row.get("user_id") == user_id]

    async def previous_week_workout(
        self,
        user_id: str,
        title: str,
        before: date,
    ) -> Optional[Workout]:
        """
        Get the most recent workout with the same title in the week before a date.

        The window is the 7 days before `before`, excluding `before` itself.
        Titles are compared exactly after trimming.

        Args:
            user_id: Owner of the workouts
            title: Title of the workout being planned
            before: Date of the workout being planned

        Returns:
            The fully nested workout, or None when there is none
        """
        clean_title = (title or "").strip()
        if not clean_title:
            return None

        rows = await self._store.query(
            "workouts",
            columns=WORKOUT_TREE_SELECT,
            filters=[
                eq("user_id", user_id),
                eq("title", clean_title),
                gte("date", (before - timedelta(days=7)).isoformat()),
                lt("date", before.isoformat()),
            ],
            order=[Order("date", desc=True), Order("created_at", desc=True)],
            limit=1,
        )
        rows = [row for row in rows if row.get("user_id") == user_id]
        if not rows:
            return None
        return workout_from_row(rows[0])

    async def distinct_exercise_names(self, user_id: str) -> List[str]:
        """
        Get the user's exercise names, de-duplicated ignoring case.

        The first spelling returned by the store wins.
        """
        rows = await self._store.query(
            "exercises",
            columns="id, user_id, name, created_at",
            filters=[eq("user_id", user_id)],
            order=[Order("created_at")],
        )
        names: Dict[str, str] = {}
        for row in rows:
            if row.get("user_id") != user_id:
                continue
            key = normalize_name(row.get("name"))
            if key and key not in names:
                names[key] = row["name"].strip()
        return sorted(names.values(), key=str.casefold)

    async def _exercise_ids(self, user_id: str, exercise_name: str) -> List[str]:
        rows = await self._store.query(
            "exercises",
            columns="id, user_id, name",
            filters=[eq("user_id", user_id), ilike_exact("name", exercise_name)],
        )
        # ILIKE is looser than case-folded equality, so re-check each row
        return [
            row["id"]
            for row in rows
            if row.get("user_id") == user_id and names_match(row.get("name"), exercise_name)
        ]
