"""
PR Tracker.

A personal record is the heaviest weight ever logged for an exercise name.
Records are append-only: saving never re-validates, and the current max is
read back as the max-weight row among all matching records.
"""
from datetime import date
from typing import List, Optional
import logging

from application.exceptions import DataStoreError
from application.ports import DataStore, Order, eq, ilike_exact
from domain.converters import personal_record_from_row
from domain.models import PersonalRecord, names_match

logger = logging.getLogger(__name__)


class PRTracker:
    """Detects and appends personal records."""

    def __init__(self, store: DataStore):
        self._store = store

    async def detect_pr(self, user_id: str, exercise_name: str, candidate_weight: float) -> bool:
        """
        Check whether a weight would be a new personal record.

        True when there is no prior record for the exercise, or when the
        candidate strictly exceeds the highest recorded weight. A tie is not
        a record. A failed store read is reported as "not a record".

        Args:
            user_id: Owner of the records
            exercise_name: Exercise name, matched case-insensitively
            candidate_weight: Weight just logged

        Returns:
            True if candidate_weight is a new personal record
        """
        try:
            best = await self.current_max(user_id, exercise_name)
        except DataStoreError as e:
            logger.warning(f"PR lookup failed for '{exercise_name}': {e}")
            return False
        return best is None or candidate_weight > best

    async def current_max(self, user_id: str, exercise_name: str) -> Optional[float]:
        """Highest recorded weight for the exercise, or None without records."""
        records = await self._matching_records(user_id, exercise_name)
        if not records:
            return None
        return max(record.weight for record in records)

    async def save_record(
        self,
        user_id: str,
        exercise_name: str,
        weight: float,
        reps: int,
        record_date: date,
    ) -> PersonalRecord:
        """
        Append a personal-record row.

        Callers decide with detect_pr() first; nothing is checked here.
        Store errors propagate.
        """
        rows = await self._store.insert(
            "personal_records",
            [
                {
                    "user_id": user_id,
                    "exercise_name": exercise_name.strip(),
                    "weight": weight,
                    "reps": reps,
                    "date": record_date.isoformat(),
                }
            ],
        )
        record = personal_record_from_row(rows[0])
        logger.info(f"Saved PR for '{record.exercise_name}': {record.weight} x {record.reps}")
        return record

    async def list_records(self, user_id: str) -> List[PersonalRecord]:
        """All of the user's records, most recent first."""
        rows = await self._store.query(
            "personal_records",
            filters=[eq("user_id", user_id)],
            order=[Order("date", desc=True), Order("created_at", desc=True)],
        )
        return [personal_record_from_row(row) for row in rows if row.get("user_id") == user_id]

    async def _matching_records(self, user_id: str, exercise_name: str) -> List[PersonalRecord]:
        rows = await self._store.query(
            "personal_records",
            filters=[eq("user_id", user_id), ilike_exact("exercise_name", exercise_name)],
            order=[Order("weight", desc=True)],
        )
        return [
            personal_record_from_row(row)
            for row in rows
            if row.get("user_id") == user_id and names_match(row.get("exercise_name"), exercise_name)
        ]
