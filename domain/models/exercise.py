"""
Exercise entity and name normalization.

Exercises are matched by visible name, not by id: historical workouts
reference exercises loosely across renames and duplicate rows, so two rows
whose trimmed, case-folded names are equal are the same logical exercise.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


def normalize_name(name: Optional[str]) -> str:
    """
    Normalize an exercise name for matching.

    Examples:
        >>> normalize_name("  Bench Press ")
        'bench press'
        >>> normalize_name(None)
        ''
    """
    if not name:
        return ""
    return name.strip().casefold()


def names_match(left: Optional[str], right: Optional[str]) -> bool:
    """True when both names normalize to the same non-empty value."""
    normalized = normalize_name(left)
    return bool(normalized) and normalized == normalize_name(right)


class Exercise(BaseModel):
    """A user's exercise row (the `exercises` table)."""

    id: Optional[str] = Field(default=None, description="Exercise UUID")
    user_id: Optional[str] = Field(default=None, description="Owning user")
    name: str = Field(..., min_length=1, description="Display name")
    created_at: Optional[datetime] = Field(default=None)

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)
