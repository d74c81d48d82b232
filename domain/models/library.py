"""
Exercise and day library items.

Standalone reusable blueprints with usage tracking. `usage_count` and
`last_used_at` are bumped after each successful clone-and-insert.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.models.template import ExerciseTemplate


class LibrarySortMode(str, Enum):
    """
    Orderings offered for the exercise library.

    - RECENT: last used first, never-used items last
    - FREQUENT: highest usage count first
    - ALPHA: name, case-insensitive
    - MUSCLE: muscle group (uncategorized last), then name
    - CREATED: newest first
    """

    RECENT = "recent"
    FREQUENT = "frequent"
    ALPHA = "alpha"
    MUSCLE = "muscle"
    CREATED = "created"


class ExerciseLibraryItem(BaseModel):
    id: Optional[str] = Field(default=None)
    user_id: Optional[str] = Field(default=None)
    name: str = Field(..., min_length=1)
    muscle_group: Optional[str] = Field(default=None)
    default_reps: int = Field(default=10, ge=1)
    default_weight: float = Field(default=0.0, ge=0)
    usage_count: int = Field(default=0, ge=0)
    last_used_at: Optional[datetime] = Field(default=None)
    created_at: Optional[datetime] = Field(default=None)


class DayLibraryItem(BaseModel):
    id: Optional[str] = Field(default=None)
    user_id: Optional[str] = Field(default=None)
    name: str = Field(..., min_length=1)
    usage_count: int = Field(default=0, ge=0)
    last_used_at: Optional[datetime] = Field(default=None)
    created_at: Optional[datetime] = Field(default=None)
    exercises: List[ExerciseTemplate] = Field(default_factory=list)
