"""
Week template hierarchy as read from the store.

WeekTemplate -> DayTemplate -> ExerciseTemplate -> TemplateSet. These are
blueprint rows: no live workout ever references them. Values are kept as the
store returns them; sanitation happens when a template is copied.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class TemplateSet(BaseModel):
    id: Optional[str] = Field(default=None)
    reps: int = Field(default=1)
    weight: float = Field(default=0.0)
    order_index: int = Field(default=0)


class ExerciseTemplate(BaseModel):
    """
    An exercise inside a blueprint day.

    Also used for the exercises of a day library item, which share the same
    columns.
    """

    id: Optional[str] = Field(default=None)
    name: str = Field(..., min_length=1)
    muscle_group: Optional[str] = Field(default=None)
    order_index: int = Field(default=0)
    sets: List[TemplateSet] = Field(default_factory=list)


class DayTemplate(BaseModel):
    id: Optional[str] = Field(default=None)
    template_id: Optional[str] = Field(default=None)
    name: str = Field(..., min_length=1, description="Weekday name, e.g. 'Monday'")
    order_index: int = Field(default=0)
    exercises: List[ExerciseTemplate] = Field(default_factory=list)


class WeekTemplate(BaseModel):
    id: Optional[str] = Field(default=None)
    user_id: Optional[str] = Field(default=None)
    name: str = Field(..., min_length=1)
    created_at: Optional[datetime] = Field(default=None)
    days: List[DayTemplate] = Field(default_factory=list)


class DayTemplateInfo(BaseModel):
    """A day template listed together with its week template's name."""

    id: str
    name: str
    week_template_id: str
    week_template_name: str = ""
    exercise_names: List[str] = Field(default_factory=list)
