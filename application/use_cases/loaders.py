"""
Owner-checked blueprint reads shared by the use cases.

Each loader raises NotFound when the row is missing or belongs to another
user, before the caller writes anything.
"""

from typing import Any, Dict

from application.exceptions import NotFound
from application.ports import DataStore, eq
from domain.converters import (
    DAY_LIBRARY_TREE_SELECT,
    DAY_TEMPLATE_TREE_SELECT,
    WEEK_TEMPLATE_TREE_SELECT,
    day_library_item_from_row,
    day_template_from_row,
    one,
    week_template_from_row,
)
from domain.models import DayLibraryItem, DayTemplate, WeekTemplate


async def fetch_owned(
    store: DataStore,
    table: str,
    row_id: str,
    user_id: str,
    *,
    entity: str,
    columns: str = "*",
) -> Dict[str, Any]:
    """
    Read one row of a table that has a `user_id` column.

    Raises:
        NotFound: If no row with that id belongs to the user
    """
    rows = await store.query(
        table,
        columns=columns,
        filters=[eq("id", row_id), eq("user_id", user_id)],
        limit=1,
    )
    if not rows or rows[0].get("user_id") != user_id:
        raise NotFound(entity, row_id)
    return rows[0]


async def load_week_template(store: DataStore, user_id: str, template_id: str) -> WeekTemplate:
    """Week template with days, exercises and sets in stored order."""
    row = await fetch_owned(
        store,
        "week_templates",
        template_id,
        user_id,
        entity="Week template",
        columns=WEEK_TEMPLATE_TREE_SELECT,
    )
    return week_template_from_row(row)


async def load_day_template(store: DataStore, user_id: str, day_template_id: str) -> DayTemplate:
    """
    One day template, owner-checked through its week template.

    Day templates carry no user column; the inner-joined week does.
    """
    rows = await store.query(
        "day_templates",
        columns=DAY_TEMPLATE_TREE_SELECT,
        filters=[eq("id", day_template_id), eq("week.user_id", user_id)],
        limit=1,
    )
    week = one(rows[0].get("week")) if rows else None
    if week is None or week.get("user_id") != user_id:
        raise NotFound("Day template", day_template_id)
    return day_template_from_row(rows[0])


async def load_library_day(store: DataStore, user_id: str, library_day_id: str) -> DayLibraryItem:
    """Day library item with its exercises and sets."""
    row = await fetch_owned(
        store,
        "day_library",
        library_day_id,
        user_id,
        entity="Library day",
        columns=DAY_LIBRARY_TREE_SELECT,
    )
    return day_library_item_from_row(row)
