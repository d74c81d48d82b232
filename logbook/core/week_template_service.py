"""
Week Template Service.

Reads and simple writes of the week template hierarchy. Copying and saving a
whole hierarchy goes through the Clone Engine.
"""
from typing import List
import logging

from application.ports import DataStore, Order, eq
from application.use_cases import fetch_owned, load_day_template, load_week_template
from domain.converters import many, week_template_from_row
from domain.models import DayTemplate, DayTemplateInfo, WeekTemplate

logger = logging.getLogger(__name__)

_DAY_LISTING_SELECT = (
    "id, user_id, name, "
    "day_templates ( id, name, order_index, exercise_templates ( name, order_index ) )"
)


class WeekTemplateService:
    """Week template reads, creation and deletion."""

    def __init__(self, store: DataStore):
        self._store = store

    async def list_week_templates(self, user_id: str) -> List[WeekTemplate]:
        """The user's week templates without their days, newest first."""
        rows = await self._store.query(
            "week_templates",
            filters=[eq("user_id", user_id)],
            order=[Order("created_at", desc=True)],
        )
        return [week_template_from_row(row) for row in rows if row.get("user_id") == user_id]

    async def get_week_template(self, user_id: str, template_id: str) -> WeekTemplate:
        """
        Get a week template with days, exercises and sets in stored order.

        Raises:
            NotFound: If the template is missing or not the user's
        """
        return await load_week_template(self._store, user_id, template_id)

    async def get_day_template(self, user_id: str, day_template_id: str) -> DayTemplate:
        """
        Raises:
            NotFound: If the day is missing or its week is not the user's
        """
        return await load_day_template(self._store, user_id, day_template_id)

    async def create_week_template(self, user_id: str, name: str) -> WeekTemplate:
        """Create an empty week template."""
        clean_name = (name or "").strip()
        if not clean_name:
            raise ValueError("Week template name must not be empty")
        rows = await self._store.insert("week_templates", [{"user_id": user_id, "name": clean_name}])
        logger.info(f"Created week template '{clean_name}'")
        return week_template_from_row(rows[0])

    async def delete_week_template(self, user_id: str, template_id: str) -> None:
        """Delete a week template; its days, exercises and sets cascade."""
        await fetch_owned(self._store, "week_templates", template_id, user_id, entity="Week template")
        await self._store.delete("week_templates", template_id)
        logger.info(f"Deleted week template {template_id}")

    async def list_day_templates(self, user_id: str) -> List[DayTemplateInfo]:
        """
        Every day of every week template, for the "add from template" picker.

        Weeks are listed by name, days in template order.
        """
        rows = await self._store.query(
            "week_templates",
            columns=_DAY_LISTING_SELECT,
            filters=[eq("user_id", user_id)],
            order=[Order("name")],
        )
        infos: List[DayTemplateInfo] = []
        for week in rows:
            if week.get("user_id") != user_id:
                continue
            days = sorted(many(week.get("day_templates")), key=lambda d: d.get("order_index") or 0)
            for day in days:
                exercises = sorted(many(day.get("exercise_templates")), key=lambda e: e.get("order_index") or 0)
                infos.append(
                    DayTemplateInfo(
                        id=day["id"],
                        name=day["name"],
                        week_template_id=week["id"],
                        week_template_name=week.get("name") or "",
                        exercise_names=[e["name"] for e in exercises],
                    )
                )
        return infos
