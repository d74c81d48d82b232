"""
LogbookEngine facade.

The single entry point the screen layer talks to. Every call resolves the
current user through the store first; Unauthenticated propagates unchanged.
"""
from datetime import date
from typing import List, Optional, Sequence
import logging

from application.exceptions import DataStoreError
from application.ports import DataStore
from application.use_cases import CloneEngine, DaySource, GenerateWeekUseCase, GenerationResult
from domain.models import (
    DayBlueprint,
    DayLibraryItem,
    DayTemplate,
    DayTemplateInfo,
    ExerciseBlueprint,
    ExerciseLibraryItem,
    LibrarySortMode,
    PersonalRecord,
    WeekTemplate,
    Workout,
)
from logbook.core import aggregation
from logbook.core.aggregation import ChartDataPoint, PRSummaryRow, WeekComparison, WeeklyVolumeSummary, WeekWorkouts
from logbook.core.comparison import ComparisonEngine, ExerciseComparison
from logbook.core.history_reader import HistoryEntry, HistoryReader
from logbook.core.library_service import LibraryService
from logbook.core.pr_tracker import PRTracker
from logbook.core.week_template_service import WeekTemplateService
from logbook.core.weight_resolver import WeightResolver
from logbook.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class LogbookEngine:
    """
    Progress analytics and template generation for one store.

    Usage:
        >>> engine = LogbookEngine(store)
        >>> await engine.max_weight_series("Bench Press")
        [ChartDataPoint(date=datetime.date(2024, 1, 1), value=52.5)]
        >>> result = await engine.generate_week("tpl-1", date(2024, 1, 8))
        >>> result.workout_ids
        ['w-1', 'w-2', 'w-3']
    """

    def __init__(self, store: DataStore, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._store = store
        self.history = HistoryReader(store)
        self.pr_tracker = PRTracker(store)
        self.comparison = ComparisonEngine(store, scan_limit=self._settings.comparison_scan_limit)
        self.clone_engine = CloneEngine(store)
        self.library = LibraryService(store)
        self.templates = WeekTemplateService(store)
        self.generator = GenerateWeekUseCase(
            store=store,
            clone_engine=self.clone_engine,
            resolver_factory=self._new_resolver,
        )

    def _new_resolver(self) -> WeightResolver:
        return WeightResolver(self.history, cache_enabled=self._settings.carry_over_cache_enabled)

    async def _user(self) -> str:
        return await self._store.find_user()

    # =========================================================================
    # History and analytics
    # =========================================================================

    async def exercise_history(self, exercise_name: str, limit: Optional[int] = None) -> List[HistoryEntry]:
        user_id = await self._user()
        return await self.history.read_exercise_history(user_id, exercise_name, limit)

    async def exercise_names(self) -> List[str]:
        user_id = await self._user()
        return await self.history.distinct_exercise_names(user_id)

    async def max_weight_series(self, exercise_name: str) -> List[ChartDataPoint]:
        return aggregation.max_weight_series(await self.exercise_history(exercise_name))

    async def volume_series(self, exercise_name: str) -> List[ChartDataPoint]:
        return aggregation.volume_series(await self.exercise_history(exercise_name))

    async def weekly_volumes(self, weeks_count: Optional[int] = None) -> List[WeeklyVolumeSummary]:
        """
        Volume, set and exercise totals for the most recent weeks with data.

        Weeks without logged sets are not counted, so a break in training
        never pushes earlier weeks out of the result.

        Args:
            weeks_count: Number of weeks (defaults to settings.default_weeks_count)
        """
        count = weeks_count if weeks_count is not None else self._settings.default_weeks_count
        return aggregation.weekly_summaries(await self.workouts(), count)

    async def week_comparison(self) -> Optional[WeekComparison]:
        """The two most recent weeks with data; None with fewer than two."""
        return aggregation.week_comparison(aggregation.weekly_summaries(await self.workouts()))

    async def workouts(self, start: Optional[date] = None, end: Optional[date] = None) -> List[Workout]:
        user_id = await self._user()
        return await self.history.read_workouts(user_id, start, end)

    async def workouts_by_week(self, start: Optional[date] = None, end: Optional[date] = None) -> List[WeekWorkouts]:
        return aggregation.group_by_week(await self.workouts(start, end))

    async def personal_records_summary(self) -> List[PRSummaryRow]:
        return aggregation.personal_records_summary(await self.workouts())

    # =========================================================================
    # Personal records and comparison
    # =========================================================================

    async def detect_pr(self, exercise_name: str, candidate_weight: float) -> bool:
        user_id = await self._user()
        return await self.pr_tracker.detect_pr(user_id, exercise_name, candidate_weight)

    async def save_pr(self, exercise_name: str, weight: float, reps: int, record_date: date) -> PersonalRecord:
        user_id = await self._user()
        return await self.pr_tracker.save_record(user_id, exercise_name, weight, reps, record_date)

    async def personal_records(self) -> List[PersonalRecord]:
        user_id = await self._user()
        return await self.pr_tracker.list_records(user_id)

    async def compare_exercise(
        self,
        exercise_name: str,
        exclude_workout_id: Optional[str],
        current_max_weight: float,
    ) -> Optional[ExerciseComparison]:
        user_id = await self._user()
        return await self.comparison.compare(user_id, exercise_name, exclude_workout_id, current_max_weight)

    async def last_used_weight(self, exercise_name: str) -> Optional[float]:
        """Most recently logged weight for the exercise; None when unknown or unreadable."""
        user_id = await self._user()
        try:
            return await self._new_resolver().last_used_weight(user_id, exercise_name)
        except DataStoreError as e:
            logger.warning(f"Last used weight lookup failed for '{exercise_name}': {e}")
            return None

    # =========================================================================
    # Generation and cloning
    # =========================================================================

    async def generate_week(self, template_id: str, week_start_date: date) -> GenerationResult:
        user_id = await self._user()
        return await self.generator.execute(user_id, template_id, week_start_date)

    async def generate_day(self, day_template_id: str, workout_date: date) -> str:
        user_id = await self._user()
        return await self.generator.generate_day(user_id, day_template_id, workout_date)

    async def previous_week_day(self, title: str, workout_date: date) -> Optional[DayBlueprint]:
        """
        Last week's workout with the same title, copied as a starting point.

        Returns None when no workout with that title was logged in the 7 days
        before workout_date. Store errors propagate.
        """
        user_id = await self._user()
        workout = await self.history.previous_week_workout(user_id, title, workout_date)
        if workout is None:
            return None
        return CloneEngine.copy_day(workout)

    async def save_day_to_library(self, source: DaySource, name: Optional[str] = None) -> DayLibraryItem:
        user_id = await self._user()
        return await self.clone_engine.clone_day_to_library(user_id, source, name)

    async def start_workout_from_library(
        self,
        library_day_id: str,
        workout_date: date,
        title: Optional[str] = None,
    ) -> str:
        user_id = await self._user()
        return await self.clone_engine.clone_library_day_to_workout(user_id, library_day_id, workout_date, title)

    async def copy_week_template(self, template_id: str, new_name: Optional[str] = None) -> WeekTemplate:
        user_id = await self._user()
        return await self.clone_engine.clone_week_template(user_id, template_id, new_name)

    async def save_week_template(self, template_id: str, name: str, days: Sequence[DaySource]) -> WeekTemplate:
        user_id = await self._user()
        return await self.clone_engine.replace_week_days(user_id, template_id, name, days)

    # =========================================================================
    # Week templates
    # =========================================================================

    async def week_templates(self) -> List[WeekTemplate]:
        user_id = await self._user()
        return await self.templates.list_week_templates(user_id)

    async def week_template(self, template_id: str) -> WeekTemplate:
        user_id = await self._user()
        return await self.templates.get_week_template(user_id, template_id)

    async def day_template(self, day_template_id: str) -> DayTemplate:
        user_id = await self._user()
        return await self.templates.get_day_template(user_id, day_template_id)

    async def day_templates(self) -> List[DayTemplateInfo]:
        user_id = await self._user()
        return await self.templates.list_day_templates(user_id)

    async def create_week_template(self, name: str) -> WeekTemplate:
        user_id = await self._user()
        return await self.templates.create_week_template(user_id, name)

    async def delete_week_template(self, template_id: str) -> None:
        user_id = await self._user()
        await self.templates.delete_week_template(user_id, template_id)

    # =========================================================================
    # Libraries
    # =========================================================================

    async def library_exercises(self, mode: Optional[LibrarySortMode] = None) -> List[ExerciseLibraryItem]:
        user_id = await self._user()
        return await self.library.list_exercises(user_id, mode)

    async def add_library_exercise(
        self,
        name: str,
        muscle_group: Optional[str] = None,
        default_reps: int = 10,
        default_weight: float = 0.0,
    ) -> ExerciseLibraryItem:
        user_id = await self._user()
        return await self.library.create_exercise(user_id, name, muscle_group, default_reps, default_weight)

    async def update_library_exercise(self, item_id: str, **changes) -> ExerciseLibraryItem:
        user_id = await self._user()
        return await self.library.update_exercise(user_id, item_id, **changes)

    async def delete_library_exercise(self, item_id: str) -> None:
        user_id = await self._user()
        await self.library.delete_exercise(user_id, item_id)

    async def use_library_exercise(self, item_id: str, set_count: int = 3) -> ExerciseBlueprint:
        user_id = await self._user()
        return await self.library.use_exercise(user_id, item_id, set_count)

    async def library_days(self) -> List[DayLibraryItem]:
        user_id = await self._user()
        return await self.library.list_days(user_id)

    async def library_day(self, day_id: str) -> DayLibraryItem:
        user_id = await self._user()
        return await self.library.get_day(user_id, day_id)

    async def delete_library_day(self, day_id: str) -> None:
        user_id = await self._user()
        await self.library.delete_day(user_id, day_id)
