"""
GenerateWeek Use Case (Template Generator).

Expands a week template into dated workouts. Each run moves through

    IDLE -> EXPANDING(day) -> RESOLVING_WEIGHT(exercise, set) -> WRITING
         -> ... -> DONE | FAILED

and records every transition on the result.

Days are processed sequentially in template order. A day whose (date, title)
already exists is skipped; any other failure ends the run. Nothing is rolled
back.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Callable, List, Optional

from application.exceptions import ConstraintViolation, DataStoreError, PartialWriteFailure
from application.ports import CarryOverWeights, DataStore
from application.use_cases.clone_engine import CloneEngine, require_exercise_names
from application.use_cases.loaders import load_day_template, load_week_template
from domain.models import DayBlueprint, DayTemplate, ExerciseBlueprint, SetBlueprint
from domain.week import day_offset

logger = logging.getLogger(__name__)


class GenerationState(str, Enum):
    IDLE = "idle"
    EXPANDING = "expanding"
    RESOLVING_WEIGHT = "resolving_weight"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class StateTransition:
    """One step of a generation run."""

    state: GenerationState
    day: Optional[str] = None
    exercise: Optional[str] = None
    set_index: Optional[int] = None


@dataclass
class GenerationResult:
    """Result of the GenerateWeek use case execution."""

    workout_ids: List[str] = field(default_factory=list)
    skipped_days: List[str] = field(default_factory=list)
    steps_completed: int = 0
    state: GenerationState = GenerationState.IDLE
    transitions: List[StateTransition] = field(default_factory=list)

    def enter(
        self,
        state: GenerationState,
        day: Optional[str] = None,
        exercise: Optional[str] = None,
        set_index: Optional[int] = None,
    ) -> None:
        self.state = state
        self.transitions.append(StateTransition(state, day, exercise, set_index))


def title_for(day_name: str, template_name: str) -> str:
    """
    Title of a generated workout.

    Examples:
        >>> title_for("Monday", "Push Pull Legs")
        'Monday — Push Pull Legs'
    """
    return f"{day_name} — {template_name}"


def date_for(week_start_date: date, day_name: str) -> date:
    """Date of a template day; unknown day names fall on week_start_date."""
    offset = day_offset(day_name)
    if offset is None:
        logger.warning(f"Unknown day name '{day_name}', scheduling it on {week_start_date}")
        offset = 0
    return week_start_date + timedelta(days=offset)


class GenerateWeekUseCase:
    """
    Use case for materializing week templates into workouts.

    Orchestrates the following workflow:
    1. Load the week template and check its exercise names (before any write)
    2. For each day: compute its date and title
    3. Resolve the carry-over weight of every set
    4. Write the day through the Clone Engine
    5. Skip days that already exist, stop on any other failure

    Dependencies are injected via constructor for testability. A new
    carry-over resolver is created for every run.

    Usage:
        >>> use_case = GenerateWeekUseCase(
        ...     store=store,
        ...     clone_engine=CloneEngine(store),
        ...     resolver_factory=lambda: WeightResolver(HistoryReader(store)),
        ... )
        >>> result = await use_case.execute(
        ...     user_id="user-123",
        ...     template_id="tpl-1",
        ...     week_start_date=date(2024, 1, 1),
        ... )
        >>> result.state
        <GenerationState.DONE: 'done'>
    """

    def __init__(
        self,
        store: DataStore,
        clone_engine: CloneEngine,
        resolver_factory: Callable[[], CarryOverWeights],
    ) -> None:
        self._store = store
        self._clone_engine = clone_engine
        self._resolver_factory = resolver_factory

    async def execute(
        self,
        user_id: str,
        template_id: str,
        week_start_date: date,
    ) -> GenerationResult:
        """
        Generate one workout per template day.

        week_start_date is used as given; day offsets are added to it.

        Args:
            user_id: Owner of the template and of the new workouts
            template_id: Week template to expand
            week_start_date: Date of the template's Monday

        Returns:
            GenerationResult with created workout ids and skipped day names

        Raises:
            NotFound: If the template is missing or not the user's
            ValueError: If any day has an exercise with a blank name; raised
                before anything is written
            PartialWriteFailure: If the run failed after rows were written
            DataStoreError: If the run failed before anything was written
        """
        result = GenerationResult()
        result.enter(GenerationState.IDLE)
        template = await load_week_template(self._store, user_id, template_id)
        for day in template.days:
            require_exercise_names(CloneEngine.copy_day(day))
        resolver = self._resolver_factory()

        for day in template.days:
            result.enter(GenerationState.EXPANDING, day=day.name)
            workout_date = date_for(week_start_date, day.name)
            title = title_for(day.name, template.name)
            blueprint = await self._resolve_weights(user_id, day, resolver, result)

            result.enter(GenerationState.WRITING, day=day.name)
            try:
                write = await self._clone_engine.write_live_day(user_id, blueprint, workout_date, title)
            except ConstraintViolation:
                logger.warning(f"Workout '{title}' already exists on {workout_date}, skipping")
                result.skipped_days.append(day.name)
                continue
            except PartialWriteFailure as e:
                result.enter(GenerationState.FAILED, day=day.name)
                raise PartialWriteFailure(
                    f"Generating week from template '{template.name}' failed on {day.name}",
                    steps_completed=result.steps_completed + e.steps_completed,
                    root_id=e.root_id,
                    created_ids=result.workout_ids + e.created_ids,
                ) from e
            except DataStoreError as e:
                result.enter(GenerationState.FAILED, day=day.name)
                if not result.workout_ids:
                    raise
                raise PartialWriteFailure(
                    f"Generating week from template '{template.name}' failed on {day.name}",
                    steps_completed=result.steps_completed,
                    root_id=result.workout_ids[-1],
                    created_ids=result.workout_ids,
                ) from e

            result.workout_ids.append(write.workout_id)
            result.steps_completed += write.steps_completed

        result.enter(GenerationState.DONE)
        logger.info(
            f"Generated {len(result.workout_ids)} workouts from template '{template.name}' "
            f"({len(result.skipped_days)} skipped, {result.steps_completed} rows)"
        )
        return result

    async def generate_day(
        self,
        user_id: str,
        day_template_id: str,
        workout_date: date,
    ) -> str:
        """
        Create a single workout from one day template, titled with the day name.

        Carry-over weights apply as in a week run. Errors propagate,
        including a ConstraintViolation for an existing (date, title).

        Returns:
            The new workout id
        """
        day = await load_day_template(self._store, user_id, day_template_id)
        result = GenerationResult()
        blueprint = await self._resolve_weights(user_id, day, self._resolver_factory(), result)
        write = await self._clone_engine.write_live_day(user_id, blueprint, workout_date, day.name)
        logger.info(f"Generated workout {write.workout_id} from day template {day_template_id}")
        return write.workout_id

    async def _resolve_weights(
        self,
        user_id: str,
        day: DayTemplate,
        resolver: CarryOverWeights,
        result: GenerationResult,
    ) -> DayBlueprint:
        copied = CloneEngine.copy_day(day)
        exercises: List[ExerciseBlueprint] = []
        for exercise in copied.exercises:
            sets: List[SetBlueprint] = []
            for index, template_set in enumerate(exercise.sets):
                result.enter(GenerationState.RESOLVING_WEIGHT, day.name, exercise.name, index)
                weight = await resolver.resolve(user_id, exercise.name, template_set.weight)
                sets.append(SetBlueprint(reps=template_set.reps, weight=weight).sanitized())
            exercises.append(exercise.model_copy(update={"sets": sets}))
        return DayBlueprint(name=copied.name, exercises=exercises)
