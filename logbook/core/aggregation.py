"""
Aggregation Engine.

Pure, synchronous rollups over history entries and workouts:
- Max-weight and volume per date (chart series)
- Weekly volume summaries and week-over-week comparison
- Workouts grouped by week
- Best weight per exercise from live data

No store access here; callers pass in what the History Reader returned.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from domain.models import Workout, normalize_name
from domain.week import week_end, week_start
from logbook.core.history_reader import HistoryEntry


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass(frozen=True)
class ChartDataPoint:
    """One point of a per-date series."""
    date: date
    value: float


@dataclass(frozen=True)
class WeeklyVolumeSummary:
    """Totals for one Monday-aligned week."""
    week_start: date
    total_volume: int
    total_sets: int
    total_exercises: int


@dataclass(frozen=True)
class WeekComparison:
    """The two most recent weeks and their current-minus-previous deltas."""
    current: WeeklyVolumeSummary
    previous: WeeklyVolumeSummary
    volume_change: int
    sets_change: int
    exercises_change: int


@dataclass
class WeekWorkouts:
    """Workouts of one week, most recent first."""
    week_start: date
    week_end: date
    workouts: List[Workout] = field(default_factory=list)


@dataclass(frozen=True)
class PRSummaryRow:
    """Heaviest logged weight of one exercise and the date it was lifted."""
    exercise_name: str
    max_weight: float
    best_date: date


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# =============================================================================
# Per-date series
# =============================================================================


def max_weight_series(history: Iterable[HistoryEntry]) -> List[ChartDataPoint]:
    """
    Heaviest set per workout date, ascending by date.

    Examples:
        >>> entries = [
        ...     HistoryEntry(reps=5, weight=60, workout_date=date(2024, 1, 1), workout_title=None, order_index=0),
        ...     HistoryEntry(reps=5, weight=65, workout_date=date(2024, 1, 1), workout_title=None, order_index=1),
        ... ]
        >>> max_weight_series(entries)
        [ChartDataPoint(date=datetime.date(2024, 1, 1), value=65.0)]
    """
    best: Dict[date, float] = {}
    for entry in history:
        weight = float(entry.weight)
        current = best.get(entry.workout_date)
        if current is None or weight > current:
            best[entry.workout_date] = weight
    return [ChartDataPoint(date=d, value=best[d]) for d in sorted(best)]


def volume_series(history: Iterable[HistoryEntry]) -> List[ChartDataPoint]:
    """Sum of weight x reps per workout date, ascending by date. Not rounded."""
    totals: Dict[date, float] = {}
    for entry in history:
        totals[entry.workout_date] = totals.get(entry.workout_date, 0.0) + entry.weight * entry.reps
    return [ChartDataPoint(date=d, value=totals[d]) for d in sorted(totals)]


# =============================================================================
# Weekly rollups
# =============================================================================


def weekly_summaries(
    workouts: Iterable[Workout],
    weeks_count: Optional[int] = None,
) -> List[WeeklyVolumeSummary]:
    """
    Roll logged sets up into Monday-aligned weeks.

    Only sets contribute: a week appears when it has at least one set, and an
    exercise counts toward `total_exercises` when it has at least one set.
    Exercises are counted by WorkoutExercise id, so the same exercise in two
    workouts of a week counts twice.

    Args:
        workouts: Live workouts, any order
        weeks_count: Keep only the most recent N weeks (all when None)

    Returns:
        Summaries ascending by week start, volume rounded half up
    """
    volume: Dict[date, float] = {}
    sets: Dict[date, int] = {}
    exercises: Dict[date, set] = {}

    for workout in workouts:
        bucket = week_start(workout.date)
        for position, workout_exercise in enumerate(workout.exercises):
            if not workout_exercise.sets:
                continue
            exercise_key = workout_exercise.id or (workout.id, position)
            exercises.setdefault(bucket, set()).add(exercise_key)
            for workout_set in workout_exercise.sets:
                volume[bucket] = volume.get(bucket, 0.0) + workout_set.volume
                sets[bucket] = sets.get(bucket, 0) + 1

    summaries = [
        WeeklyVolumeSummary(
            week_start=bucket,
            total_volume=_round_half_up(volume[bucket]),
            total_sets=sets[bucket],
            total_exercises=len(exercises[bucket]),
        )
        for bucket in sorted(volume)
    ]
    if weeks_count is not None:
        summaries = summaries[-weeks_count:] if weeks_count > 0 else []
    return summaries


def week_comparison(summaries: Sequence[WeeklyVolumeSummary]) -> Optional[WeekComparison]:
    """
    Compare the two most recent weeks.

    Returns None when fewer than two weeks are available.
    """
    if len(summaries) < 2:
        return None
    ordered = sorted(summaries, key=lambda s: s.week_start)
    previous, current = ordered[-2], ordered[-1]
    return WeekComparison(
        current=current,
        previous=previous,
        volume_change=current.total_volume - previous.total_volume,
        sets_change=current.total_sets - previous.total_sets,
        exercises_change=current.total_exercises - previous.total_exercises,
    )


def group_by_week(workouts: Iterable[Workout]) -> List[WeekWorkouts]:
    """Group workouts by week; weeks and workouts most recent first."""
    groups: Dict[date, List[Workout]] = {}
    for workout in workouts:
        groups.setdefault(week_start(workout.date), []).append(workout)
    return [
        WeekWorkouts(
            week_start=start,
            week_end=week_end(start),
            workouts=sorted(groups[start], key=lambda w: w.date, reverse=True),
        )
        for start in sorted(groups, reverse=True)
    ]


def personal_records_summary(workouts: Iterable[Workout]) -> List[PRSummaryRow]:
    """
    Heaviest logged weight per logical exercise, from live workouts.

    Ties on weight go to the most recent date. Rows are sorted by exercise
    name, ignoring case.
    """
    best: "OrderedDict[str, PRSummaryRow]" = OrderedDict()
    for workout in workouts:
        for workout_exercise in workout.exercises:
            key = normalize_name(workout_exercise.name)
            if not key or not workout_exercise.sets:
                continue
            candidate = PRSummaryRow(
                exercise_name=workout_exercise.name.strip(),
                max_weight=workout_exercise.max_weight,
                best_date=workout.date,
            )
            current = best.get(key)
            if (
                current is None
                or candidate.max_weight > current.max_weight
                or (candidate.max_weight == current.max_weight and candidate.best_date > current.best_date)
            ):
                best[key] = candidate
    return sorted(best.values(), key=lambda row: row.exercise_name.casefold())
