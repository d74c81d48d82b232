"""
Unit tests for logbook/core/comparison.py
"""

from datetime import date

import pytest

from logbook.core.comparison import ComparisonEngine, Trend, occurrence_label, trend_between

USER = "user-1"
OTHER = "user-2"


@pytest.fixture
def comparison(store):
    return ComparisonEngine(store)


@pytest.mark.unit
class TestTrend:

    @pytest.mark.parametrize(
        "current,expected",
        [(80, Trend.SAME), (85, Trend.UP), (75, Trend.DOWN)],
    )
    def test_trend_against_prior_80(self, current, expected):
        assert trend_between(current, 80) == expected

    def test_label(self):
        assert occurrence_label(date(2024, 1, 8)) == "Week 2 – Monday"


@pytest.mark.unit
class TestCompare:

    @pytest.mark.asyncio
    async def test_most_recent_other_occurrence(self, store, comparison):
        store.seed_workout(USER, "2024-01-01", "Push", [("Bench Press", [(5, 70)])])
        store.seed_workout(USER, "2024-01-08", "Push", [("Bench Press", [(8, 75), (5, 80)])])
        current = store.seed_workout(USER, "2024-01-15", "Push", [("Bench Press", [(5, 85)])])

        result = await comparison.compare(USER, "bench press", current, 85)

        assert result.previous_weight == 80
        assert result.previous_reps == 8
        assert result.previous_date == date(2024, 1, 8)
        assert result.trend == Trend.UP
        assert result.label == "Week 2 – Monday"

    @pytest.mark.asyncio
    async def test_skips_occurrences_without_sets(self, store, comparison):
        store.seed_workout(USER, "2024-01-01", "Push", [("Bench Press", [(5, 70)])])
        store.seed_workout(USER, "2024-01-08", "Push", [("Bench Press", [])])

        result = await comparison.compare(USER, "Bench Press", None, 70)

        assert result.previous_date == date(2024, 1, 1)
        assert result.trend == Trend.SAME

    @pytest.mark.asyncio
    async def test_no_prior_occurrence(self, store, comparison):
        current = store.seed_workout(USER, "2024-01-15", "Push", [("Bench Press", [(5, 85)])])

        assert await comparison.compare(USER, "Bench Press", current, 85) is None

    @pytest.mark.asyncio
    async def test_other_users_workouts_ignored(self, store, comparison):
        store.seed_workout(OTHER, "2024-01-08", "Push", [("Bench Press", [(5, 100)])])

        assert await comparison.compare(USER, "Bench Press", None, 85) is None

    @pytest.mark.asyncio
    async def test_scan_limit_bounds_search(self, store):
        store.seed_workout(USER, "2024-01-01", "Legs", [("Squat", [(5, 100)])])
        store.seed_workout(USER, "2024-01-02", "Push", [("Bench Press", [(5, 60)])])
        store.seed_workout(USER, "2024-01-03", "Push", [("Bench Press", [(5, 60)])])

        result = await ComparisonEngine(store, scan_limit=2).compare(USER, "Squat", None, 100)

        assert result is None

    @pytest.mark.asyncio
    async def test_empty_workouts_do_not_use_up_scan_limit(self, store):
        store.seed_workout(USER, "2024-01-01", "Legs", [("Squat", [(5, 100)])])
        store.seed_workout(USER, "2024-01-02", "Rest")
        store.seed_workout(USER, "2024-01-03", "Rest")

        result = await ComparisonEngine(store, scan_limit=1).compare(USER, "Squat", None, 105)

        assert result.previous_date == date(2024, 1, 1)
        assert result.trend == Trend.UP

    @pytest.mark.asyncio
    async def test_store_failure_returns_none(self, store, comparison):
        store.seed_workout(USER, "2024-01-01", "Push", [("Bench Press", [(5, 70)])])
        store.fail_on("query", "workouts")

        assert await comparison.compare(USER, "Bench Press", None, 70) is None
