"""
Unit tests for logbook/core/weight_resolver.py
"""

import pytest

from logbook.core.weight_resolver import WeightResolver

USER = "user-1"


@pytest.mark.unit
class TestResolve:

    @pytest.mark.asyncio
    async def test_history_weight_wins(self, store, history_reader):
        store.seed_workout(USER, "2024-01-01", "Push Day", [("Bench Press", [(5, 50), (5, 52.5)])])

        weight = await WeightResolver(history_reader).resolve(USER, "bench press", 40)

        assert weight == 52.5

    @pytest.mark.asyncio
    async def test_no_history_falls_back_to_template(self, history_reader):
        assert await WeightResolver(history_reader).resolve(USER, "Bench Press", 40) == 40

    @pytest.mark.asyncio
    async def test_zero_history_falls_back_to_template(self, store, history_reader):
        store.seed_workout(USER, "2024-01-01", "Pull", [("Pull Up", [(8, 0)])])

        assert await WeightResolver(history_reader).resolve(USER, "Pull Up", 5) == 5

    @pytest.mark.asyncio
    async def test_lookup_failure_falls_back_to_template(self, store, history_reader):
        store.seed_workout(USER, "2024-01-01", "Push Day", [("Bench Press", [(5, 50)])])
        store.fail_on("query", "exercises")

        assert await WeightResolver(history_reader).resolve(USER, "Bench Press", 40) == 40

    @pytest.mark.asyncio
    async def test_lookups_memoized_per_exercise(self, store, history_reader):
        store.seed_workout(USER, "2024-01-01", "Push Day", [("Bench Press", [(5, 50)])])
        resolver = WeightResolver(history_reader)

        await resolver.resolve(USER, "Bench Press", 40)
        await resolver.resolve(USER, " BENCH PRESS", 45)

        assert store.calls.count(("query", "exercises")) == 1

    @pytest.mark.asyncio
    async def test_cache_can_be_disabled(self, store, history_reader):
        store.seed_workout(USER, "2024-01-01", "Push Day", [("Bench Press", [(5, 50)])])
        resolver = WeightResolver(history_reader, cache_enabled=False)

        await resolver.resolve(USER, "Bench Press", 40)
        await resolver.resolve(USER, "Bench Press", 40)

        assert store.calls.count(("query", "exercises")) == 2

    @pytest.mark.asyncio
    async def test_failures_are_not_memoized(self, store, history_reader):
        store.seed_workout(USER, "2024-01-01", "Push Day", [("Bench Press", [(5, 50)])])
        store.fail_on("query", "exercises")
        resolver = WeightResolver(history_reader)

        assert await resolver.resolve(USER, "Bench Press", 40) == 40
        assert await resolver.resolve(USER, "Bench Press", 40) == 50
