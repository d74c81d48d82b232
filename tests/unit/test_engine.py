"""
Unit tests for logbook/engine.py
"""

from datetime import date

import pytest

from application.exceptions import Unauthenticated
from domain.models import DayBlueprint, ExerciseBlueprint, LibrarySortMode, SetBlueprint
from logbook.core.comparison import Trend
from logbook.engine import LogbookEngine
from logbook.settings import Settings
from tests.fakes import FakeDataStore

USER = "user-1"
OTHER = "user-2"


@pytest.fixture
def signed_out(test_settings):
    return LogbookEngine(FakeDataStore(user_id=None), settings=test_settings)


@pytest.mark.unit
class TestAuthentication:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "call",
        [
            lambda e: e.exercise_history("Bench Press"),
            lambda e: e.max_weight_series("Bench Press"),
            lambda e: e.detect_pr("Bench Press", 100),
            lambda e: e.compare_exercise("Bench Press", None, 100),
            lambda e: e.generate_week("tpl-1", date(2024, 1, 8)),
            lambda e: e.week_templates(),
            lambda e: e.library_exercises(),
            lambda e: e.last_used_weight("Bench Press"),
            lambda e: e.previous_week_day("Push", date(2024, 1, 15)),
        ],
    )
    async def test_unauthenticated_propagates(self, signed_out, call):
        with pytest.raises(Unauthenticated):
            await call(signed_out)

    @pytest.mark.asyncio
    async def test_user_resolved_on_every_call(self, store, engine):
        await engine.exercise_names()
        await engine.exercise_names()

        assert store.calls.count(("find_user", None)) == 2

    @pytest.mark.asyncio
    async def test_signed_out_engine_writes_nothing(self, signed_out):
        with pytest.raises(Unauthenticated):
            await signed_out.save_pr("Squat", 100, 5, date(2024, 1, 1))

        assert signed_out._store.count("personal_records") == 0


@pytest.mark.unit
class TestAnalytics:

    @pytest.mark.asyncio
    async def test_max_weight_series(self, store, engine):
        store.seed_workout(USER, "2024-01-01", "Push", [("Bench Press", [(5, 40)])])
        store.seed_workout(USER, "2024-01-08", "Push", [("Bench Press", [(5, 50), (3, 52.5)])])

        points = await engine.max_weight_series("bench press")

        assert [(p.date, p.value) for p in points] == [
            (date(2024, 1, 1), 40),
            (date(2024, 1, 8), 52.5),
        ]

    @pytest.mark.asyncio
    async def test_weekly_volumes_and_comparison(self, store, engine):
        store.seed_workout(USER, "2023-12-25", "Too Old", [("Squat", [(10, 100)])])
        store.seed_workout(USER, "2024-01-01", "A", [("Squat", [(10, 100)])])
        store.seed_workout(USER, "2024-01-10", "B", [("Squat", [(10, 120)])])

        summaries = await engine.weekly_volumes(weeks_count=2)
        comparison = await engine.week_comparison()

        assert [(s.week_start, s.total_volume) for s in summaries] == [
            (date(2024, 1, 1), 1000),
            (date(2024, 1, 8), 1200),
        ]
        assert comparison.volume_change == 200

    @pytest.mark.asyncio
    async def test_weeks_before_a_training_break_are_kept(self, store, engine):
        store.seed_workout(USER, "2024-01-01", "A", [("Squat", [(10, 100)])])
        store.seed_workout(USER, "2024-01-08", "B", [("Squat", [(10, 120)])])
        store.seed_workout(USER, "2024-03-18", "Rest Week")

        summaries = await engine.weekly_volumes(weeks_count=2)
        comparison = await engine.week_comparison()

        assert [s.total_volume for s in summaries] == [1000, 1200]
        assert comparison.previous.week_start == date(2024, 1, 1)
        assert comparison.volume_change == 200

    @pytest.mark.asyncio
    async def test_comparison_ignores_default_weeks_count(self, store):
        engine = LogbookEngine(store, settings=Settings(environment="test", default_weeks_count=1, _env_file=None))
        store.seed_workout(USER, "2024-01-01", "A", [("Squat", [(10, 100)])])
        store.seed_workout(USER, "2024-01-08", "B", [("Squat", [(10, 120)])])

        assert (await engine.week_comparison()).volume_change == 200

    @pytest.mark.asyncio
    async def test_default_weeks_count_from_settings(self, store):
        engine = LogbookEngine(store, settings=Settings(environment="test", default_weeks_count=1, _env_file=None))
        store.seed_workout(USER, "2024-01-01", "A", [("Squat", [(10, 100)])])
        store.seed_workout(USER, "2024-01-10", "B", [("Squat", [(10, 120)])])

        summaries = await engine.weekly_volumes()

        assert [s.week_start for s in summaries] == [date(2024, 1, 8)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("weeks_count", [0, -1])
    async def test_non_positive_weeks_count_is_empty(self, store, engine, weeks_count):
        store.seed_workout(USER, "2024-01-01", "A", [("Squat", [(10, 100)])])

        assert await engine.weekly_volumes(weeks_count=weeks_count) == []

    @pytest.mark.asyncio
    async def test_workouts_by_week(self, store, engine):
        store.seed_workout(USER, "2024-01-02", "A")
        store.seed_workout(USER, "2024-01-09", "B")

        groups = await engine.workouts_by_week()

        assert [g.week_start for g in groups] == [date(2024, 1, 8), date(2024, 1, 1)]

    @pytest.mark.asyncio
    async def test_personal_records_summary(self, store, engine):
        store.seed_workout(USER, "2024-01-01", "A", [("Squat", [(5, 100)])])
        store.seed_workout(OTHER, "2024-01-01", "A", [("Squat", [(5, 300)])])

        rows = await engine.personal_records_summary()

        assert [(r.exercise_name, r.max_weight) for r in rows] == [("Squat", 100)]


@pytest.mark.unit
class TestRecordsAndComparison:

    @pytest.mark.asyncio
    async def test_detect_then_save(self, engine):
        assert await engine.detect_pr("Squat", 100) is True
        await engine.save_pr("Squat", 100, 5, date(2024, 1, 1))

        assert await engine.detect_pr("squat", 100) is False
        assert [r.weight for r in await engine.personal_records()] == [100]

    @pytest.mark.asyncio
    async def test_compare_exercise(self, store, engine):
        store.seed_workout(USER, "2024-01-08", "Push", [("Bench Press", [(5, 80)])])
        current = store.seed_workout(USER, "2024-01-15", "Push", [("Bench Press", [(5, 75)])])

        result = await engine.compare_exercise("Bench Press", current, 75)

        assert result.trend == Trend.DOWN

    @pytest.mark.asyncio
    async def test_last_used_weight(self, store, engine):
        store.seed_workout(USER, "2024-01-08", "Push", [("Bench Press", [(5, 80)])])

        assert await engine.last_used_weight("Bench Press") == 80
        assert await engine.last_used_weight("Deadlift") is None

    @pytest.mark.asyncio
    async def test_last_used_weight_failure_is_none(self, store, engine):
        store.seed_workout(USER, "2024-01-08", "Push", [("Bench Press", [(5, 80)])])
        store.fail_on("query", "exercises")

        assert await engine.last_used_weight("Bench Press") is None


@pytest.mark.unit
class TestGenerationAndLibraries:

    @pytest.mark.asyncio
    async def test_generate_week(self, store, engine):
        store.seed_workout(USER, "2024-01-01", "Push Day", [("Bench Press", [(5, 52.5)])])
        template_id = store.seed_week_template(USER, "PPL", [("Monday", [("Bench Press", [(5, 40)])])])

        result = await engine.generate_week(template_id, date(2024, 1, 8))

        history = await engine.exercise_history("Bench Press")
        assert len(result.workout_ids) == 1
        assert [(e.workout_date, e.weight, e.workout_title) for e in history][0] == (
            date(2024, 1, 8),
            52.5,
            "Monday — PPL",
        )

    @pytest.mark.asyncio
    async def test_previous_week_day_copies_last_weeks_workout(self, store, engine):
        store.seed_workout(USER, "2024-01-08", "Push", [("Bench Press", [(5, 52.5), (3, 55)])])

        blueprint = await engine.previous_week_day("Push", date(2024, 1, 15))

        assert blueprint.name == "Push"
        assert [(s.reps, s.weight) for s in blueprint.exercises[0].sets] == [(5, 52.5), (3, 55)]
        assert await engine.previous_week_day("Legs", date(2024, 1, 15)) is None

    @pytest.mark.asyncio
    async def test_template_lifecycle(self, store, engine):
        created = await engine.create_week_template("Block 1")
        copy = await engine.copy_week_template(created.id)
        saved = await engine.save_week_template(copy.id, "Block 2", [monday_blueprint()])

        assert [t.name for t in await engine.week_templates()] == ["Block 2", "Block 1"]
        assert [d.name for d in (await engine.week_template(saved.id)).days] == ["Monday"]
        infos = await engine.day_templates()
        assert [(i.week_template_name, i.name) for i in infos] == [("Block 2", "Monday")]
        assert (await engine.day_template(infos[0].id)).exercises[0].name == "Squat"

        await engine.delete_week_template(created.id)
        assert [t.name for t in await engine.week_templates()] == ["Block 2"]

    @pytest.mark.asyncio
    async def test_library_round_trip(self, store, engine):
        item = await engine.add_library_exercise("Curl", muscle_group="Arms")
        await engine.update_library_exercise(item.id, default_weight=15)
        blueprint = await engine.use_library_exercise(item.id, set_count=2)

        assert [s.weight for s in blueprint.sets] == [15, 15]
        listed = await engine.library_exercises(LibrarySortMode.FREQUENT)
        assert listed[0].usage_count == 1

        day = await engine.save_day_to_library(monday_blueprint(), name="Legs")
        assert [d.name for d in await engine.library_days()] == ["Legs"]
        assert (await engine.library_day(day.id)).exercises[0].name == "Squat"

        workout_id = await engine.start_workout_from_library(day.id, date(2024, 1, 9))
        assert [w.id for w in await engine.workouts()] == [workout_id]

        await engine.delete_library_day(day.id)
        await engine.delete_library_exercise(item.id)
        assert await engine.library_days() == []
        assert await engine.library_exercises() == []


def monday_blueprint():
    """A Monday blueprint with one squat set."""
    return DayBlueprint(
        name="Monday",
        exercises=[ExerciseBlueprint(name="Squat", sets=[SetBlueprint(reps=5, weight=100)])],
    )
