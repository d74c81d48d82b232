"""
Unit tests for logbook/core/library_service.py
"""

from datetime import datetime, timezone

import pytest

from application.exceptions import ConstraintViolation, NotFound
from domain.models import ExerciseLibraryItem, LibrarySortMode
from logbook.core.library_service import (
    UNCATEGORIZED,
    LibraryService,
    exercise_as_blueprint,
    group_by_muscle,
    sort_exercise_library,
)

USER = "user-1"
OTHER = "user-2"


@pytest.fixture
def library(store):
    return LibraryService(store)


def item(name, muscle_group=None, usage_count=0, last_used_day=None, created_day=1):
    return ExerciseLibraryItem(
        name=name,
        muscle_group=muscle_group,
        usage_count=usage_count,
        last_used_at=datetime(2024, 1, last_used_day, tzinfo=timezone.utc) if last_used_day else None,
        created_at=datetime(2024, 1, created_day, tzinfo=timezone.utc),
    )


@pytest.mark.unit
class TestSorting:

    ITEMS = [
        item("squat", "Legs", usage_count=5, last_used_day=3, created_day=1),
        item("Bench Press", "Chest", usage_count=9, last_used_day=None, created_day=2),
        item("Curl", None, usage_count=1, last_used_day=7, created_day=3),
    ]

    @pytest.mark.parametrize(
        "mode,expected",
        [
            (LibrarySortMode.RECENT, ["Curl", "squat", "Bench Press"]),
            (LibrarySortMode.FREQUENT, ["Bench Press", "squat", "Curl"]),
            (LibrarySortMode.ALPHA, ["Bench Press", "Curl", "squat"]),
            (LibrarySortMode.MUSCLE, ["Bench Press", "squat", "Curl"]),
            (LibrarySortMode.CREATED, ["Curl", "Bench Press", "squat"]),
        ],
    )
    def test_modes(self, mode, expected):
        assert [i.name for i in sort_exercise_library(self.ITEMS, mode)] == expected

    def test_mode_accepts_string(self):
        assert [i.name for i in sort_exercise_library(self.ITEMS, "alpha")][0] == "Bench Press"

    def test_group_by_muscle(self):
        groups = group_by_muscle(self.ITEMS)

        assert list(groups) == ["Legs", "Chest", UNCATEGORIZED]
        assert [i.name for i in groups[UNCATEGORIZED]] == ["Curl"]

    def test_exercise_as_blueprint(self):
        blueprint = exercise_as_blueprint(
            ExerciseLibraryItem(name=" Curl ", muscle_group=" ", default_reps=12, default_weight=15),
            set_count=2,
        )

        assert blueprint.name == "Curl"
        assert blueprint.muscle_group is None
        assert [(s.reps, s.weight) for s in blueprint.sets] == [(12, 15), (12, 15)]
        assert blueprint.sets[0] is not blueprint.sets[1]


@pytest.mark.unit
class TestExerciseLibrary:

    @pytest.mark.asyncio
    async def test_create_sanitizes_input(self, store, library):
        created = await library.create_exercise(USER, "  Curl ", muscle_group="  ", default_reps=0, default_weight=-2)

        assert created.name == "Curl"
        assert created.muscle_group is None
        assert created.default_reps == 1
        assert created.default_weight == 0
        assert store.rows("exercise_library")[0]["user_id"] == USER

    @pytest.mark.asyncio
    async def test_create_blank_name_rejected(self, store, library):
        with pytest.raises(ValueError):
            await library.create_exercise(USER, "   ")

        assert store.count("exercise_library") == 0

    @pytest.mark.asyncio
    async def test_create_duplicate_name_rejected(self, library):
        await library.create_exercise(USER, "Curl")

        with pytest.raises(ConstraintViolation):
            await library.create_exercise(USER, "curl")

    @pytest.mark.asyncio
    async def test_list_only_own_items(self, library):
        await library.create_exercise(USER, "Squat")
        await library.create_exercise(USER, "Bench Press")
        await library.create_exercise(OTHER, "Curl")

        items = await library.list_exercises(USER)

        assert [i.name for i in items] == ["Bench Press", "Squat"]

    @pytest.mark.asyncio
    async def test_update_changes_only_given_fields(self, library):
        created = await library.create_exercise(USER, "Curl", muscle_group="Arms", default_reps=12)

        updated = await library.update_exercise(USER, created.id, default_weight=20)

        assert (updated.name, updated.muscle_group, updated.default_reps, updated.default_weight) == (
            "Curl",
            "Arms",
            12,
            20,
        )

    @pytest.mark.asyncio
    async def test_update_empty_muscle_group_clears_it(self, library):
        created = await library.create_exercise(USER, "Curl", muscle_group="Arms")

        updated = await library.update_exercise(USER, created.id, muscle_group="")

        assert updated.muscle_group is None

    @pytest.mark.asyncio
    async def test_update_without_changes_does_not_write(self, store, library):
        created = await library.create_exercise(USER, "Curl")

        unchanged = await library.update_exercise(USER, created.id)

        assert unchanged.name == "Curl"
        assert ("update", "exercise_library") not in store.calls

    @pytest.mark.asyncio
    async def test_other_users_item_not_found(self, store, library):
        created = await library.create_exercise(OTHER, "Curl")

        with pytest.raises(NotFound):
            await library.update_exercise(USER, created.id, name="Mine")
        with pytest.raises(NotFound):
            await library.delete_exercise(USER, created.id)

        assert store.count("exercise_library") == 1

    @pytest.mark.asyncio
    async def test_delete(self, store, library):
        created = await library.create_exercise(USER, "Curl")

        await library.delete_exercise(USER, created.id)

        assert store.count("exercise_library") == 0

    @pytest.mark.asyncio
    async def test_use_exercise_bumps_usage(self, store, library):
        created = await library.create_exercise(USER, "Curl", default_reps=12, default_weight=15)

        blueprint = await library.use_exercise(USER, created.id, set_count=4)

        assert len(blueprint.sets) == 4
        row = store.rows("exercise_library")[0]
        assert row["usage_count"] == 1
        assert row["last_used_at"] is not None

    @pytest.mark.asyncio
    async def test_failed_bump_does_not_fail_use(self, store, library):
        created = await library.create_exercise(USER, "Curl")
        store.fail_on("update", "exercise_library")

        blueprint = await library.use_exercise(USER, created.id)

        assert blueprint.name == "Curl"
        assert store.rows("exercise_library")[0]["usage_count"] == 0

    @pytest.mark.asyncio
    async def test_bump_usage_rejects_untracked_tables(self, library):
        with pytest.raises(ValueError):
            await library.bump_usage("workouts", "w-1")


@pytest.mark.unit
class TestDayLibrary:

    @pytest.mark.asyncio
    async def test_list_days_newest_first(self, store, library):
        store.seed_library_day(USER, "Upper A", [("Row", [(8, 60)])])
        store.seed_library_day(USER, "Lower A", [("Squat", [(5, 100)])])
        store.seed_library_day(OTHER, "Theirs")

        days = await library.list_days(USER)

        assert [d.name for d in days] == ["Lower A", "Upper A"]
        assert days[0].exercises[0].sets[0].weight == 100

    @pytest.mark.asyncio
    async def test_get_day(self, store, library):
        day_id = store.seed_library_day(USER, "Upper A", [("Row", [(8, 60)]), ("Curl", [(12, 15)])])

        day = await library.get_day(USER, day_id)

        assert [e.name for e in day.exercises] == ["Row", "Curl"]

    @pytest.mark.asyncio
    async def test_delete_day_cascades(self, store, library):
        day_id = store.seed_library_day(USER, "Upper A", [("Row", [(8, 60)])])

        await library.delete_day(USER, day_id)

        assert store.count("day_library") == 0
        assert store.count("day_library_exercises") == 0
        assert store.count("day_library_sets") == 0

    @pytest.mark.asyncio
    async def test_other_users_day_not_found(self, store, library):
        day_id = store.seed_library_day(OTHER, "Theirs")

        with pytest.raises(NotFound):
            await library.get_day(USER, day_id)
        with pytest.raises(NotFound):
            await library.delete_day(USER, day_id)
