"""Exercise catalog: uniqueness, search, restricted delete."""

import pytest

from liftlog.core.exceptions import (
    DuplicateNameError,
    ReferencedByTemplateError,
    ReferencedByWorkoutError,
    ValidationError,
)
from liftlog.services import exercises, templates, workouts

pytestmark = pytest.mark.asyncio


class TestCreate:
    async def test_create_strips_name(self, db):
        exercise = await exercises.create_exercise(db, "  Deadlift ")
        assert exercise.name == "Deadlift"
        assert exercise.created_at is not None

    async def test_duplicate_name_conflicts(self, db, squat):
        with pytest.raises(DuplicateNameError):
            await exercises.create_exercise(db, "Squat")
        assert len(await exercises.list_exercises(db)) == 1

    async def test_names_are_case_sensitive(self, db, squat):
        """Uniqueness is on the name as stored."""
        await exercises.create_exercise(db, "squat")
        assert [e.name for e in await exercises.list_exercises(db)] == ["Squat", "squat"]

    async def test_blank_name_rejected(self, db):
        with pytest.raises(ValidationError):
            await exercises.create_exercise(db, "   ")


class TestListAndSearch:
    async def test_list_is_name_ascending(self, db):
        for name in ("Row", "Curl", "Press"):
            await exercises.create_exercise(db, name)
        assert [e.name for e in await exercises.list_exercises(db)] == ["Curl", "Press", "Row"]

    async def test_get_missing_returns_none(self, db):
        assert await exercises.get_exercise(db, 999) is None

    async def test_search_substring_case_insensitive_by_default(self, db, squat, bench):
        await exercises.create_exercise(db, "Front Squat")
        found = await exercises.search_exercises(db, "SQUAT")
        assert [e.name for e in found] == ["Front Squat", "Squat"]

    async def test_search_case_sensitive(self, db, squat):
        await exercises.create_exercise(db, "Front Squat")
        assert await exercises.search_exercises(db, "SQUAT", case_sensitive=True) == []
        found = await exercises.search_exercises(db, "Squat", case_sensitive=True)
        assert len(found) == 2

    async def test_empty_query_matches_everything(self, db, squat, bench):
        assert len(await exercises.search_exercises(db, "")) == 2

    async def test_wildcards_are_literal(self, db, squat):
        await exercises.create_exercise(db, "100% Effort")
        found = await exercises.search_exercises(db, "%")
        assert [e.name for e in found] == ["100% Effort"]


class TestDelete:
    async def test_delete_unused(self, db, squat):
        assert await exercises.delete_exercise(db, squat.id) is True
        assert await exercises.get_exercise(db, squat.id) is None

    async def test_delete_missing(self, db):
        assert await exercises.delete_exercise(db, 42) is False

    async def test_referenced_by_template_is_restricted(self, db, squat, leg_day):
        with pytest.raises(ReferencedByTemplateError):
            await exercises.delete_exercise(db, squat.id)
        assert await exercises.get_exercise(db, squat.id) is not None

    async def test_referenced_by_workout_is_restricted(self, db, bench, today):
        workout = await workouts.create_workout(db, "Push", today)
        await workouts.add_workout_exercise(db, workout.id, bench.id)
        with pytest.raises(ReferencedByWorkoutError):
            await exercises.delete_exercise(db, bench.id)
        assert await exercises.get_exercise(db, bench.id) is not None

    async def test_delete_allowed_after_template_slot_removed(self, db, squat, leg_day):
        await templates.remove_template_exercise(db, leg_day.exercises[0].id)
        assert await exercises.delete_exercise(db, squat.id) is True
