"""Template engine: ordered exercise slots, reorder atomicity, delete rules."""

import pytest

from liftlog.core.exceptions import ReferencedByRoutineError, StorageError, ValidationError
from liftlog.services import exercises, routines, templates, workouts

pytestmark = pytest.mark.asyncio


async def _catalog(db, *names):
    return [await exercises.create_exercise(db, name) for name in names]


async def _positions(db, template_id):
    template = await templates.get_template(db, template_id)
    return [(e.exercise.name, e.position) for e in template.exercises]


class TestCrud:
    async def test_create_and_get(self, db):
        created = await templates.create_template(db, "Push Day")
        fetched = await templates.get_template(db, created.id)
        assert fetched.name == "Push Day"
        assert fetched.exercises == []

    async def test_get_missing(self, db):
        assert await templates.get_template(db, 123) is None

    async def test_list_is_name_ascending(self, db):
        for name in ("Pull", "Legs", "Push"):
            await templates.create_template(db, name)
        assert [t.name for t in await templates.list_templates(db)] == ["Legs", "Pull", "Push"]

    async def test_update_renames_and_touches(self, db):
        created = await templates.create_template(db, "Old")
        updated = await templates.update_template(db, created.id, "New")
        assert updated.name == "New"
        assert updated.updated_at > created.updated_at

    async def test_update_missing(self, db):
        assert await templates.update_template(db, 5, "Nope") is None

    async def test_blank_name_rejected(self, db):
        with pytest.raises(ValidationError):
            await templates.create_template(db, "")


class TestAddExercise:
    async def test_append_positions_follow_call_order(self, db):
        row, curl, press = await _catalog(db, "Row", "Curl", "Press")
        template = await templates.create_template(db, "Upper")
        for exercise in (press, row, curl):
            await templates.add_template_exercise(db, template.id, exercise.id, 3, 10)
        assert await _positions(db, template.id) == [("Press", 1), ("Row", 2), ("Curl", 3)]

    async def test_append_touches_updated_at(self, db, squat):
        template = await templates.create_template(db, "Legs")
        await templates.add_template_exercise(db, template.id, squat.id, 5, 5)
        assert (await templates.get_template(db, template.id)).updated_at > template.updated_at

    @pytest.mark.parametrize("sets, reps", [(0, 5), (5, 0), (-1, 8)])
    async def test_non_positive_targets_rejected(self, db, squat, sets, reps):
        template = await templates.create_template(db, "Legs")
        with pytest.raises(ValidationError):
            await templates.add_template_exercise(db, template.id, squat.id, sets, reps)
        assert (await templates.get_template(db, template.id)).exercises == []

    async def test_missing_template_or_exercise(self, db, squat):
        template = await templates.create_template(db, "Legs")
        assert await templates.add_template_exercise(db, 999, squat.id, 3, 10) is None
        assert await templates.add_template_exercise(db, template.id, 999, 3, 10) is None

    async def test_same_exercise_may_appear_twice(self, db, squat):
        template = await templates.create_template(db, "Squat Twice")
        await templates.add_template_exercise(db, template.id, squat.id, 5, 5)
        await templates.add_template_exercise(db, template.id, squat.id, 3, 8)
        assert await _positions(db, template.id) == [("Squat", 1), ("Squat", 2)]


class TestRemoveAndUpdate:
    async def test_remove_leaves_gap_and_append_goes_after_max(self, db):
        a, b, c = await _catalog(db, "A", "B", "C")
        template = await templates.create_template(db, "T")
        slots = [
            await templates.add_template_exercise(db, template.id, e.id, 3, 10) for e in (a, b)
        ]
        assert await templates.remove_template_exercise(db, slots[0].id) is True
        await templates.add_template_exercise(db, template.id, c.id, 3, 10)
        assert await _positions(db, template.id) == [("B", 2), ("C", 3)]

    async def test_remove_missing(self, db):
        assert await templates.remove_template_exercise(db, 77) is False

    async def test_update_targets(self, db, leg_day):
        slot = leg_day.exercises[0]
        updated = await templates.update_template_exercise(db, slot.id, 3, 8)
        assert (updated.target_sets, updated.target_reps) == (3, 8)
        assert await templates.get_template_targets(db, leg_day.id, slot.exercise_id) == (3, 8)

    async def test_update_targets_validates(self, db, leg_day):
        with pytest.raises(ValidationError):
            await templates.update_template_exercise(db, leg_day.exercises[0].id, 0, 8)

    async def test_update_missing_slot(self, db):
        assert await templates.update_template_exercise(db, 404, 3, 8) is None


class TestReorder:
    async def test_reorder_to_permutation(self, db):
        a, b, c = await _catalog(db, "A", "B", "C")
        template = await templates.create_template(db, "T")
        ids = [
            (await templates.add_template_exercise(db, template.id, e.id, 3, 10)).id
            for e in (a, b, c)
        ]
        reordered = await templates.reorder_template_exercises(db, template.id, [ids[2], ids[0], ids[1]])
        assert [(e.exercise.name, e.position) for e in reordered.exercises] == [
            ("C", 1),
            ("A", 2),
            ("B", 3),
        ]

    async def test_reorder_compacts_gaps(self, db):
        a, b, c = await _catalog(db, "A", "B", "C")
        template = await templates.create_template(db, "T")
        ids = [
            (await templates.add_template_exercise(db, template.id, e.id, 3, 10)).id
            for e in (a, b, c)
        ]
        await templates.remove_template_exercise(db, ids[1])
        await templates.reorder_template_exercises(db, template.id, [ids[2], ids[0]])
        assert await _positions(db, template.id) == [("C", 1), ("A", 2)]

    async def test_failed_reorder_leaves_positions_unchanged(self, db):
        a, b = await _catalog(db, "A", "B")
        template = await templates.create_template(db, "T")
        other = await templates.create_template(db, "Other")
        ids = [
            (await templates.add_template_exercise(db, template.id, e.id, 3, 10)).id
            for e in (a, b)
        ]
        foreign = await templates.add_template_exercise(db, other.id, a.id, 3, 10)
        before = await _positions(db, template.id)

        with pytest.raises(StorageError):
            await templates.reorder_template_exercises(db, template.id, [ids[1], foreign.id, ids[0]])

        assert await _positions(db, template.id) == before
        assert await _positions(db, other.id) == [("A", 1)]

    async def test_colliding_partial_reorder_rolls_back(self, db):
        """Moving only the last slot to the front would clash with the first one."""
        a, b, c = await _catalog(db, "A", "B", "C")
        template = await templates.create_template(db, "T")
        ids = [
            (await templates.add_template_exercise(db, template.id, e.id, 3, 10)).id
            for e in (a, b, c)
        ]
        with pytest.raises(StorageError):
            await templates.reorder_template_exercises(db, template.id, [ids[2]])
        assert await _positions(db, template.id) == [("A", 1), ("B", 2), ("C", 3)]

    async def test_duplicate_ids_rejected(self, db, leg_day):
        slot_id = leg_day.exercises[0].id
        with pytest.raises(ValidationError):
            await templates.reorder_template_exercises(db, leg_day.id, [slot_id, slot_id])

    async def test_reorder_missing_template(self, db):
        assert await templates.reorder_template_exercises(db, 31, []) is None


class TestDelete:
    async def test_delete_cascades_slots_keeps_exercises(self, db, squat, leg_day):
        slot_id = leg_day.exercises[0].id
        assert await templates.delete_template(db, leg_day.id) is True
        assert await templates.get_template(db, leg_day.id) is None
        assert await templates.get_template_exercise(db, slot_id) is None
        assert await exercises.get_exercise(db, squat.id) is not None

    async def test_delete_unlinks_workouts(self, db, leg_day, today):
        workout = await workouts.create_workout(db, "Monday", today, template_id=leg_day.id)
        await templates.delete_template(db, leg_day.id)
        survivor = await workouts.get_workout(db, workout.id)
        assert survivor is not None
        assert survivor.template_id is None

    async def test_delete_restricted_while_in_routine(self, db, leg_day):
        routine = await routines.create_routine(db, "5x5")
        await routines.add_routine_template(db, routine.id, leg_day.id)
        with pytest.raises(ReferencedByRoutineError):
            await templates.delete_template(db, leg_day.id)
        assert await templates.get_template(db, leg_day.id) is not None

    async def test_delete_missing(self, db):
        assert await templates.delete_template(db, 8) is False


class TestTargets:
    async def test_lowest_position_wins(self, db, squat):
        template = await templates.create_template(db, "T")
        await templates.add_template_exercise(db, template.id, squat.id, 5, 5)
        await templates.add_template_exercise(db, template.id, squat.id, 3, 12)
        assert await templates.get_template_targets(db, template.id, squat.id) == (5, 5)
        batch = await templates.get_template_targets_batch(db, template.id, [squat.id])
        assert batch == {squat.id: (5, 5)}

    async def test_absent_exercise_has_no_targets(self, db, leg_day, bench):
        assert await templates.get_template_targets(db, leg_day.id, bench.id) is None
        assert await templates.get_template_targets_batch(db, leg_day.id, [bench.id]) == {bench.id: None}

    async def test_empty_batch(self, db, leg_day):
        assert await templates.get_template_targets_batch(db, leg_day.id, []) == {}
