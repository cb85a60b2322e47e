"""Template engine: reusable ordered exercise lists with target sets x reps."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import NamedTuple

from sqlalchemy import and_, delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from liftlog.core.exceptions import ReferencedByRoutineError
from liftlog.core.validation import check_targets, clean_name
from liftlog.db.session import atomic
from liftlog.models._common import utcnow
from liftlog.models.exercise import Exercise
from liftlog.models.routine import RoutineTemplate
from liftlog.models.template import TemplateExercise, WorkoutTemplate
from liftlog.models.workout import Workout
from liftlog.schemas.template import (
    TemplateExerciseRead,
    WorkoutTemplateRead,
    WorkoutTemplateSummary,
)
from liftlog.services.positions import PositionalCollection

logger = logging.getLogger(__name__)

template_exercises = PositionalCollection(TemplateExercise, "template_id", "template exercise")


def _template_query():
    return (
        select(WorkoutTemplate)
        .options(selectinload(WorkoutTemplate.exercises).selectinload(TemplateExercise.exercise))
        .execution_options(populate_existing=True)
    )


async def _touch(db: AsyncSession, template_id: int) -> None:
    await db.execute(
        update(WorkoutTemplate)
        .where(WorkoutTemplate.id == template_id)
        .values(updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )


async def list_templates(db: AsyncSession) -> list[WorkoutTemplateSummary]:
    """All templates by name; exercises are not loaded."""
    result = await db.execute(
        select(WorkoutTemplate)
        .order_by(WorkoutTemplate.name, WorkoutTemplate.id)
        .execution_options(populate_existing=True)
    )
    return [WorkoutTemplateSummary.model_validate(t) for t in result.scalars().all()]


async def get_template(db: AsyncSession, template_id: int) -> WorkoutTemplateRead | None:
    """Template with its exercises in position order."""
    result = await db.execute(_template_query().where(WorkoutTemplate.id == template_id))
    template = result.scalar_one_or_none()
    return WorkoutTemplateRead.model_validate(template) if template else None


async def create_template(db: AsyncSession, name: str) -> WorkoutTemplateRead:
    name = clean_name(name, "Template name")
    async with atomic(db, "create template"):
        template = WorkoutTemplate(name=name)
        db.add(template)
        await db.flush()
    return await get_template(db, template.id)


async def update_template(db: AsyncSession, template_id: int, name: str) -> WorkoutTemplateRead | None:
    """Rename a template (touches updated_at)."""
    name = clean_name(name, "Template name")
    async with atomic(db, "update template"):
        result = await db.execute(
            update(WorkoutTemplate)
            .where(WorkoutTemplate.id == template_id)
            .values(name=name, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
    if not result.rowcount:
        return None
    return await get_template(db, template_id)


async def delete_template(db: AsyncSession, template_id: int) -> bool:
    """Delete a template and its exercise slots.

    Workouts created from it survive and lose their template link. Refused
    while a routine still lists the template.
    """
    async with atomic(db, "delete template"):
        in_routine = await db.execute(
            select(exists().where(RoutineTemplate.template_id == template_id))
        )
        if in_routine.scalar():
            raise ReferencedByRoutineError(
                f"Template {template_id} is used by a routine and cannot be deleted"
            )
        await db.execute(
            update(Workout)
            .where(Workout.template_id == template_id)
            .values(template_id=None)
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(TemplateExercise)
            .where(TemplateExercise.template_id == template_id)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(
            delete(WorkoutTemplate)
            .where(WorkoutTemplate.id == template_id)
            .execution_options(synchronize_session=False)
        )
    if result.rowcount:
        logger.info("Deleted template %s", template_id)
    return result.rowcount > 0


async def get_template_exercise(db: AsyncSession, template_exercise_id: int) -> TemplateExerciseRead | None:
    result = await db.execute(
        select(TemplateExercise)
        .options(selectinload(TemplateExercise.exercise))
        .where(TemplateExercise.id == template_exercise_id)
        .execution_options(populate_existing=True)
    )
    row = result.scalar_one_or_none()
    return TemplateExerciseRead.model_validate(row) if row else None


async def add_template_exercise(
    db: AsyncSession,
    template_id: int,
    exercise_id: int,
    target_sets: int,
    target_reps: int,
) -> TemplateExerciseRead | None:
    """Append an exercise to the end of the template.

    Returns None when the template or the exercise does not exist.
    """
    check_targets(target_sets, target_reps)
    guard = and_(
        exists().where(WorkoutTemplate.id == template_id),
        exists().where(Exercise.id == exercise_id),
    )
    async with atomic(db, "add exercise to template"):
        new_id = await template_exercises.append(
            db,
            template_id,
            guard,
            exercise_id=exercise_id,
            target_sets=target_sets,
            target_reps=target_reps,
        )
        if new_id is None:
            return None
        await _touch(db, template_id)
    return await get_template_exercise(db, new_id)


async def update_template_exercise(
    db: AsyncSession,
    template_exercise_id: int,
    target_sets: int,
    target_reps: int,
) -> TemplateExerciseRead | None:
    """Change targets. Workouts created from the template see the new values."""
    check_targets(target_sets, target_reps)
    async with atomic(db, "update template exercise"):
        template_id = await template_exercises.parent_of(db, template_exercise_id)
        if template_id is None:
            return None
        await db.execute(
            update(TemplateExercise)
            .where(TemplateExercise.id == template_exercise_id)
            .values(target_sets=target_sets, target_reps=target_reps)
            .execution_options(synchronize_session=False)
        )
        await _touch(db, template_id)
    return await get_template_exercise(db, template_exercise_id)


async def remove_template_exercise(db: AsyncSession, template_exercise_id: int) -> bool:
    """Remove one slot. Remaining positions keep their gaps until a reorder."""
    async with atomic(db, "remove exercise from template"):
        template_id = await template_exercises.parent_of(db, template_exercise_id)
        if template_id is None:
            return False
        removed = await template_exercises.remove(db, template_exercise_id)
        await _touch(db, template_id)
    return removed


async def reorder_template_exercises(
    db: AsyncSession, template_id: int, ordered_ids: Sequence[int]
) -> WorkoutTemplateRead | None:
    """Renumber the given slots 1..n in the given order, atomically."""
    async with atomic(db, "reorder template exercises"):
        found = await db.execute(select(exists().where(WorkoutTemplate.id == template_id)))
        if not found.scalar():
            return None
        await template_exercises.reorder(db, template_id, ordered_ids)
        await _touch(db, template_id)
    return await get_template(db, template_id)


class TemplateTargets(NamedTuple):
    target_sets: int
    target_reps: int


async def get_template_targets(
    db: AsyncSession, template_id: int, exercise_id: int
) -> TemplateTargets | None:
    """Live target lookup for an exercise in a template (lowest position wins)."""
    result = await db.execute(
        select(TemplateExercise.target_sets, TemplateExercise.target_reps)
        .where(
            TemplateExercise.template_id == template_id,
            TemplateExercise.exercise_id == exercise_id,
        )
        .order_by(TemplateExercise.position, TemplateExercise.id)
        .limit(1)
    )
    row = result.first()
    return TemplateTargets(row.target_sets, row.target_reps) if row else None


async def get_template_targets_batch(
    db: AsyncSession, template_id: int, exercise_ids: Sequence[int]
) -> dict[int, TemplateTargets | None]:
    """Same answers as get_template_targets for each id, in one query."""
    ids = list(dict.fromkeys(exercise_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(TemplateExercise.exercise_id, TemplateExercise.target_sets, TemplateExercise.target_reps)
        .where(
            TemplateExercise.template_id == template_id,
            TemplateExercise.exercise_id.in_(ids),
        )
        .order_by(TemplateExercise.position, TemplateExercise.id)
    )
    targets: dict[int, TemplateTargets | None] = dict.fromkeys(ids)
    for row in result.all():
        if targets[row.exercise_id] is None:
            targets[row.exercise_id] = TemplateTargets(row.target_sets, row.target_reps)
    return targets
