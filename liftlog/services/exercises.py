"""Exercise catalog: unique names, substring search, restricted delete."""

from __future__ import annotations

import logging

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.config import get_settings
from liftlog.core.exceptions import (
    DuplicateNameError,
    ReferencedByTemplateError,
    ReferencedByWorkoutError,
)
from liftlog.core.validation import clean_name
from liftlog.db.session import atomic
from liftlog.models.exercise import Exercise
from liftlog.models.template import TemplateExercise
from liftlog.models.workout import WorkoutExercise
from liftlog.schemas.exercise import ExerciseRead

logger = logging.getLogger(__name__)


def _exercise_query():
    return select(Exercise).execution_options(populate_existing=True)


async def list_exercises(db: AsyncSession) -> list[ExerciseRead]:
    result = await db.execute(_exercise_query().order_by(Exercise.name))
    return [ExerciseRead.model_validate(e) for e in result.scalars().all()]


async def get_exercise(db: AsyncSession, exercise_id: int) -> ExerciseRead | None:
    result = await db.execute(_exercise_query().where(Exercise.id == exercise_id))
    exercise = result.scalar_one_or_none()
    return ExerciseRead.model_validate(exercise) if exercise else None


async def search_exercises(
    db: AsyncSession,
    query: str,
    case_sensitive: bool | None = None,
) -> list[ExerciseRead]:
    """Substring match on name, name-ascending. An empty query matches everything."""
    if case_sensitive is None:
        case_sensitive = get_settings().exercise_search_case_sensitive
    stmt = _exercise_query()
    if query:
        stmt = stmt.where(Exercise.name.icontains(query, autoescape=True))
    result = await db.execute(stmt.order_by(Exercise.name))
    found = result.scalars().all()
    if query and case_sensitive:
        # SQLite's LIKE ignores ASCII case, so narrow the candidates here
        found = [e for e in found if query in e.name]
    return [ExerciseRead.model_validate(e) for e in found]


async def create_exercise(db: AsyncSession, name: str) -> ExerciseRead:
    """Create an exercise. Names are unique as stored (case-sensitive)."""
    name = clean_name(name, "Exercise name")
    async with atomic(db, "create exercise"):
        taken = await db.execute(select(exists().where(Exercise.name == name)))
        if taken.scalar():
            raise DuplicateNameError(f"Exercise {name!r} already exists")
        exercise = Exercise(name=name)
        db.add(exercise)
        try:
            await db.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent create of the same name
            raise DuplicateNameError(f"Exercise {name!r} already exists") from exc
        await db.refresh(exercise)
    return ExerciseRead.model_validate(exercise)


async def delete_exercise(db: AsyncSession, exercise_id: int) -> bool:
    """Delete an exercise unless a template or workout still uses it."""
    async with atomic(db, "delete exercise"):
        in_template = await db.execute(
            select(exists().where(TemplateExercise.exercise_id == exercise_id))
        )
        if in_template.scalar():
            raise ReferencedByTemplateError(
                f"Exercise {exercise_id} is used by a template and cannot be deleted"
            )
        in_workout = await db.execute(
            select(exists().where(WorkoutExercise.exercise_id == exercise_id))
        )
        if in_workout.scalar():
            raise ReferencedByWorkoutError(
                f"Exercise {exercise_id} is used by a workout and cannot be deleted"
            )
        result = await db.execute(
            delete(Exercise)
            .where(Exercise.id == exercise_id)
            .execution_options(synchronize_session=False)
        )
    if result.rowcount:
        logger.info("Deleted exercise %s", exercise_id)
    return result.rowcount > 0
