"""Start a workout from a template, copying its exercises in order."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.db.session import atomic
from liftlog.models.template import TemplateExercise, WorkoutTemplate
from liftlog.models.workout import WorkoutExercise
from liftlog.schemas.workout import WorkoutRead
from liftlog.services import workouts

logger = logging.getLogger(__name__)


async def create_workout_from_template(
    db: AsyncSession,
    name: str,
    workout_date: date | str,
    template_id: int,
) -> WorkoutRead | None:
    """Create an IN_PROGRESS workout linked to the template with one exercise per slot.

    Only the exercise reference is copied. Target sets/reps stay on the
    template and are resolved live whenever the workout is read. Returns None
    if the template does not exist. All-or-nothing.
    """
    async with atomic(db, "create workout from template"):
        found = await db.execute(select(exists().where(WorkoutTemplate.id == template_id)))
        if not found.scalar():
            return None
        workout = await workouts.create_workout(db, name, workout_date, template_id=template_id)

        # Buffer every slot before the first insert; no open cursor during writes.
        result = await db.execute(
            select(TemplateExercise.exercise_id)
            .where(TemplateExercise.template_id == template_id)
            .order_by(TemplateExercise.position, TemplateExercise.id)
        )
        exercise_ids = list(result.scalars().all())

        db.add_all(
            WorkoutExercise(workout_id=workout.id, exercise_id=exercise_id, position=position)
            for position, exercise_id in enumerate(exercise_ids, start=1)
        )
        await db.flush()

    logger.info(
        "Created workout %s from template %s with %d exercises",
        workout.id,
        template_id,
        len(exercise_ids),
    )
    return await workouts.get_workout(db, workout.id)
