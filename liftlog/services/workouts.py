"""Workout engine: lifecycle, ordered exercises and sets, last-weight history.

A workout starts IN_PROGRESS and can move once to FINISHED. After that the
workout, its exercises and its sets are read-only (only delete is allowed).
Every child mutation checks the status in the same statement that writes,
so a concurrent finish cannot interleave between check and write.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from sqlalchemy import and_, delete, distinct, exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.enums import WorkoutStatus
from liftlog.core.exceptions import WorkoutFinishedError
from liftlog.core.validation import check_set_values, clean_name, parse_date
from liftlog.db.session import atomic
from liftlog.models._common import utcnow
from liftlog.models.exercise import Exercise
from liftlog.models.template import WorkoutTemplate
from liftlog.models.workout import LoggedSet, Workout, WorkoutExercise
from liftlog.schemas.exercise import ExerciseRead
from liftlog.schemas.workout import LoggedSetRead, WorkoutExerciseRead, WorkoutRead, WorkoutSummary
from liftlog.services.positions import PositionalCollection
from liftlog.services.templates import (
    TemplateTargets,
    get_template_targets,
    get_template_targets_batch,
)

logger = logging.getLogger(__name__)

workout_exercises = PositionalCollection(WorkoutExercise, "workout_id", "workout exercise")
logged_sets = PositionalCollection(LoggedSet, "workout_exercise_id", "set")

# Most recent first: workout date, then when the set was logged (id breaks ties)
_HISTORY_ORDER = (Workout.date.desc(), LoggedSet.created_at.desc(), LoggedSet.id.desc())


def _in_progress(workout_id: int):
    return exists().where(Workout.id == workout_id, Workout.status == WorkoutStatus.IN_PROGRESS)


def _exercise_in_progress(workout_exercise_id: int):
    return exists().where(
        WorkoutExercise.id == workout_exercise_id,
        WorkoutExercise.workout_id == Workout.id,
        Workout.status == WorkoutStatus.IN_PROGRESS,
    )


def _in_progress_exercise_ids():
    return (
        select(WorkoutExercise.id)
        .join(Workout, WorkoutExercise.workout_id == Workout.id)
        .where(Workout.status == WorkoutStatus.IN_PROGRESS)
    )


async def _status_of(db: AsyncSession, workout_id: int) -> WorkoutStatus | None:
    result = await db.execute(select(Workout.status).where(Workout.id == workout_id))
    return result.scalar_one_or_none()


async def _workout_of_set(db: AsyncSession, set_id: int) -> int | None:
    result = await db.execute(
        select(WorkoutExercise.workout_id)
        .join(LoggedSet, LoggedSet.workout_exercise_id == WorkoutExercise.id)
        .where(LoggedSet.id == set_id)
    )
    return result.scalar_one_or_none()


async def _raise_if_finished(db: AsyncSession, workout_id: int | None) -> None:
    """Called after a guarded write matched nothing: tell 'finished' from 'missing'."""
    if workout_id is not None and await _status_of(db, workout_id) == WorkoutStatus.FINISHED:
        raise WorkoutFinishedError(workout_id)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


async def _list_by_status(
    db: AsyncSession, status: WorkoutStatus, limit: int | None = None
) -> list[WorkoutSummary]:
    stmt = (
        select(
            Workout.id,
            Workout.name,
            Workout.date,
            Workout.status,
            func.count(distinct(WorkoutExercise.id)).label("exercise_count"),
            func.count(LoggedSet.id).label("set_count"),
        )
        .outerjoin(WorkoutExercise, WorkoutExercise.workout_id == Workout.id)
        .outerjoin(LoggedSet, LoggedSet.workout_exercise_id == WorkoutExercise.id)
        .where(Workout.status == status)
        .group_by(Workout.id, Workout.name, Workout.date, Workout.status, Workout.created_at)
        .order_by(Workout.date.desc(), Workout.created_at.desc(), Workout.id.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return [WorkoutSummary.model_validate(dict(row._mapping)) for row in result.all()]


async def list_in_progress(db: AsyncSession) -> list[WorkoutSummary]:
    return await _list_by_status(db, WorkoutStatus.IN_PROGRESS)


async def list_finished(db: AsyncSession, limit: int | None = None) -> list[WorkoutSummary]:
    """Finished workouts, most recent first."""
    return await _list_by_status(db, WorkoutStatus.FINISHED, limit)


# ---------------------------------------------------------------------------
# Sets and last weight (single and batched forms share ordering semantics)
# ---------------------------------------------------------------------------


async def get_logged_sets(db: AsyncSession, workout_exercise_id: int) -> list[LoggedSetRead]:
    result = await db.execute(
        select(LoggedSet)
        .where(LoggedSet.workout_exercise_id == workout_exercise_id)
        .order_by(LoggedSet.position)
        .execution_options(populate_existing=True)
    )
    return [LoggedSetRead.model_validate(s) for s in result.scalars().all()]


async def get_logged_sets_batch(
    db: AsyncSession, workout_exercise_ids: Sequence[int]
) -> dict[int, list[LoggedSetRead]]:
    """Sets for many workout exercises in one query, each list in position order.

    Every requested id is present in the result (empty list when it has no sets).
    """
    ids = list(dict.fromkeys(workout_exercise_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(LoggedSet)
        .where(LoggedSet.workout_exercise_id.in_(ids))
        .order_by(LoggedSet.workout_exercise_id, LoggedSet.position)
        .execution_options(populate_existing=True)
    )
    sets: dict[int, list[LoggedSetRead]] = {we_id: [] for we_id in ids}
    for s in result.scalars().all():
        sets[s.workout_exercise_id].append(LoggedSetRead.model_validate(s))
    return sets


def _history_filter(exclude_workout_id: int | None):
    criteria = [Workout.status == WorkoutStatus.FINISHED]
    if exclude_workout_id is not None:
        criteria.append(Workout.id != exclude_workout_id)
    return and_(*criteria)


async def get_last_weight(
    db: AsyncSession, exercise_id: int, exclude_workout_id: int | None = None
) -> float | None:
    """Weight of the most recent set of this exercise in another finished workout."""
    result = await db.execute(
        select(LoggedSet.weight)
        .join(WorkoutExercise, LoggedSet.workout_exercise_id == WorkoutExercise.id)
        .join(Workout, WorkoutExercise.workout_id == Workout.id)
        .where(WorkoutExercise.exercise_id == exercise_id, _history_filter(exclude_workout_id))
        .order_by(*_HISTORY_ORDER)
        .limit(1)
    )
    weight = result.scalar_one_or_none()
    return float(weight) if weight is not None else None


async def get_last_weights_batch(
    db: AsyncSession, exercise_ids: Sequence[int], exclude_workout_id: int | None = None
) -> dict[int, float | None]:
    """get_last_weight for many exercises in one round trip.

    Ranks each exercise's history with ROW_NUMBER() using the same ordering as
    the single lookup. Exercises without history map to None.
    """
    ids = list(dict.fromkeys(exercise_ids))
    if not ids:
        return {}
    ranked = (
        select(
            WorkoutExercise.exercise_id.label("exercise_id"),
            LoggedSet.weight.label("weight"),
            func.row_number()
            .over(partition_by=WorkoutExercise.exercise_id, order_by=_HISTORY_ORDER)
            .label("rank"),
        )
        .join(WorkoutExercise, LoggedSet.workout_exercise_id == WorkoutExercise.id)
        .join(Workout, WorkoutExercise.workout_id == Workout.id)
        .where(WorkoutExercise.exercise_id.in_(ids), _history_filter(exclude_workout_id))
        .subquery()
    )
    result = await db.execute(
        select(ranked.c.exercise_id, ranked.c.weight).where(ranked.c.rank == 1)
    )
    weights: dict[int, float | None] = dict.fromkeys(ids)
    for row in result.all():
        weights[row.exercise_id] = float(row.weight)
    return weights


# ---------------------------------------------------------------------------
# Workout detail
# ---------------------------------------------------------------------------


def _workout_exercise_read(
    row,
    exercise: Exercise,
    sets: list[LoggedSetRead],
    last_weight: float | None,
    targets: TemplateTargets | None,
) -> WorkoutExerciseRead:
    return WorkoutExerciseRead(
        id=row.id,
        workout_id=row.workout_id,
        exercise_id=row.exercise_id,
        position=row.position,
        exercise=ExerciseRead.model_validate(exercise),
        sets=sets,
        last_weight=last_weight,
        target_sets=targets.target_sets if targets else None,
        target_reps=targets.target_reps if targets else None,
    )


def _workout_exercise_query():
    return (
        select(
            WorkoutExercise.id,
            WorkoutExercise.workout_id,
            WorkoutExercise.exercise_id,
            WorkoutExercise.position,
            Exercise,
        )
        .join(Exercise, WorkoutExercise.exercise_id == Exercise.id)
        .execution_options(populate_existing=True)
    )


async def get_workout(db: AsyncSession, workout_id: int) -> WorkoutRead | None:
    """Workout with exercises in order, each with its sets, last weight and targets.

    Uses a fixed number of queries regardless of how many exercises there are.
    """
    result = await db.execute(
        select(Workout).where(Workout.id == workout_id).execution_options(populate_existing=True)
    )
    workout = result.scalar_one_or_none()
    if workout is None:
        return None

    result = await db.execute(
        _workout_exercise_query()
        .where(WorkoutExercise.workout_id == workout_id)
        .order_by(WorkoutExercise.position)
    )
    rows = result.all()
    exercise_ids = [row.exercise_id for row in rows]

    sets = await get_logged_sets_batch(db, [row.id for row in rows])
    last_weights = await get_last_weights_batch(db, exercise_ids, exclude_workout_id=workout_id)
    targets = {}
    if workout.template_id is not None:
        targets = await get_template_targets_batch(db, workout.template_id, exercise_ids)

    return WorkoutRead(
        id=workout.id,
        name=workout.name,
        date=workout.date,
        notes=workout.notes or "",
        status=workout.status,
        template_id=workout.template_id,
        created_at=workout.created_at,
        finished_at=workout.finished_at,
        exercises=[
            _workout_exercise_read(
                row,
                row.Exercise,
                sets.get(row.id, []),
                last_weights.get(row.exercise_id),
                targets.get(row.exercise_id),
            )
            for row in rows
        ],
    )


async def get_workout_exercise(db: AsyncSession, workout_exercise_id: int) -> WorkoutExerciseRead | None:
    """One workout exercise, resolved with the single-item lookups."""
    result = await db.execute(
        _workout_exercise_query()
        .add_columns(Workout.template_id)
        .join(Workout, WorkoutExercise.workout_id == Workout.id)
        .where(WorkoutExercise.id == workout_exercise_id)
    )
    row = result.first()
    if row is None:
        return None
    targets = None
    if row.template_id is not None:
        targets = await get_template_targets(db, row.template_id, row.exercise_id)
    return _workout_exercise_read(
        row,
        row.Exercise,
        await get_logged_sets(db, row.id),
        await get_last_weight(db, row.exercise_id, exclude_workout_id=row.workout_id),
        targets,
    )


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


async def create_workout(
    db: AsyncSession,
    name: str,
    workout_date: date | str,
    template_id: int | None = None,
    notes: str = "",
) -> WorkoutRead | None:
    """Start a workout (IN_PROGRESS). Does not copy template exercises.

    Returns None when template_id points at a missing template.
    """
    name = clean_name(name, "Workout name")
    workout_date = parse_date(workout_date)
    async with atomic(db, "create workout"):
        if template_id is not None:
            found = await db.execute(select(exists().where(WorkoutTemplate.id == template_id)))
            if not found.scalar():
                return None
        workout = Workout(
            name=name,
            date=workout_date,
            notes=notes or "",
            status=WorkoutStatus.IN_PROGRESS,
            template_id=template_id,
        )
        db.add(workout)
        await db.flush()
    return await get_workout(db, workout.id)


async def update_workout(
    db: AsyncSession,
    workout_id: int,
    name: str,
    workout_date: date | str,
    notes: str = "",
) -> bool:
    """Edit name/date/notes of an IN_PROGRESS workout.

    Finished (or missing) workouts are left untouched and False is returned;
    the caller decides which error that is.
    """
    name = clean_name(name, "Workout name")
    workout_date = parse_date(workout_date)
    async with atomic(db, "update workout"):
        result = await db.execute(
            update(Workout)
            .where(Workout.id == workout_id, Workout.status == WorkoutStatus.IN_PROGRESS)
            .values(name=name, date=workout_date, notes=notes or "")
            .execution_options(synchronize_session=False)
        )
    return result.rowcount > 0


async def finish_workout(db: AsyncSession, workout_id: int) -> bool:
    """IN_PROGRESS -> FINISHED. A second call matches no row and changes nothing."""
    async with atomic(db, "finish workout"):
        result = await db.execute(
            update(Workout)
            .where(Workout.id == workout_id, Workout.status == WorkoutStatus.IN_PROGRESS)
            .values(status=WorkoutStatus.FINISHED, finished_at=utcnow())
            .execution_options(synchronize_session=False)
        )
    if result.rowcount:
        logger.info("Finished workout %s", workout_id)
    return result.rowcount > 0


async def delete_workout(db: AsyncSession, workout_id: int) -> bool:
    """Delete a workout with its exercises and sets (allowed in any state)."""
    exercise_ids = select(WorkoutExercise.id).where(WorkoutExercise.workout_id == workout_id)
    async with atomic(db, "delete workout"):
        await db.execute(
            delete(LoggedSet)
            .where(LoggedSet.workout_exercise_id.in_(exercise_ids))
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(WorkoutExercise)
            .where(WorkoutExercise.workout_id == workout_id)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(
            delete(Workout)
            .where(Workout.id == workout_id)
            .execution_options(synchronize_session=False)
        )
    return result.rowcount > 0


# ---------------------------------------------------------------------------
# Exercises within a workout
# ---------------------------------------------------------------------------


async def add_workout_exercise(
    db: AsyncSession, workout_id: int, exercise_id: int
) -> WorkoutExerciseRead | None:
    """Append an exercise. None if the workout or exercise is missing.

    Raises WorkoutFinishedError if the workout is finished.
    """
    guard = and_(_in_progress(workout_id), exists().where(Exercise.id == exercise_id))
    new_id = await workout_exercises.append(db, workout_id, guard, exercise_id=exercise_id)
    if new_id is None:
        await _raise_if_finished(db, workout_id)
        return None
    return await get_workout_exercise(db, new_id)


async def remove_workout_exercise(db: AsyncSession, workout_exercise_id: int) -> bool:
    """Remove an exercise and its sets. Sibling positions are not compacted."""
    async with atomic(db, "remove exercise from workout"):
        workout_id = await workout_exercises.parent_of(db, workout_exercise_id)
        if workout_id is None:
            return False
        guard = _in_progress(workout_id)
        await db.execute(
            delete(LoggedSet)
            .where(LoggedSet.workout_exercise_id == workout_exercise_id, guard)
            .execution_options(synchronize_session=False)
        )
        if not await workout_exercises.remove(db, workout_exercise_id, guard=guard):
            raise WorkoutFinishedError(workout_id)
    return True


async def reorder_workout_exercises(
    db: AsyncSession, workout_id: int, ordered_ids: Sequence[int]
) -> WorkoutRead | None:
    status = await _status_of(db, workout_id)
    if status is None:
        return None
    if status == WorkoutStatus.FINISHED:
        raise WorkoutFinishedError(workout_id)
    await workout_exercises.reorder(db, workout_id, ordered_ids, guard=_in_progress(workout_id))
    return await get_workout(db, workout_id)


# ---------------------------------------------------------------------------
# Logged sets
# ---------------------------------------------------------------------------


async def get_set(db: AsyncSession, set_id: int) -> LoggedSetRead | None:
    result = await db.execute(
        select(LoggedSet).where(LoggedSet.id == set_id).execution_options(populate_existing=True)
    )
    logged = result.scalar_one_or_none()
    return LoggedSetRead.model_validate(logged) if logged else None


async def add_set(
    db: AsyncSession, workout_exercise_id: int, reps: int, weight: float
) -> LoggedSetRead | None:
    """Log a set at the end of the exercise's sets.

    None if the workout exercise is missing; WorkoutFinishedError if its
    workout is finished.
    """
    check_set_values(reps, weight)
    new_id = await logged_sets.append(
        db,
        workout_exercise_id,
        _exercise_in_progress(workout_exercise_id),
        reps=reps,
        weight=float(weight),
        created_at=utcnow(),
    )
    if new_id is None:
        await _raise_if_finished(db, await workout_exercises.parent_of(db, workout_exercise_id))
        return None
    return await get_set(db, new_id)


async def update_set(db: AsyncSession, set_id: int, reps: int, weight: float) -> LoggedSetRead | None:
    check_set_values(reps, weight)
    async with atomic(db, "update set"):
        result = await db.execute(
            update(LoggedSet)
            .where(
                LoggedSet.id == set_id,
                LoggedSet.workout_exercise_id.in_(_in_progress_exercise_ids()),
            )
            .values(reps=reps, weight=float(weight))
            .execution_options(synchronize_session=False)
        )
    if not result.rowcount:
        await _raise_if_finished(db, await _workout_of_set(db, set_id))
        return None
    return await get_set(db, set_id)


async def delete_set(db: AsyncSession, set_id: int) -> bool:
    removed = await logged_sets.remove(
        db, set_id, guard=LoggedSet.workout_exercise_id.in_(_in_progress_exercise_ids())
    )
    if not removed:
        await _raise_if_finished(db, await _workout_of_set(db, set_id))
    return removed
