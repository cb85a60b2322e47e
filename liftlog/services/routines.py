"""Routine engine: ordered lists of templates (a program or training cycle)."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from liftlog.core.validation import clean_name
from liftlog.db.session import atomic
from liftlog.models._common import utcnow
from liftlog.models.routine import Routine, RoutineTemplate
from liftlog.models.template import WorkoutTemplate
from liftlog.schemas.routine import RoutineRead, RoutineSummary, RoutineTemplateRead
from liftlog.services.positions import PositionalCollection

routine_templates = PositionalCollection(RoutineTemplate, "routine_id", "routine template")


def _routine_query():
    return (
        select(Routine)
        .options(selectinload(Routine.templates).selectinload(RoutineTemplate.template))
        .execution_options(populate_existing=True)
    )


async def _touch(db: AsyncSession, routine_id: int) -> None:
    await db.execute(
        update(Routine)
        .where(Routine.id == routine_id)
        .values(updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )


async def list_routines(db: AsyncSession) -> list[RoutineSummary]:
    result = await db.execute(
        select(Routine).order_by(Routine.name, Routine.id).execution_options(populate_existing=True)
    )
    return [RoutineSummary.model_validate(r) for r in result.scalars().all()]


async def get_routine(db: AsyncSession, routine_id: int) -> RoutineRead | None:
    result = await db.execute(_routine_query().where(Routine.id == routine_id))
    routine = result.scalar_one_or_none()
    return RoutineRead.model_validate(routine) if routine else None


async def create_routine(db: AsyncSession, name: str) -> RoutineRead:
    name = clean_name(name, "Routine name")
    async with atomic(db, "create routine"):
        routine = Routine(name=name)
        db.add(routine)
        await db.flush()
    return await get_routine(db, routine.id)


async def update_routine(db: AsyncSession, routine_id: int, name: str) -> RoutineRead | None:
    name = clean_name(name, "Routine name")
    async with atomic(db, "update routine"):
        result = await db.execute(
            update(Routine)
            .where(Routine.id == routine_id)
            .values(name=name, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
    if not result.rowcount:
        return None
    return await get_routine(db, routine_id)


async def delete_routine(db: AsyncSession, routine_id: int) -> bool:
    """Delete a routine and its template slots (the templates themselves stay)."""
    async with atomic(db, "delete routine"):
        await db.execute(
            delete(RoutineTemplate)
            .where(RoutineTemplate.routine_id == routine_id)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(
            delete(Routine)
            .where(Routine.id == routine_id)
            .execution_options(synchronize_session=False)
        )
    return result.rowcount > 0


async def get_routine_template(db: AsyncSession, routine_template_id: int) -> RoutineTemplateRead | None:
    result = await db.execute(
        select(RoutineTemplate)
        .options(selectinload(RoutineTemplate.template))
        .where(RoutineTemplate.id == routine_template_id)
        .execution_options(populate_existing=True)
    )
    row = result.scalar_one_or_none()
    return RoutineTemplateRead.model_validate(row) if row else None


async def add_routine_template(
    db: AsyncSession, routine_id: int, template_id: int
) -> RoutineTemplateRead | None:
    """Append a template to the routine; None if either side does not exist."""
    guard = and_(
        exists().where(Routine.id == routine_id),
        exists().where(WorkoutTemplate.id == template_id),
    )
    async with atomic(db, "add template to routine"):
        new_id = await routine_templates.append(db, routine_id, guard, template_id=template_id)
        if new_id is None:
            return None
        await _touch(db, routine_id)
    return await get_routine_template(db, new_id)


async def remove_routine_template(db: AsyncSession, routine_template_id: int) -> bool:
    async with atomic(db, "remove template from routine"):
        routine_id = await routine_templates.parent_of(db, routine_template_id)
        if routine_id is None:
            return False
        removed = await routine_templates.remove(db, routine_template_id)
        await _touch(db, routine_id)
    return removed


async def reorder_routine_templates(
    db: AsyncSession, routine_id: int, ordered_ids: Sequence[int]
) -> RoutineRead | None:
    async with atomic(db, "reorder routine templates"):
        found = await db.execute(select(exists().where(Routine.id == routine_id)))
        if not found.scalar():
            return None
        await routine_templates.reorder(db, routine_id, ordered_ids)
        await _touch(db, routine_id)
    return await get_routine(db, routine_id)
