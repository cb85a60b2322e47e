"""Routine endpoints - ordered lists of templates."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.db.session import get_db
from liftlog.schemas.routine import (
    RoutineCreate,
    RoutineRead,
    RoutineSummary,
    RoutineTemplateCreate,
    RoutineTemplateRead,
    RoutineUpdate,
)
from liftlog.schemas.template import ReorderRequest
from liftlog.services import routines as service

router = APIRouter()


@router.get("", response_model=list[RoutineSummary])
async def list_routines(db: AsyncSession = Depends(get_db)):
    return await service.list_routines(db)


@router.post("", response_model=RoutineRead, status_code=201)
async def create_routine(
    payload: RoutineCreate,
    db: AsyncSession = Depends(get_db),
):
    return await service.create_routine(db, payload.name)


@router.get("/{routine_id}", response_model=RoutineRead)
async def get_routine(
    routine_id: int,
    db: AsyncSession = Depends(get_db),
):
    routine = await service.get_routine(db, routine_id)
    if not routine:
        raise HTTPException(status_code=404, detail="Routine not found")
    return routine


@router.patch("/{routine_id}", response_model=RoutineRead)
async def update_routine(
    routine_id: int,
    payload: RoutineUpdate,
    db: AsyncSession = Depends(get_db),
):
    routine = await service.update_routine(db, routine_id, payload.name)
    if not routine:
        raise HTTPException(status_code=404, detail="Routine not found")
    return routine


@router.delete("/{routine_id}", status_code=204)
async def delete_routine(
    routine_id: int,
    db: AsyncSession = Depends(get_db),
):
    if not await service.delete_routine(db, routine_id):
        raise HTTPException(status_code=404, detail="Routine not found")
    return None


@router.post("/{routine_id}/templates", response_model=RoutineTemplateRead, status_code=201)
async def add_routine_template(
    routine_id: int,
    payload: RoutineTemplateCreate,
    db: AsyncSession = Depends(get_db),
):
    entry = await service.add_routine_template(db, routine_id, payload.template_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Routine or template not found")
    return entry


@router.put("/{routine_id}/templates/order", response_model=RoutineRead)
async def reorder_routine_templates(
    routine_id: int,
    payload: ReorderRequest,
    db: AsyncSession = Depends(get_db),
):
    routine = await service.reorder_routine_templates(db, routine_id, payload.ids)
    if not routine:
        raise HTTPException(status_code=404, detail="Routine not found")
    return routine


@router.delete("/templates/{routine_template_id}", status_code=204)
async def remove_routine_template(
    routine_template_id: int,
    db: AsyncSession = Depends(get_db),
):
    if not await service.remove_routine_template(db, routine_template_id):
        raise HTTPException(status_code=404, detail="Routine template not found")
    return None
