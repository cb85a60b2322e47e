"""Workout template endpoints - ordered exercise lists with targets."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.db.session import get_db
from liftlog.schemas.template import (
    ReorderRequest,
    TemplateExerciseCreate,
    TemplateExerciseRead,
    TemplateExerciseUpdate,
    WorkoutTemplateCreate,
    WorkoutTemplateRead,
    WorkoutTemplateSummary,
    WorkoutTemplateUpdate,
)
from liftlog.services import templates as service

router = APIRouter()


@router.get("", response_model=list[WorkoutTemplateSummary])
async def list_templates(db: AsyncSession = Depends(get_db)):
    """List all templates (without exercises)."""
    return await service.list_templates(db)


@router.post("", response_model=WorkoutTemplateRead, status_code=201)
async def create_template(
    payload: WorkoutTemplateCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create an empty template (add exercises afterwards)."""
    return await service.create_template(db, payload.name)


@router.get("/{template_id}", response_model=WorkoutTemplateRead)
async def get_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a template with its exercises."""
    template = await service.get_template(db, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.patch("/{template_id}", response_model=WorkoutTemplateRead)
async def update_template(
    template_id: int,
    payload: WorkoutTemplateUpdate,
    db: AsyncSession = Depends(get_db),
):
    template = await service.update_template(db, template_id, payload.name)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.delete("/{template_id}", status_code=204)
async def delete_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a template; workouts created from it keep their exercises."""
    if not await service.delete_template(db, template_id):
        raise HTTPException(status_code=404, detail="Template not found")
    return None


@router.post("/{template_id}/exercises", response_model=TemplateExerciseRead, status_code=201)
async def add_template_exercise(
    template_id: int,
    payload: TemplateExerciseCreate,
    db: AsyncSession = Depends(get_db),
):
    entry = await service.add_template_exercise(
        db, template_id, payload.exercise_id, payload.target_sets, payload.target_reps
    )
    if not entry:
        raise HTTPException(status_code=404, detail="Template or exercise not found")
    return entry


@router.put("/{template_id}/exercises/order", response_model=WorkoutTemplateRead)
async def reorder_template_exercises(
    template_id: int,
    payload: ReorderRequest,
    db: AsyncSession = Depends(get_db),
):
    template = await service.reorder_template_exercises(db, template_id, payload.ids)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.patch("/exercises/{template_exercise_id}", response_model=TemplateExerciseRead)
async def update_template_exercise(
    template_exercise_id: int,
    payload: TemplateExerciseUpdate,
    db: AsyncSession = Depends(get_db),
):
    entry = await service.update_template_exercise(
        db, template_exercise_id, payload.target_sets, payload.target_reps
    )
    if not entry:
        raise HTTPException(status_code=404, detail="Template exercise not found")
    return entry


@router.delete("/exercises/{template_exercise_id}", status_code=204)
async def remove_template_exercise(
    template_exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    if not await service.remove_template_exercise(db, template_exercise_id):
        raise HTTPException(status_code=404, detail="Template exercise not found")
    return None
