"""Exercise catalog endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.db.session import get_db
from liftlog.schemas.exercise import ExerciseCreate, ExerciseRead
from liftlog.services import exercises as service

router = APIRouter()


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
    q: str | None = None,
):
    """List exercises by name; ``q`` filters by substring."""
    if q is not None:
        return await service.search_exercises(db, q)
    return await service.list_exercises(db)


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
):
    return await service.create_exercise(db, payload.name)


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    exercise = await service.get_exercise(db, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete an exercise (409 while a template or workout uses it)."""
    if not await service.delete_exercise(db, exercise_id):
        raise HTTPException(status_code=404, detail="Exercise not found")
    return None
