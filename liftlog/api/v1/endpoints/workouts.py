"""Workout endpoints: lifecycle, exercises and sets."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.exceptions import StateError
from liftlog.db.session import get_db
from liftlog.schemas.template import ReorderRequest
from liftlog.schemas.workout import (
    LoggedSetCreate,
    LoggedSetRead,
    LoggedSetUpdate,
    WorkoutCreate,
    WorkoutExerciseCreate,
    WorkoutExerciseRead,
    WorkoutRead,
    WorkoutSummary,
    WorkoutUpdate,
)
from liftlog.services import workouts as service
from liftlog.services.instantiation import create_workout_from_template

router = APIRouter()


@router.get("", response_model=list[WorkoutSummary])
async def list_workouts(db: AsyncSession = Depends(get_db)):
    """Workouts still in progress, most recent first."""
    return await service.list_in_progress(db)


@router.get("/history", response_model=list[WorkoutSummary])
async def workout_history(
    db: AsyncSession = Depends(get_db),
    limit: int | None = None,
):
    """Finished workouts, most recent first."""
    return await service.list_finished(db, limit=limit)


@router.post("", response_model=WorkoutRead, status_code=201)
async def create_workout(
    payload: WorkoutCreate,
    db: AsyncSession = Depends(get_db),
):
    """Start a workout; with template_id its exercises are copied in order."""
    if payload.template_id is not None:
        workout = await create_workout_from_template(
            db, payload.name, payload.date, payload.template_id
        )
    else:
        workout = await service.create_workout(db, payload.name, payload.date)
    if not workout:
        raise HTTPException(status_code=404, detail="Template not found")
    return workout


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Workout with exercises, sets, last weights and template targets."""
    workout = await service.get_workout(db, workout_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.put("/{workout_id}", response_model=WorkoutRead)
async def update_workout(
    workout_id: int,
    payload: WorkoutUpdate,
    db: AsyncSession = Depends(get_db),
):
    if not await service.update_workout(db, workout_id, payload.name, payload.date, payload.notes):
        if await service.get_workout(db, workout_id) is None:
            raise HTTPException(status_code=404, detail="Workout not found")
        raise StateError(f"Workout {workout_id} is finished and cannot be edited")
    return await service.get_workout(db, workout_id)


@router.post("/{workout_id}/finish", response_model=WorkoutRead)
async def finish_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Mark finished. Finishing twice is harmless."""
    await service.finish_workout(db, workout_id)
    workout = await service.get_workout(db, workout_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
):
    if not await service.delete_workout(db, workout_id):
        raise HTTPException(status_code=404, detail="Workout not found")
    return None


@router.post("/{workout_id}/exercises", response_model=WorkoutExerciseRead, status_code=201)
async def add_workout_exercise(
    workout_id: int,
    payload: WorkoutExerciseCreate,
    db: AsyncSession = Depends(get_db),
):
    entry = await service.add_workout_exercise(db, workout_id, payload.exercise_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Workout or exercise not found")
    return entry


@router.put("/{workout_id}/exercises/order", response_model=WorkoutRead)
async def reorder_workout_exercises(
    workout_id: int,
    payload: ReorderRequest,
    db: AsyncSession = Depends(get_db),
):
    workout = await service.reorder_workout_exercises(db, workout_id, payload.ids)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.get("/exercises/{workout_exercise_id}", response_model=WorkoutExerciseRead)
async def get_workout_exercise(
    workout_exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    entry = await service.get_workout_exercise(db, workout_exercise_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Workout exercise not found")
    return entry


@router.delete("/exercises/{workout_exercise_id}", status_code=204)
async def remove_workout_exercise(
    workout_exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    if not await service.remove_workout_exercise(db, workout_exercise_id):
        raise HTTPException(status_code=404, detail="Workout exercise not found")
    return None


@router.post("/exercises/{workout_exercise_id}/sets", response_model=LoggedSetRead, status_code=201)
async def add_set(
    workout_exercise_id: int,
    payload: LoggedSetCreate,
    db: AsyncSession = Depends(get_db),
):
    logged = await service.add_set(db, workout_exercise_id, payload.reps, payload.weight)
    if not logged:
        raise HTTPException(status_code=404, detail="Workout exercise not found")
    return logged


@router.patch("/sets/{set_id}", response_model=LoggedSetRead)
async def update_set(
    set_id: int,
    payload: LoggedSetUpdate,
    db: AsyncSession = Depends(get_db),
):
    logged = await service.update_set(db, set_id, payload.reps, payload.weight)
    if not logged:
        raise HTTPException(status_code=404, detail="Set not found")
    return logged


@router.delete("/sets/{set_id}", status_code=204)
async def delete_set(
    set_id: int,
    db: AsyncSession = Depends(get_db),
):
    if not await service.delete_set(db, set_id):
        raise HTTPException(status_code=404, detail="Set not found")
    return None
