"""Workout template schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from liftlog.schemas.exercise import ExerciseRead


class TemplateExerciseCreate(BaseModel):
    exercise_id: int
    target_sets: int = Field(3, ge=1)
    target_reps: int = Field(10, ge=1)


class TemplateExerciseUpdate(BaseModel):
    target_sets: int = Field(..., ge=1)
    target_reps: int = Field(..., ge=1)


class TemplateExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    template_id: int
    exercise_id: int
    target_sets: int
    target_reps: int
    position: int
    exercise: ExerciseRead


class WorkoutTemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class WorkoutTemplateCreate(WorkoutTemplateBase):
    pass


class WorkoutTemplateUpdate(WorkoutTemplateBase):
    pass


class WorkoutTemplateSummary(WorkoutTemplateBase):
    """Template without its exercises (list views, routine entries)."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime
    updated_at: datetime


class WorkoutTemplateRead(WorkoutTemplateSummary):
    exercises: list[TemplateExerciseRead] = []


class ReorderRequest(BaseModel):
    """Child row ids in their new order."""

    ids: list[int]
