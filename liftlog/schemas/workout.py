"""Workout, WorkoutExercise and LoggedSet schemas."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from liftlog.core.enums import WorkoutStatus
from liftlog.schemas.exercise import ExerciseRead


class LoggedSetCreate(BaseModel):
    reps: int = Field(..., ge=0)
    weight: float = Field(0.0, ge=0)


class LoggedSetUpdate(LoggedSetCreate):
    pass


class LoggedSetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    workout_exercise_id: int
    reps: int
    weight: float
    position: int
    created_at: dt.datetime


class WorkoutExerciseCreate(BaseModel):
    exercise_id: int


class WorkoutExerciseRead(BaseModel):
    """Exercise in a workout with its sets.

    last_weight comes from other finished workouts; target_sets/target_reps
    are read live from the workout's template (None for free-form workouts).
    """

    model_config = ConfigDict(from_attributes=True)
    id: int
    workout_id: int
    exercise_id: int
    position: int
    exercise: ExerciseRead
    sets: list[LoggedSetRead] = []
    last_weight: float | None = None
    target_sets: int | None = None
    target_reps: int | None = None


class WorkoutCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    template_id: int | None = None


class WorkoutUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    notes: str = ""


class WorkoutSummary(BaseModel):
    """List projection; counts come from aggregates, sets are never loaded."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    date: dt.date
    status: WorkoutStatus
    exercise_count: int = 0
    set_count: int = 0


class WorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    date: dt.date
    notes: str = ""
    status: WorkoutStatus
    template_id: int | None = None
    created_at: dt.datetime
    finished_at: dt.datetime | None = None
    exercises: list[WorkoutExerciseRead] = []

    @property
    def is_finished(self) -> bool:
        return self.status == WorkoutStatus.FINISHED
