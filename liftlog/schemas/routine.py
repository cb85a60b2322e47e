"""Routine schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from liftlog.schemas.template import WorkoutTemplateSummary


class RoutineTemplateCreate(BaseModel):
    template_id: int


class RoutineTemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    routine_id: int
    template_id: int
    position: int
    template: WorkoutTemplateSummary


class RoutineBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class RoutineCreate(RoutineBase):
    pass


class RoutineUpdate(RoutineBase):
    pass


class RoutineSummary(RoutineBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime
    updated_at: datetime


class RoutineRead(RoutineSummary):
    templates: list[RoutineTemplateRead] = []
