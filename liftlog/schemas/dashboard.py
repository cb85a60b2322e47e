"""Home dashboard schema."""

from pydantic import BaseModel

from liftlog.schemas.routine import RoutineSummary
from liftlog.schemas.template import WorkoutTemplateSummary
from liftlog.schemas.workout import WorkoutSummary


class DashboardRead(BaseModel):
    active_workouts: list[WorkoutSummary] = []
    recent_workouts: list[WorkoutSummary] = []
    templates: list[WorkoutTemplateSummary] = []
    routines: list[RoutineSummary] = []
