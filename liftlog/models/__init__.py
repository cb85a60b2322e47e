"""ORM models - import all so Base.metadata is complete for migrations."""

from liftlog.models.exercise import Exercise
from liftlog.models.routine import Routine, RoutineTemplate
from liftlog.models.template import TemplateExercise, WorkoutTemplate
from liftlog.models.workout import LoggedSet, Workout, WorkoutExercise

__all__ = [
    "Exercise",
    "LoggedSet",
    "Routine",
    "RoutineTemplate",
    "TemplateExercise",
    "Workout",
    "WorkoutExercise",
    "WorkoutTemplate",
]
