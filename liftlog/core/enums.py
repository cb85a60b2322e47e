"""Shared enums for models and API."""

from enum import Enum


class WorkoutStatus(str, Enum):
    """Workout lifecycle. The only transition is IN_PROGRESS -> FINISHED."""

    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
