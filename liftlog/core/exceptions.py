"""Domain errors raised by the services.

Lookups that find nothing are not errors: they return ``None`` (or ``False``
for deletes) and the caller branches on that.
"""


class LiftlogError(Exception):
    """Base class for every error the core raises."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LiftlogError):
    """Input rejected before reaching storage (empty name, bad target, bad date)."""


class ConflictError(LiftlogError):
    """Operation conflicts with existing rows."""


class DuplicateNameError(ConflictError):
    """Exercise name already taken."""


class ReferencedEntityError(ConflictError):
    """Row cannot be deleted while something still references it."""


class ReferencedByTemplateError(ReferencedEntityError):
    pass


class ReferencedByWorkoutError(ReferencedEntityError):
    pass


class ReferencedByRoutineError(ReferencedEntityError):
    pass


class StateError(LiftlogError):
    """Mutation not allowed in the entity's current state."""


class WorkoutFinishedError(StateError):
    """Workout is finished; it and its exercises and sets are read-only."""

    def __init__(self, workout_id: int):
        super().__init__(f"Workout {workout_id} is finished")
        self.workout_id = workout_id


class StorageError(LiftlogError):
    """Underlying store failed; any partial writes of the operation were rolled back."""
