"""Input checks shared by the services (run before touching the store)."""

import math
from datetime import date, datetime

from liftlog.core.exceptions import ValidationError


def clean_name(name: str | None, what: str = "name") -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"{what} is required")
    if len(cleaned) > 255:
        raise ValidationError(f"{what} must be at most 255 characters")
    return cleaned


def check_targets(target_sets: int, target_reps: int) -> None:
    if target_sets < 1:
        raise ValidationError("target_sets must be at least 1")
    if target_reps < 1:
        raise ValidationError("target_reps must be at least 1")


def check_set_values(reps: int, weight: float) -> None:
    if reps < 0:
        raise ValidationError("reps cannot be negative")
    if weight < 0 or not math.isfinite(weight):
        raise ValidationError("weight must be a non-negative number")


def parse_date(value: date | str) -> date:
    """Accept a date or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None
