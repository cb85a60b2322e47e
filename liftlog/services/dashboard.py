"""Home dashboard: what's running, what was done lately, what can be started."""

from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.config import get_settings
from liftlog.schemas.dashboard import DashboardRead
from liftlog.services.routines import list_routines
from liftlog.services.templates import list_templates
from liftlog.services.workouts import list_finished, list_in_progress


async def get_dashboard(db: AsyncSession, recent_limit: int | None = None) -> DashboardRead:
    if recent_limit is None:
        recent_limit = get_settings().recent_workouts_limit
    return DashboardRead(
        active_workouts=await list_in_progress(db),
        recent_workouts=await list_finished(db, limit=recent_limit),
        templates=await list_templates(db),
        routines=await list_routines(db),
    )
