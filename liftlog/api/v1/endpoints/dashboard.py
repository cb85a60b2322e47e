"""Home dashboard endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.db.session import get_db
from liftlog.schemas.dashboard import DashboardRead
from liftlog.services.dashboard import get_dashboard

router = APIRouter()


@router.get("", response_model=DashboardRead)
async def dashboard(db: AsyncSession = Depends(get_db)):
    """Active workouts, recent finished workouts, templates and routines."""
    return await get_dashboard(db)
