"""Shared fixtures: a fresh SQLite database per test, a session, an API client."""

import datetime as dt

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from liftlog.core.config import Settings
from liftlog.db.base import Base
from liftlog.db.session import create_engine_from_settings, create_session_maker, get_db
from liftlog.main import app
from liftlog.models import *  # noqa: F401, F403 - register all models
from liftlog.services import exercises, templates, workouts


@pytest_asyncio.fixture
async def engine(tmp_path):
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    engine = create_engine_from_settings(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    """AsyncClient against the app, every request on the test database."""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def log_finished(db):
    """Factory: a finished workout with one exercise and the given set weights."""

    async def _log(exercise_id, workout_date, weights, name="Past"):
        workout = await workouts.create_workout(db, name, workout_date)
        entry = await workouts.add_workout_exercise(db, workout.id, exercise_id)
        for weight in weights:
            await workouts.add_set(db, entry.id, 5, weight)
        await workouts.finish_workout(db, workout.id)
        return workout.id

    return _log


@pytest_asyncio.fixture
async def squat(db):
    return await exercises.create_exercise(db, "Squat")


@pytest_asyncio.fixture
async def bench(db):
    return await exercises.create_exercise(db, "Bench Press")


@pytest_asyncio.fixture
async def leg_day(db, squat):
    template = await templates.create_template(db, "Leg Day")
    await templates.add_template_exercise(db, template.id, squat.id, 5, 5)
    return await templates.get_template(db, template.id)


@pytest.fixture
def today():
    return dt.date(2026, 3, 2)
