"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from liftlog.api.v1 import api_router
from liftlog.core.config import get_settings
from liftlog.core.exceptions import (
    ConflictError,
    LiftlogError,
    StateError,
    StorageError,
    ValidationError,
)
from liftlog.db.session import engine

settings = get_settings()

logger = logging.getLogger(__name__)

# Most specific first; LiftlogError catches anything unlisted
_STATUS_CODES: list[tuple[type[LiftlogError], int]] = [
    (ValidationError, 400),
    (StateError, 400),
    (ConflictError, 409),
    (StorageError, 500),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Shutdown: release pooled connections. Schema is managed by Alembic."""
    logger.info("Starting %s (%s)", settings.app_name, settings.environment)
    yield
    await engine.dispose()


async def liftlog_error_handler(request: Request, exc: LiftlogError) -> JSONResponse:
    status_code = next((code for cls, code in _STATUS_CODES if isinstance(exc, cls)), 500)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


def create_application() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: anything goes in debug, localhost dev servers otherwise
    if settings.debug:
        cors_origins = ["*"]
    else:
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(LiftlogError, liftlog_error_handler)

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
