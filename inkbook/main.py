# inkbook/main.py
from __future__ import annotations

# Load .env early so os.getenv works everywhere
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager
from typing import Optional

import sqlalchemy as sa
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from inkbook.api.routes.appointments import router as appointments_router
from inkbook.api.routes.availability import router as availability_router
from inkbook.api.routes.catalog import router as catalog_router
from inkbook.core.config import Settings, get_settings
from inkbook.core.errors import (
    AppointmentNotFound,
    ArtistNotFound,
    BookingError,
    CancellationRejected,
    InvalidStatusTransition,
    RepositoryTimeout,
    RepositoryUnavailable,
    SlotUnavailable,
    UnknownService,
)
from inkbook.core.logging import LoggingMiddleware, get_logger, setup_logging
from inkbook.db.base import init_db
from inkbook.db.session import Database, get_session

logger = get_logger(__name__)

_STATUS_BY_ERROR = (
    (RepositoryTimeout, 504),
    (RepositoryUnavailable, 503),
    (AppointmentNotFound, 404),
    (ArtistNotFound, 404),
    (UnknownService, 422),
    (SlotUnavailable, 409),
    (InvalidStatusTransition, 409),
)

_STATUS_BY_CANCEL_CODE = {
    "NOT_FOUND": 404,
    "INVALID_TOKEN": 403,
    "ALREADY_CANCELLED": 409,
    "ALREADY_COMPLETED": 409,
    "TOO_LATE": 409,
}


def status_for(error: BookingError) -> int:
    if isinstance(error, CancellationRejected):
        return _STATUS_BY_CANCEL_CODE.get(error.code, 400)
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 400


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(debug=settings.is_development, max_log_length=settings.MAX_LOG_LENGTH,
                  level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database(settings.async_db_uri)
        app.state.database = db
        if settings.AUTO_CREATE_TABLES:
            await init_db(db)
        logger.info("application_startup", env=settings.APP_ENV)
        try:
            yield
        finally:
            logger.info("application_shutdown")
            await db.dispose()

    app = FastAPI(title="Inkbook", description="Tattoo studio booking service", lifespan=lifespan)
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(LoggingMiddleware(
        log_requests=settings.LOG_REQUESTS,
        log_responses=settings.LOG_RESPONSES,
        slow_threshold=settings.SLOW_REQUEST_THRESHOLD,
    ))

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("booking_error", code=exc.code, error=str(exc), path=request.url.path)
        return JSONResponse({"detail": str(exc), "code": exc.code}, status_code=status_code)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse({"detail": str(exc), "code": "invalid_input"}, status_code=422)

    # -------- Health / readiness (public) --------
    @app.get("/healthz", include_in_schema=False)
    async def healthz():
        return {"ok": True}

    @app.get("/readyz", include_in_schema=False)
    async def readyz(db: AsyncSession = Depends(get_session)):
        await db.execute(sa.text("SELECT 1"))
        return {"db": "ok"}

    app.include_router(catalog_router)
    app.include_router(availability_router)
    app.include_router(appointments_router)
    return app


app = create_app()
