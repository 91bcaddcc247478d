"""FastAPI application for the round statistics API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.settings import Settings
from database.connection import db
from database.db_manager import DatabaseManager
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    InvalidRecordError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    NotFoundError: 404,
    DuplicateError: 409,
    IntegrityError: 400,
    InvalidRecordError: 500,
}


def _status_for(exc: DatabaseError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 503


def _lifespan_for(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize DB pool on startup, close on shutdown."""
        await db.initialize_from_settings(settings)
        app.state.db_manager = DatabaseManager(db.pool)
        if settings.apply_schema:
            await app.state.db_manager.initialize_schema()
        yield
        await db.close()

    return lifespan


def create_app(settings: Optional[Settings] = None, *, use_lifespan: bool = True) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Round Statistics API",
        version="1.0.0",
        lifespan=_lifespan_for(settings) if use_lifespan else None,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DatabaseError)
    async def store_failure(request: Request, exc: DatabaseError):
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error("Round store failure on %s %s: %s", request.method, request.url.path, exc.reason)
        return JSONResponse(status_code=status_code, content={"detail": exc.reason})

    from api.routers import rounds, stats
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])
    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])

    @app.get("/api/health")
    async def health():
        healthy = await db.health_check()
        return {"status": "ok" if healthy else "degraded", "database": healthy}

    return app


app = create_app()
