"""
division_cms.api.app

FastAPI app factory for the division CMS service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from division_cms import __version__
from division_cms.api.errors import register_exception_handlers
from division_cms.api.middleware import CorsMiddleware, ErrorBoundaryMiddleware
from division_cms.api.routers.admin_modules import router as admin_modules_router
from division_cms.api.routers.divisions import router as divisions_router
from division_cms.api.routers.health import router as health_router
from division_cms.db.init_db import init_db
from division_cms.db.session import create_engine, create_sessionmaker
from division_cms.observability.logging import configure_logging, get_logger
from division_cms.observability.middleware import RequestContextMiddleware
from division_cms.settings import DEFAULT_ADMIN_TOKEN_SECRET, Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    if settings.env == "prod" and settings.admin_token_secret == DEFAULT_ADMIN_TOKEN_SECRET:
        raise RuntimeError("DCMS_ADMIN_TOKEN_SECRET must be set in prod")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Division CMS",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Added last runs first: request context -> CORS -> error boundary -> routes.
    app.add_middleware(ErrorBoundaryMiddleware)
    app.add_middleware(CorsMiddleware, allow_origin=settings.cors_allow_origin)
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(divisions_router)
    app.include_router(admin_modules_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Business logic stays in services; this module only wires things together.
