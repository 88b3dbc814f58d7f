import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import tenantcms.models  # noqa: F401  (registers tables on Base.metadata)
from tenantcms.config import settings
from tenantcms.database import Base, engine
from tenantcms.exception_handlers import register_exception_handlers
from tenantcms.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from tenantcms.routes import media, pages, tenancy, users, websites

setup_structured_logging(settings.log_level, settings.log_json)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up the application...")
    if settings.debug:
        # Local development only; deployed databases are managed by Alembic
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created (if not existing).")
    if settings.tenancy_expand_mode:
        logger.warning("Tenancy expand mode is on: unmigrated users keep pre-tenancy content access")
    yield
    logger.info("Shutting down the application...")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant CMS backend powered by FastAPI",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    for module in (websites, users, pages, media, tenancy):
        app.include_router(module.router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": settings.app_version}

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
