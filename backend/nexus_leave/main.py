from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from nexus_leave.api.health import router as health_router
from nexus_leave.api.router import api_router
from nexus_leave.config import get_settings
from nexus_leave.db import create_tables, dispose_engine
from nexus_leave.exceptions import setup_exception_handlers
from nexus_leave.middleware import setup_middleware
from nexus_leave.worker import run_integrity_loop, setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Starting %s v%s [%s]", settings.app_name, settings.app_version, settings.environment)

    if settings.create_tables_on_startup:
        await create_tables()
        logger.info("Database tables initialized")

    sweep_task: asyncio.Task[None] | None = None
    if settings.integrity_sweep_on_startup:
        sweep_task = asyncio.create_task(run_integrity_loop(settings.integrity_sweep_delay_seconds, None))

    yield

    if sweep_task is not None:
        sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task
    await dispose_engine()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)

    return application


app = create_app()
