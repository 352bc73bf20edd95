# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from functools import partial

import uvicorn
from fastapi import FastAPI

from src.config import get_settings
from src.database import SessionLocal, engine
from src.logging_config import configure_logging
from src.models.base import Base
from src.schemas.common import HealthResponse
from src.services.currency_sync_service import run_sync_cycle
from src.services.sync_scheduler import CurrencySyncScheduler, build_schedule_policy

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    scheduler = None
    if settings.sync_enabled:
        logger.info("Starting currency sync scheduler...")
        scheduler = CurrencySyncScheduler.create_instance(
            build_schedule_policy(settings),
            partial(run_sync_cycle, SessionLocal, settings),
        )
        scheduler.start()

    yield

    # Shutdown: stop the background sync
    if scheduler is not None:
        logger.info("Shutting down currency sync scheduler...")
        await scheduler.stop()
        CurrencySyncScheduler.reset_instance()


app = FastAPI(
    title="CBR Rates",
    description="Daily central bank currency rates snapshot service",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# Import and include API router after it's created
from src.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")


def main() -> None:
    """Run the API server with uvicorn."""
    settings = get_settings()
    logger.info(f"Starting server on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
