from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from feedcrawler.api.routes import crawler, health, messages, scheduler
from feedcrawler.core.config import settings
from feedcrawler.core.logging import get_logger
from feedcrawler.services.data_service import DataService
from feedcrawler.services.scheduler import RunCoordinator

log = get_logger("app")


def create_app(
    coordinator: Optional[RunCoordinator] = None,
    data_service: Optional[DataService] = None,
    start_scheduler: Optional[bool] = None,
) -> FastAPI:
    """Build the API around one explicitly owned run coordinator."""
    coordinator = coordinator or RunCoordinator()
    data_service = data_service or DataService(
        snapshots=coordinator.snapshots,
        ledger=coordinator.ledger,
    )
    autostart = settings.SCHEDULER_ENABLED if start_scheduler is None else start_scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(f"Starting application in {settings.ENV.upper()} mode")
        channels = coordinator.notifier.configured_channels
        log.info(f"Notification channels: {', '.join(channels) if channels else 'none'}")

        # Start the daily crawl triggers if enabled
        if autostart:
            log.info("Starting crawl scheduler...")
            coordinator.start_scheduler()
        else:
            log.info("Scheduled crawling is disabled (SCHEDULER_ENABLED=false)")

        yield

        log.info("Shutting down services...")
        await coordinator.cleanup()
        log.info("Application shutdown complete")

    app = FastAPI(
        title="Frontend News Crawler",
        description="Collects frontend articles from APIs and feeds and delivers new ones to chat webhooks",
        version="1.0.0",
        lifespan=lifespan,
        # Disable docs in production for security
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
        debug=settings.debug_enabled,
    )
    app.state.coordinator = coordinator
    app.state.data_service = data_service

    app.include_router(crawler.router)
    app.include_router(scheduler.router)
    app.include_router(messages.router)
    app.include_router(health.router)
    return app


app = create_app()
