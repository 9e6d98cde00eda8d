"""Scheduler routes - start, stop and inspect periodic crawling."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from feedcrawler.api.deps import get_coordinator
from feedcrawler.core.logging import get_logger
from feedcrawler.schemas.api import SchedulerStartResponse, SchedulerStatusResponse, SchedulerStopResponse
from feedcrawler.services.scheduler import RunCoordinator

router = APIRouter(prefix="/scheduler", tags=["scheduler"])
log = get_logger("scheduler_routes")


@router.post("/start", response_model=SchedulerStartResponse)
async def start_scheduler(coordinator: RunCoordinator = Depends(get_coordinator)):
    """Register the daily crawl triggers, replacing any existing ones."""
    coordinator.start_scheduler()
    return SchedulerStartResponse(
        success=True,
        message="Scheduler started",
        timestamp=datetime.now(timezone.utc),
        schedules=coordinator.get_scheduled_jobs(),
    )


@router.post("/stop", response_model=SchedulerStopResponse)
async def stop_scheduler(coordinator: RunCoordinator = Depends(get_coordinator)):
    """Cancel future triggers and wait (bounded) for a running crawl to finish."""
    idle = await coordinator.cleanup()
    return SchedulerStopResponse(
        success=True,
        message="Scheduler stopped" if idle else "Scheduler stopped; a crawl is still finishing",
        timestamp=datetime.now(timezone.utc),
        is_running=coordinator.is_running,
    )


@router.get("/status", response_model=SchedulerStatusResponse)
async def scheduler_status(coordinator: RunCoordinator = Depends(get_coordinator)):
    """Running flag, last delivery and registered jobs."""
    return SchedulerStatusResponse(
        success=True,
        timestamp=datetime.now(timezone.utc),
        status=await coordinator.get_status(),
        memory_usage=coordinator.get_memory_usage(),
        scheduled_jobs=coordinator.get_scheduled_jobs(),
    )
