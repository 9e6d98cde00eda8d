"""Health routes - liveness and readiness checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response

from feedcrawler.api.deps import get_coordinator
from feedcrawler.schemas.api import HealthResponse
from feedcrawler.services.scheduler import RunCoordinator

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health(coordinator: RunCoordinator = Depends(get_coordinator)):
    """
    Health check endpoint for load balancer and Docker health checks.

    Reports the last delivery time and whether periodic crawling is active.
    """
    ledger = await coordinator.ledger.load()
    return HealthResponse(
        status="healthy",
        storage=str(coordinator.ledger.store.data_dir),
        last_run_time=ledger.last_run_time,
        scheduler_active=coordinator.is_scheduler_active,
    )


@router.get("/ready")
def readiness(response: Response, coordinator: RunCoordinator = Depends(get_coordinator)):
    """
    Readiness probe - checks the data directory is usable.

    Returns 200 if ready, 503 otherwise.
    """
    data_dir = coordinator.ledger.store.data_dir
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        return {"status": "ready", "timestamp": datetime.now(timezone.utc).isoformat()}
    except OSError as e:
        response.status_code = 503
        return {"status": "not_ready", "error": str(e), "timestamp": datetime.now(timezone.utc).isoformat()}
