"""Crawler routes - manual trigger, dashboard status, stored articles."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from feedcrawler.api.deps import get_coordinator, get_data_service
from feedcrawler.core.logging import get_logger
from feedcrawler.schemas.api import ArticlesPage, DashboardStatus, ManualCrawlResponse
from feedcrawler.services.data_service import DataService
from feedcrawler.services.scheduler import RunCoordinator

router = APIRouter(prefix="/crawler", tags=["crawler"])
log = get_logger("crawler_routes")


@router.post("/manual", response_model=ManualCrawlResponse)
async def manual_crawl(coordinator: RunCoordinator = Depends(get_coordinator)):
    """
    Run one crawl job now.

    Fetches every source, stores the snapshot, delivers new items and records
    them as sent. Returns immediately with skipped=true if a crawl is already running.
    """
    result = await coordinator.manual_run()

    if result.skipped:
        message = "Crawl already in progress"
    elif result.success:
        message = "Crawl completed"
    else:
        message = f"Crawl failed: {result.error}"

    return ManualCrawlResponse(success=result.success, message=message, result=result)


@router.get("/status", response_model=DashboardStatus)
async def crawler_status(
    coordinator: RunCoordinator = Depends(get_coordinator),
    service: DataService = Depends(get_data_service),
):
    """Dashboard view: last delivery, latest snapshot and configured channels."""
    try:
        return await service.get_dashboard_status(is_running=coordinator.is_running)
    except Exception as exc:  # noqa: BLE001
        log.error(f"Status lookup failed: {exc}")
        return JSONResponse(status_code=500, content={"error": "Status lookup failed", "details": str(exc)})


@router.get("/articles", response_model=ArticlesPage)
def list_articles(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    source: Optional[str] = Query(None, description="Filter by source name (case-insensitive partial match)"),
    keyword: Optional[str] = Query(None, description="Filter by title/description (case-insensitive partial match)"),
    service: DataService = Depends(get_data_service),
):
    """Page through the latest crawl snapshot."""
    return service.get_articles(page=page, limit=limit, source=source, keyword=keyword)
