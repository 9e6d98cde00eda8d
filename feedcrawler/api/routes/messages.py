"""Test message route - checks channel configuration end to end."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from feedcrawler.api.deps import get_coordinator
from feedcrawler.schemas.api import SampleMessageResponse
from feedcrawler.services.scheduler import RunCoordinator

router = APIRouter(prefix="/test", tags=["test"])


@router.post("/message", response_model=SampleMessageResponse)
async def send_test_message(coordinator: RunCoordinator = Depends(get_coordinator)):
    """Send two sample items to every configured channel."""
    results = await coordinator.notifier.send_test_message()
    success = coordinator.notifier.any_succeeded(results)

    if not results:
        message = "No channels configured"
    elif success:
        message = "Test message sent"
    else:
        message = "Test message failed on every channel"

    return SampleMessageResponse(
        success=success,
        message=message,
        timestamp=datetime.now(timezone.utc),
        channels=results,
    )
