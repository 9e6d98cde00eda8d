"""API dependencies"""

from fastapi import Request

from feedcrawler.services.data_service import DataService
from feedcrawler.services.scheduler import RunCoordinator


def get_coordinator(request: Request) -> RunCoordinator:
    """The process-wide run coordinator created by the app factory."""
    return request.app.state.coordinator


def get_data_service(request: Request) -> DataService:
    return request.app.state.data_service
