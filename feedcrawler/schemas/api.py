from datetime import datetime
from typing import Optional

from pydantic import Field

from feedcrawler.schemas.items import (
    CamelModel,
    ChannelResult,
    Item,
    RunResult,
    ScheduledJobInfo,
    SchedulerStatus,
)


class HealthResponse(CamelModel):
    status: str
    storage: str
    last_run_time: Optional[datetime] = None
    scheduler_active: bool = False


class ArticlesPage(CamelModel):
    articles: list[Item]
    total_count: int
    current_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class WebhookStatus(CamelModel):
    discord: bool
    slack: bool
    kakao: bool


class DashboardStatus(CamelModel):
    is_running: bool
    last_run_time: Optional[datetime] = None
    total_sent_articles: int = 0
    last_sent_count: int = 0
    recent_articles: list[Item] = Field(default_factory=list)
    total_articles: int = 0
    last_updated: Optional[datetime] = None
    webhook_status: WebhookStatus


class ManualCrawlResponse(CamelModel):
    success: bool
    message: str
    result: RunResult


class SchedulerStartResponse(CamelModel):
    success: bool
    message: str
    timestamp: datetime
    schedules: list[ScheduledJobInfo] = Field(default_factory=list)


class SchedulerStopResponse(CamelModel):
    success: bool
    message: str
    timestamp: datetime
    is_running: bool


class SchedulerStatusResponse(CamelModel):
    success: bool
    timestamp: datetime
    status: SchedulerStatus
    memory_usage: dict[str, float]
    scheduled_jobs: list[ScheduledJobInfo]


class SampleMessageResponse(CamelModel):
    success: bool
    message: str
    timestamp: datetime
    channels: list[ChannelResult]
