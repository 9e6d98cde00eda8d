"""Normalized item record and the durable structures built from it."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys; accepts both spellings on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Item(CamelModel):
    """One normalized content record produced by a source adapter."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str
    url: str
    description: str = ""
    published_at: datetime = Field(default_factory=utc_now)
    tags: tuple[str, ...] = ()
    source: str

    @field_validator("published_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps cannot be ordered against aware ones
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def key(self) -> str:
        """Identity key: the URL, or the title when the URL is empty."""
        return self.url or self.title


class Ledger(CamelModel):
    """Durable record of everything already delivered (most recent first)."""

    last_run_time: Optional[datetime] = None
    sent_items: list[Item] = Field(default_factory=list)
    last_sent_count: int = 0
    last_job_kind: Optional[str] = None

    def sent_keys(self) -> set[str]:
        return {item.key for item in self.sent_items}


class Snapshot(CamelModel):
    """Full result of the most recent aggregation, independent of delivery."""

    last_updated: datetime = Field(default_factory=utc_now)
    total_count: int = 0
    items: list[Item] = Field(default_factory=list)

    @classmethod
    def from_items(cls, items: list[Item]) -> "Snapshot":
        return cls(last_updated=utc_now(), total_count=len(items), items=list(items))


class RunMetrics(CamelModel):
    """Per-run crawl counters; never persisted."""

    crawl_duration_ms: int = 0
    sites_processed: int = 0
    sites_succeeded: int = 0
    sites_failed: int = 0
    articles_found: int = 0
    articles_filtered: int = 0
    memory_used_mb: float = 0.0


class ChannelResult(CamelModel):
    channel: str
    success: bool
    error: Optional[str] = None


class RunResult(CamelModel):
    """Outcome of one runCrawlingJob invocation."""

    success: bool
    skipped: bool = False
    job_kind: Optional[str] = None
    total_articles: int = 0
    new_articles: int = 0
    message_sent: bool = False
    duration: float = 0.0
    timestamp: datetime = Field(default_factory=utc_now)
    message: Optional[str] = None
    error: Optional[str] = None
    channels: list[ChannelResult] = Field(default_factory=list)
    metrics: Optional[RunMetrics] = None


class ScheduledJobInfo(CamelModel):
    name: str
    schedule: str
    is_active: bool


class SchedulerStatus(CamelModel):
    is_running: bool
    last_run_time: Optional[datetime] = None
    total_sent_articles: int = 0
    last_sent_count: int = 0
    last_job_kind: str = "unknown"
    scheduled_jobs_count: int = 0
    is_scheduler_active: bool = False
