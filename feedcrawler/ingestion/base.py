"""Abstract source interface for ingestion."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

from feedcrawler.core.logging import get_logger
from feedcrawler.schemas.items import Item

log = get_logger("ingestion")


@dataclass
class FetchResult:
    """Items from one source; error is set when the fetch failed."""

    source: str
    items: List[Item] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BaseSource(ABC):
    """Abstract base class for content sources."""

    name: str

    def __init__(self, timeout: float = 10.0, user_agent: str | None = None):
        self.timeout = timeout
        self.user_agent = user_agent

    @abstractmethod
    async def fetch(self) -> List[Item]:
        """Fetch and normalize items; may raise on network or parse errors."""

    async def crawl(self) -> FetchResult:
        """Fetch without raising: failures become an empty result with an error."""
        log.info(f"Crawling {self.name}")
        try:
            items = await self.fetch()
        except Exception as exc:  # noqa: BLE001
            message = str(exc) or exc.__class__.__name__
            log.error(f"Crawl failed for {self.name}: {message}")
            return FetchResult(source=self.name, error=message)
        log.info(f"{self.name}: fetched {len(items)} items")
        return FetchResult(source=self.name, items=items)

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent} if self.user_agent else {}

    @staticmethod
    def truncate(text: str, max_length: int) -> str:
        if len(text) <= max_length:
            return text
        return text[:max_length] + "..."

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[datetime]:
        if not value:
            return None
        try:
            if isinstance(value, str):
                value = value.replace("Z", "+00:00")
                parsed = datetime.fromisoformat(value)
            elif isinstance(value, datetime):
                parsed = value
            else:
                return None
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
