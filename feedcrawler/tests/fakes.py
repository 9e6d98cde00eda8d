"""In-memory stand-ins for sources, channels and the aggregator."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from feedcrawler.delivery.channels import Channel
from feedcrawler.ingestion.base import BaseSource
from feedcrawler.schemas.items import Item, RunMetrics

BASE_TIME = datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)


def make_item(
    slug: str,
    title: Optional[str] = None,
    url: Optional[str] = None,
    source: str = "Test source",
    hours_ago: int = 0,
    description: str = "",
    tags: Sequence[str] = ("react",),
) -> Item:
    return Item(
        title=title if title is not None else f"React article {slug}",
        url=url if url is not None else f"https://example.com/{slug}",
        description=description,
        published_at=BASE_TIME - timedelta(hours=hours_ago),
        tags=tuple(tags),
        source=source,
    )


class StaticSource(BaseSource):
    def __init__(self, name: str, items: List[Item]):
        super().__init__()
        self.name = name
        self.items = items
        self.calls = 0

    async def fetch(self) -> List[Item]:
        self.calls += 1
        return list(self.items)


class FailingSource(BaseSource):
    def __init__(self, name: str = "Broken"):
        super().__init__()
        self.name = name

    async def fetch(self) -> List[Item]:
        raise ConnectionError("Simulated fetch failure")


class RecordingChannel(Channel):
    def __init__(self, name: str, fail: bool = False):
        super().__init__()
        self.name = name
        self.fail = fail
        self.batches: List[List[Item]] = []

    async def send(self, items: Sequence[Item]) -> None:
        if self.fail:
            raise RuntimeError(f"{self.name} webhook returned 500")
        self.batches.append(list(items))


class StaticAggregator:
    """Returns a fixed list; optionally blocks until released."""

    def __init__(self, items: List[Item], block: bool = False, error: Optional[Exception] = None):
        self.items = items
        self.block = block
        self.error = error
        self.calls = 0
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def crawl_all(self) -> List[Item]:
        self.calls += 1
        if self.block:
            self.started.set()
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return list(self.items)

    async def test_site(self, name: str) -> List[Item]:
        return [item for item in self.items if item.source == name]

    def get_metrics(self) -> RunMetrics:
        return RunMetrics(sites_processed=1, sites_succeeded=1, articles_found=len(self.items))
