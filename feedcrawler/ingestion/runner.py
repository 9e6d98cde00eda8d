"""Aggregation across all configured sources."""

from __future__ import annotations

import asyncio
import resource
import sys
import time
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlparse

from feedcrawler.core.config import settings
from feedcrawler.core.logging import get_logger
from feedcrawler.core.sites import get_keywords, get_sources
from feedcrawler.schemas.items import Item, RunMetrics
from feedcrawler.schemas.sources import ApiSourceDescriptor, SourceDescriptor
from .api_source import ApiSource
from .base import BaseSource
from .feed_source import FeedSource

log = get_logger("ingestion.runner")


def build_source(descriptor: SourceDescriptor) -> BaseSource:
    """Create the adapter matching a descriptor's kind."""
    common = {"timeout": settings.CRAWLING_TIMEOUT_SECONDS, "user_agent": settings.USER_AGENT}
    if isinstance(descriptor, ApiSourceDescriptor):
        return ApiSource(descriptor, **common)
    return FeedSource(descriptor, max_description_length=settings.MAX_DESCRIPTION_LENGTH, **common)


def memory_usage_mb() -> float:
    """Peak resident set size of this process in MB."""
    rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS bytes
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return round(rss / divisor, 1)


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_item(item: Item) -> bool:
    return bool(item.title and item.title.strip()) and is_valid_url(item.url)


def matches_keywords(item: Item, keywords: Iterable[str]) -> bool:
    text = f"{item.title} {item.description} {' '.join(item.tags)}".lower()
    return any(keyword.lower() in text for keyword in keywords)


def remove_duplicates(items: Iterable[Item]) -> List[Item]:
    """Keep the first item per identity key, preserving order."""
    seen: set[str] = set()
    unique: List[Item] = []
    for item in items:
        if item.key in seen:
            continue
        seen.add(item.key)
        unique.append(item)
    return unique


class Aggregator:
    """Runs every source in declaration order and returns filtered, deduplicated items."""

    def __init__(
        self,
        sources: Optional[Sequence[BaseSource]] = None,
        keywords: Optional[Sequence[str]] = None,
        request_delay: Optional[float] = None,
    ):
        self.sources = list(sources) if sources is not None else [build_source(d) for d in get_sources()]
        self.keywords = list(keywords) if keywords is not None else get_keywords()
        self.request_delay = settings.REQUEST_DELAY_SECONDS if request_delay is None else request_delay
        self.metrics = RunMetrics()

    async def crawl_all(self) -> List[Item]:
        started = time.perf_counter()
        self.metrics = RunMetrics(memory_used_mb=memory_usage_mb())
        collected: List[Item] = []

        log.info(f"Crawling {len(self.sources)} sources")

        for index, source in enumerate(self.sources):
            if index and self.request_delay > 0:
                await asyncio.sleep(self.request_delay)

            self.metrics.sites_processed += 1
            try:
                result = await source.crawl()
                if not result.ok:
                    self.metrics.sites_failed += 1
                    continue

                valid = [item for item in result.items if is_valid_item(item)]
                self.metrics.articles_found += len(valid)

                relevant = [item for item in valid if matches_keywords(item, self.keywords)]
                self.metrics.articles_filtered += len(relevant)
                collected.extend(relevant)

                self.metrics.sites_succeeded += 1
                log.info(
                    f"Source={source.name} fetched={len(result.items)} "
                    f"valid={len(valid)} relevant={len(relevant)}"
                )
            except Exception as exc:  # noqa: BLE001
                log.error(f"Failed to process {source.name}: {exc}")
                self.metrics.sites_failed += 1

        unique = remove_duplicates(collected)
        unique.sort(key=lambda item: item.published_at, reverse=True)

        self.metrics.crawl_duration_ms = int((time.perf_counter() - started) * 1000)
        self.metrics.memory_used_mb = memory_usage_mb()

        log.info(
            f"Crawl complete | items={len(unique)} succeeded={self.metrics.sites_succeeded} "
            f"failed={self.metrics.sites_failed} duration_ms={self.metrics.crawl_duration_ms}"
        )
        return unique

    async def test_site(self, name: str) -> List[Item]:
        """Crawl one named source and report raw/valid/relevant counts."""
        source = next((s for s in self.sources if s.name == name), None)
        if source is None:
            log.error(f"Unknown source: {name}")
            return []

        result = await source.crawl()
        valid = [item for item in result.items if is_valid_item(item)]
        relevant = [item for item in valid if matches_keywords(item, self.keywords)]

        log.info(
            f"Test crawl {name}: total={len(result.items)} valid={len(valid)} relevant={len(relevant)}"
        )
        for item in relevant[:3]:
            log.info(f"  {item.title} <{item.url}>")
        return relevant

    def get_metrics(self) -> RunMetrics:
        return self.metrics.model_copy()

    @staticmethod
    def filter_by_keywords(items: Iterable[Item], keywords: Sequence[str]) -> List[Item]:
        return [item for item in items if matches_keywords(item, keywords)]

    @staticmethod
    def filter_by_date_range(items: Iterable[Item], start: datetime, end: datetime) -> List[Item]:
        return [item for item in items if start <= item.published_at <= end]
