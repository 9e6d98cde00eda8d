"""RSS/Atom feed source implementation."""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, List, Optional

import feedparser
import httpx
from bs4 import BeautifulSoup

from feedcrawler.core.logging import get_logger
from feedcrawler.schemas.items import Item, utc_now
from feedcrawler.schemas.sources import FeedSourceDescriptor
from .base import BaseSource

log = get_logger("ingestion.feed")


class FeedSource(BaseSource):
    """Fetches and parses a syndication feed."""

    def __init__(
        self,
        descriptor: FeedSourceDescriptor,
        max_description_length: int = 200,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.descriptor = descriptor
        self.name = descriptor.name
        self.max_description_length = max_description_length

    async def fetch(self) -> List[Item]:
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            resp = await client.get(self.descriptor.endpoint, headers=self.headers)
            resp.raise_for_status()

        feed = feedparser.parse(resp.content)
        if feed.get("bozo") and not feed.get("entries"):
            raise ValueError(f"Unparseable feed: {feed.get('bozo_exception')}")
        if feed.get("bozo"):
            log.debug(f"{self.name}: feed parsed with warnings: {feed.get('bozo_exception')}")

        fetched_at = utc_now()
        return [self._to_item(entry, fetched_at) for entry in feed.get("entries", [])]

    def _to_item(self, entry: Any, fetched_at: datetime) -> Item:
        return Item(
            title=(entry.get("title") or "").strip(),
            url=entry.get("link") or "",
            description=self.truncate(self._snippet(entry), self.max_description_length),
            published_at=self._entry_timestamp(entry) or fetched_at,
            tags=tuple(tag.get("term") for tag in entry.get("tags", []) if tag.get("term")),
            source=self.name,
        )

    @staticmethod
    def _snippet(entry: Any) -> str:
        """Plain-text summary, falling back to the full content."""
        text = entry.get("summary") or ""
        if not text and entry.get("content"):
            text = entry["content"][0].get("value", "")
        if not text:
            return ""
        return BeautifulSoup(text, "html.parser").get_text(" ", strip=True)

    def _entry_timestamp(self, entry: Any) -> Optional[datetime]:
        for key in ("published_parsed", "updated_parsed"):
            parsed = entry.get(key)
            if parsed:
                return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
        for key in ("published", "updated"):
            raw = entry.get(key)
            if not raw:
                continue
            try:
                parsed = parsedate_to_datetime(raw)
            except (TypeError, ValueError):
                parsed = self._parse_timestamp(raw)
            if parsed is None:
                continue
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        return None
