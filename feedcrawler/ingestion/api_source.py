"""JSON API source implementation (Dev.to article listing shape)."""

from __future__ import annotations

from typing import Any, List

import httpx
from pydantic import TypeAdapter

from feedcrawler.schemas.items import Item, utc_now
from feedcrawler.schemas.sources import ApiSourceDescriptor, DevToArticle
from .base import BaseSource

_records = TypeAdapter(list[DevToArticle])


class ApiSource(BaseSource):
    """Fetches an article listing from a paginated JSON API."""

    def __init__(self, descriptor: ApiSourceDescriptor, **kwargs: Any):
        super().__init__(**kwargs)
        self.descriptor = descriptor
        self.name = descriptor.name

    async def fetch(self) -> List[Item]:
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            resp = await client.get(
                self.descriptor.endpoint,
                params=self.descriptor.params,
                headers=self.headers,
            )
            resp.raise_for_status()
            data = resp.json()

        records = _records.validate_python(data)
        fetched_at = utc_now()
        return [self._to_item(record, fetched_at) for record in records]

    def _to_item(self, record: DevToArticle, fetched_at) -> Item:
        published = (
            self._parse_timestamp(record.published_at)
            or self._parse_timestamp(record.created_at)
            or fetched_at
        )
        return Item(
            title=record.title,
            url=record.link(self.descriptor.url_field, self.descriptor.fallback_url_field),
            description=record.description or "",
            published_at=published,
            tags=tuple(record.tag_list),
            source=self.name,
        )
