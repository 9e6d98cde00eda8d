"""Latest aggregation snapshot storage."""

from __future__ import annotations

import asyncio
from typing import List

from pydantic import ValidationError

from feedcrawler.core.config import settings
from feedcrawler.core.logging import get_logger
from feedcrawler.core.storage import JsonStore
from feedcrawler.schemas.items import Item, Snapshot

log = get_logger("snapshot")

SNAPSHOT_DOCUMENT = "articles"


class SnapshotStore:
    """Overwrites the snapshot wholesale on every run."""

    def __init__(self, store: JsonStore | None = None):
        self.store = store or JsonStore(settings.DATA_DIR)

    def read(self) -> Snapshot | None:
        raw = self.store.read(SNAPSHOT_DOCUMENT)
        if raw is None:
            return None
        try:
            return Snapshot.model_validate(raw)
        except ValidationError as exc:
            log.warning(f"Snapshot is malformed, ignoring it: {exc.error_count()} errors")
            return None

    async def load(self) -> Snapshot | None:
        return await asyncio.to_thread(self.read)

    async def save(self, items: List[Item]) -> bool:
        snapshot = Snapshot.from_items(items)
        payload = snapshot.model_dump(mode="json", by_alias=True)
        try:
            await asyncio.to_thread(self.store.write, SNAPSHOT_DOCUMENT, payload)
        except OSError as exc:
            log.error(f"Failed to save snapshot: {exc}")
            return False
        return True
