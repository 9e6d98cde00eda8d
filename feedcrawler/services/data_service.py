"""Data Service - read-only projections over the snapshot and ledger."""

from __future__ import annotations

import math
from typing import List, Optional

from feedcrawler.core.config import Settings, settings
from feedcrawler.core.logging import get_logger
from feedcrawler.schemas.api import ArticlesPage, DashboardStatus, WebhookStatus
from feedcrawler.schemas.items import Item, Ledger
from feedcrawler.services.ledger import DeliveryLedger
from feedcrawler.services.snapshot import SnapshotStore

log = get_logger("data_service")


class DataService:
    """Handles all query operations - reads stored documents only, no writes."""

    def __init__(
        self,
        snapshots: Optional[SnapshotStore] = None,
        ledger: Optional[DeliveryLedger] = None,
        config: Optional[Settings] = None,
    ):
        self.snapshots = snapshots or SnapshotStore()
        self.ledger = ledger or DeliveryLedger()
        self.config = config or settings

    # -------------------------------------------------------------------------
    # Snapshot Queries
    # -------------------------------------------------------------------------
    def get_articles(
        self,
        page: int = 1,
        limit: int = 20,
        source: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> ArticlesPage:
        """Page through the latest snapshot, optionally filtered."""
        snapshot = self.snapshots.read()
        items: List[Item] = list(snapshot.items) if snapshot else []

        if source:
            needle = source.lower()
            items = [item for item in items if needle in item.source.lower()]
        if keyword:
            needle = keyword.lower()
            items = [
                item
                for item in items
                if needle in item.title.lower() or needle in item.description.lower()
            ]

        start = (page - 1) * limit
        end = start + limit
        return ArticlesPage(
            articles=items[start:end],
            total_count=len(items),
            current_page=page,
            total_pages=math.ceil(len(items) / limit) if limit else 0,
            has_next_page=end < len(items),
            has_prev_page=start > 0,
        )

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------
    async def get_dashboard_status(self, is_running: bool = False) -> DashboardStatus:
        ledger: Ledger = await self.ledger.load()
        snapshot = await self.snapshots.load()

        return DashboardStatus(
            is_running=is_running,
            last_run_time=ledger.last_run_time,
            total_sent_articles=len(ledger.sent_items),
            last_sent_count=ledger.last_sent_count,
            recent_articles=list(snapshot.items) if snapshot else [],
            total_articles=snapshot.total_count if snapshot else 0,
            last_updated=snapshot.last_updated if snapshot else None,
            webhook_status=WebhookStatus(
                discord=bool(self.config.DISCORD_WEBHOOK_URL),
                slack=bool(self.config.SLACK_WEBHOOK_URL),
                kakao=bool(self.config.KAKAO_WEBHOOK_URL),
            ),
        )
