"""Fan-out of new items to every configured notification channel."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from feedcrawler.core.config import settings
from feedcrawler.core.logging import get_logger
from feedcrawler.delivery.channels import Channel, build_channels
from feedcrawler.schemas.items import ChannelResult, Item, utc_now

log = get_logger("notifier")


def sample_items() -> List[Item]:
    now = utc_now()
    return [
        Item(
            title="What's new in React 19",
            url="https://example.com/react-19",
            description="A tour of the features added in React 19.",
            published_at=now,
            tags=("react", "javascript"),
            source="Test site",
        ),
        Item(
            title="Next.js 15 release notes",
            url="https://example.com/nextjs-15",
            description="The main changes and improvements in Next.js 15.",
            published_at=now,
            tags=("nextjs", "react"),
            source="Test site",
        ),
    ]


class Notifier:
    """Delivers a batch to each configured channel independently.

    Channels are read once at construction. One channel failing never stops
    another from being attempted; all attempts run concurrently.
    """

    def __init__(self, channels: Optional[Sequence[Channel]] = None):
        self.channels = list(channels) if channels is not None else build_channels(settings)

    @property
    def configured_channels(self) -> List[str]:
        return [channel.name for channel in self.channels]

    async def send_all(self, items: Sequence[Item]) -> List[ChannelResult]:
        if not items:
            log.info("No new items to deliver")
            return []
        if not self.channels:
            log.warning("No notification channels configured; nothing delivered")
            return []

        log.info(f"Delivering {len(items)} items to {', '.join(self.configured_channels)}")
        results = await asyncio.gather(*(self._deliver(channel, items) for channel in self.channels))

        succeeded = [r.channel for r in results if r.success]
        failed = [f"{r.channel}: {r.error}" for r in results if not r.success]
        if succeeded:
            log.info(f"Delivered via {len(succeeded)} channel(s): {', '.join(succeeded)}")
        if failed:
            log.warning(f"Delivery failed on {len(failed)} channel(s): {'; '.join(failed)}")
        return list(results)

    async def _deliver(self, channel: Channel, items: Sequence[Item]) -> ChannelResult:
        try:
            await channel.send(items)
        except Exception as exc:  # noqa: BLE001
            return ChannelResult(channel=channel.name, success=False, error=str(exc) or exc.__class__.__name__)
        return ChannelResult(channel=channel.name, success=True)

    async def send_test_message(self) -> List[ChannelResult]:
        log.info("Sending test message")
        return await self.send_all(sample_items())

    @staticmethod
    def any_succeeded(results: Sequence[ChannelResult]) -> bool:
        return any(result.success for result in results)
