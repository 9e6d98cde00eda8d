"""Notification channels.

Each channel renders a batch of items and posts it to one destination.
send() raises on failure; the notifier turns exceptions into ChannelResults.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Sequence

import httpx

from feedcrawler.core.config import Settings
from feedcrawler.core.logging import get_logger
from feedcrawler.schemas.items import Item
from .formatter import format_message, format_slack_blocks

log = get_logger("delivery.channels")

DISCORD_CONTENT_LIMIT = 2000


class Channel(ABC):
    """Abstract base class for delivery channels."""

    name: str

    def __init__(self, max_items: int = 10, description_length: int = 100):
        self.max_items = max_items
        self.description_length = description_length

    @abstractmethod
    async def send(self, items: Sequence[Item]) -> None:
        """Deliver items; raise on any failure."""

    def render(self, items: Sequence[Item]) -> str:
        message = format_message(items, self.max_items, self.description_length)
        if message is None:
            raise ValueError("No items to send")
        return message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class WebhookChannel(Channel):
    """Posts a JSON payload to an incoming-webhook URL."""

    def __init__(self, webhook_url: str, timeout: float = 10.0, **kwargs: Any):
        super().__init__(**kwargs)
        self.webhook_url = webhook_url
        self.timeout = timeout

    @abstractmethod
    def payload(self, items: Sequence[Item]) -> dict[str, Any]:
        ...

    async def send(self, items: Sequence[Item]) -> None:
        body = self.payload(items)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(self.webhook_url, json=body)
            resp.raise_for_status()
        log.info(f"Delivered {len(items)} items to {self.name}")


class DiscordChannel(WebhookChannel):
    name = "discord"

    def payload(self, items: Sequence[Item]) -> dict[str, Any]:
        content = self.render(items)
        if len(content) > DISCORD_CONTENT_LIMIT:
            content = content[: DISCORD_CONTENT_LIMIT - 3] + "..."
        return {"content": content, "username": "Frontend News Bot"}


class SlackChannel(WebhookChannel):
    name = "slack"

    def payload(self, items: Sequence[Item]) -> dict[str, Any]:
        if not items:
            raise ValueError("No items to send")
        return format_slack_blocks(items, self.max_items)


class KakaoChannel(WebhookChannel):
    name = "kakao"

    def payload(self, items: Sequence[Item]) -> dict[str, Any]:
        return {"text": self.render(items), "username": "Frontend Docs Bot"}


class ConsoleChannel(Channel):
    """Writes the rendered message to the log (development aid)."""

    name = "console"

    async def send(self, items: Sequence[Item]) -> None:
        log.info("Console delivery:\n" + self.render(items))


def build_channels(config: Settings) -> List[Channel]:
    """Channels whose destination is configured, in a fixed order."""
    common = {
        "max_items": config.MAX_MESSAGE_ITEMS,
        "description_length": config.MESSAGE_DESCRIPTION_LENGTH,
    }
    timeout = config.CHANNEL_TIMEOUT_SECONDS
    channels: List[Channel] = []

    if config.DISCORD_WEBHOOK_URL:
        channels.append(DiscordChannel(config.DISCORD_WEBHOOK_URL, timeout=timeout, **common))
    if config.SLACK_WEBHOOK_URL:
        channels.append(SlackChannel(config.SLACK_WEBHOOK_URL, timeout=timeout, **common))
    if config.KAKAO_WEBHOOK_URL:
        channels.append(KakaoChannel(config.KAKAO_WEBHOOK_URL, timeout=timeout, **common))
    if config.console_channel_enabled:
        channels.append(ConsoleChannel(**common))

    return channels
