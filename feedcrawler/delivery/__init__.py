from feedcrawler.delivery.channels import (
    Channel,
    ConsoleChannel,
    DiscordChannel,
    KakaoChannel,
    SlackChannel,
    build_channels,
)
from feedcrawler.delivery.formatter import format_message, format_slack_blocks

__all__ = [
    "Channel",
    "ConsoleChannel",
    "DiscordChannel",
    "KakaoChannel",
    "SlackChannel",
    "build_channels",
    "format_message",
    "format_slack_blocks",
]
