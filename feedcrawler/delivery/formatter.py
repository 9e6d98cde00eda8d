"""Message rendering for notification channels."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional, Sequence
from zoneinfo import ZoneInfo

from feedcrawler.core.config import settings
from feedcrawler.schemas.items import Item

HEADER_TEMPLATE = "🚀 **New frontend articles** ({date})"
OVERFLOW_TEMPLATE = "... and **{count}** more articles."


def local_today(timezone_name: Optional[str] = None) -> date:
    """Calendar date in the schedule timezone, not the host clock."""
    return datetime.now(ZoneInfo(timezone_name or settings.SCHEDULE_TIMEZONE)).date()


def shorten(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def format_message(
    items: Sequence[Item],
    max_items: int = 10,
    description_length: int = 100,
    today: Optional[date] = None,
) -> Optional[str]:
    """Markdown text listing up to max_items items plus a count of the rest."""
    if not items:
        return None

    today = today or local_today()
    lines: List[str] = [HEADER_TEMPLATE.format(date=today.isoformat()), ""]

    for index, item in enumerate(items[:max_items], start=1):
        lines.append(f"**{index}. {item.title}**")
        lines.append(f"📌 {item.source}")
        lines.append(f"🔗 {item.url}")
        if item.description:
            lines.append(f"💬 {shorten(item.description, description_length)}")
        lines.append("")

    remaining = len(items) - max_items
    if remaining > 0:
        lines.append(OVERFLOW_TEMPLATE.format(count=remaining))

    return "\n".join(lines).rstrip() + "\n"


def format_slack_blocks(
    items: Sequence[Item],
    max_items: int = 10,
    today: Optional[date] = None,
) -> dict[str, Any]:
    """Slack Block Kit payload: header, date, divider, one section per item, overflow."""
    today = today or local_today()
    title = f"🚀 {len(items)} new frontend articles found!"

    blocks: List[dict[str, Any]] = [
        {"type": "header", "text": {"type": "plain_text", "text": title}},
        {"type": "section", "text": {"type": "mrkdwn", "text": f"Collected {today.isoformat()}"}},
        {"type": "divider"},
    ]
    for index, item in enumerate(items[:max_items], start=1):
        blocks.append(
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*{index}. {item.title}*\n📌 {item.source}\n🔗 <{item.url}|Read more>",
                },
            }
        )

    remaining = len(items) - max_items
    if remaining > 0:
        blocks.append(
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"... and *{remaining}* more articles."},
            }
        )

    return {"text": title, "blocks": blocks}
