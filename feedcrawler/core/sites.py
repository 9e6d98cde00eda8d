"""Crawl targets and the topical keyword set."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from feedcrawler.core.config import settings
from feedcrawler.schemas.sources import (
    ApiSourceDescriptor,
    FeedSourceDescriptor,
    SourceDescriptor,
    source_list_adapter,
)

INTERNATIONAL_SITES: list[SourceDescriptor] = [
    ApiSourceDescriptor(
        name="Dev.to",
        endpoint="https://dev.to/api/articles",
        params={"tag": "frontend,javascript,react,vue,nextjs", "per_page": 20},
    ),
    FeedSourceDescriptor(name="CSS-Tricks", endpoint="https://css-tricks.com/feed/"),
    FeedSourceDescriptor(name="Smashing Magazine", endpoint="https://www.smashingmagazine.com/feed/"),
    FeedSourceDescriptor(name="Frontend Focus", endpoint="https://frontendfoc.us/rss"),
    FeedSourceDescriptor(name="A List Apart", endpoint="https://alistapart.com/feed/"),
]

DOMESTIC_SITES: list[SourceDescriptor] = [
    FeedSourceDescriptor(name="카카오 기술 블로그", endpoint="https://tech.kakao.com/feed/"),
    FeedSourceDescriptor(name="우아한형제들 기술블로그", endpoint="https://techblog.woowahan.com/feed/"),
    FeedSourceDescriptor(name="라인 기술블로그", endpoint="https://engineering.linecorp.com/ko/feed/"),
    FeedSourceDescriptor(name="NHN 기술블로그", endpoint="https://meetup.nhncloud.com/rss"),
    FeedSourceDescriptor(name="토스 기술블로그", endpoint="https://toss.tech/rss.xml"),
]

FRONTEND_KEYWORDS: list[str] = [
    # Stacks
    "react", "vue", "angular", "svelte", "nextjs", "nuxt", "gatsby",
    "typescript", "javascript", "css", "scss", "tailwind", "styled-components",
    # Tooling
    "webpack", "vite", "rollup", "babel", "eslint", "prettier", "jest",
    "cypress", "testing-library", "storybook",
    # Concepts
    "frontend", "ui", "ux", "responsive", "accessibility", "performance",
    "seo", "ssr", "spa", "pwa", "web-components", "micro-frontend",
    # State management
    "redux", "zustand", "recoil", "context", "state management",
    # Styling
    "emotion", "chakra", "material-ui", "ant-design",
    # Korean
    "프론트엔드", "리액트", "뷰", "타입스크립트", "웹개발", "사용자경험",
]


def _load_sources_file(path: Path) -> list[SourceDescriptor]:
    raw: list[dict[str, Any]] = json.loads(path.read_text(encoding="utf-8"))
    for entry in raw:
        # "rss" is the historical kind name for feeds
        if entry.get("kind", entry.get("type")) == "rss":
            entry["kind"] = "feed"
        elif "kind" not in entry and "type" in entry:
            entry["kind"] = entry["type"]
        if "endpoint" not in entry and "url" in entry:
            entry["endpoint"] = entry["url"]
    return source_list_adapter.validate_python(raw)


def get_sources(sources_file: Optional[Path] = None) -> list[SourceDescriptor]:
    """Configured sources in declaration order (international first)."""
    path = sources_file or settings.SOURCES_FILE
    if path:
        return _load_sources_file(Path(path))
    return [*INTERNATIONAL_SITES, *DOMESTIC_SITES]


def get_keywords() -> list[str]:
    return list(settings.KEYWORDS) if settings.KEYWORDS else list(FRONTEND_KEYWORDS)
