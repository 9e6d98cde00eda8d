from feedcrawler.ingestion.api_source import ApiSource
from feedcrawler.ingestion.base import BaseSource, FetchResult
from feedcrawler.ingestion.feed_source import FeedSource
from feedcrawler.ingestion.runner import Aggregator, build_source

__all__ = ["ApiSource", "BaseSource", "FetchResult", "FeedSource", "Aggregator", "build_source"]
