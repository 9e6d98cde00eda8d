"""Aggregation tests"""

from datetime import timedelta

import pytest

from feedcrawler.ingestion.runner import Aggregator, is_valid_url, matches_keywords
from feedcrawler.schemas.items import Item
from feedcrawler.tests.fakes import BASE_TIME, FailingSource, StaticSource, make_item

KEYWORDS = ["react", "css"]


def aggregator(*sources):
    return Aggregator(sources=list(sources), keywords=KEYWORDS, request_delay=0)


class TestCrawlAll:
    """Test combining sources into one candidate list"""

    @pytest.mark.asyncio
    async def test_duplicates_keep_first_occurrence(self):
        """The same URL from two sources is kept once, from the earlier source"""
        first = StaticSource("First", [make_item("shared", source="First")])
        second = StaticSource("Second", [make_item("shared", source="Second"), make_item("other", source="Second")])

        items = await aggregator(first, second).crawl_all()

        keys = [i.key for i in items]
        assert len(keys) == len(set(keys))
        shared = next(i for i in items if i.url.endswith("/shared"))
        assert shared.source == "First"

    @pytest.mark.asyncio
    async def test_malformed_items_excluded(self):
        """Items with empty title or unusable URL never reach the output"""
        source = StaticSource(
            "Mixed",
            [
                make_item("ok"),
                make_item("no-title", title="   "),
                make_item("bad-url", url="not a url"),
                make_item("ftp", url="ftp://example.com/react"),
                make_item("also-ok", hours_ago=3),
            ],
        )
        agg = aggregator(source)
        items = await agg.crawl_all()

        assert [i.url for i in items] == ["https://example.com/ok", "https://example.com/also-ok"]
        assert agg.get_metrics().articles_found == 2

    @pytest.mark.asyncio
    async def test_keyword_filter(self):
        """Only items mentioning a keyword in title, description or tags are kept"""
        source = StaticSource(
            "Mixed",
            [
                make_item("title", title="Modern CSS layouts", tags=()),
                make_item("desc", title="Weekly notes", description="Lots of React news", tags=()),
                make_item("tag", title="Weekly notes 2", tags=("React",)),
                make_item("none", title="Kubernetes operators", tags=("devops",)),
            ],
        )
        agg = aggregator(source)
        items = await agg.crawl_all()

        assert {i.url.rsplit("/", 1)[1] for i in items} == {"title", "desc", "tag"}
        metrics = agg.get_metrics()
        assert metrics.articles_found == 4
        assert metrics.articles_filtered == 3

    @pytest.mark.asyncio
    async def test_sorted_newest_first(self):
        """Output is ordered by publication time descending across sources"""
        a = StaticSource("A", [make_item("a-old", hours_ago=5), make_item("a-new", hours_ago=0)])
        b = StaticSource("B", [make_item("b-mid", hours_ago=2)])

        items = await aggregator(a, b).crawl_all()

        assert [i.url.rsplit("/", 1)[1] for i in items] == ["a-new", "b-mid", "a-old"]

    @pytest.mark.asyncio
    async def test_naive_timestamps_sort_with_aware_ones(self):
        """A source yielding naive datetimes is read as UTC and sorts with the rest"""
        naive = Item(
            title="React article naive",
            url="https://example.com/naive",
            published_at=(BASE_TIME - timedelta(hours=1)).replace(tzinfo=None),
            tags=("react",),
            source="Naive",
        )
        agg = aggregator(StaticSource("Naive", [naive]), StaticSource("Aware", [make_item("aware")]))

        items = await agg.crawl_all()

        assert [i.url.rsplit("/", 1)[1] for i in items] == ["aware", "naive"]
        assert items[1].published_at == BASE_TIME - timedelta(hours=1)
        assert agg.get_metrics().sites_failed == 0

    @pytest.mark.asyncio
    async def test_failing_source_is_isolated(self):
        """One failing source contributes nothing; the others still count"""
        good = StaticSource("Good", [make_item("g1")])
        agg = aggregator(FailingSource("Broken"), good)

        items = await agg.crawl_all()

        assert [i.url for i in items] == ["https://example.com/g1"]
        metrics = agg.get_metrics()
        assert metrics.sites_processed == 2
        assert metrics.sites_succeeded == 1
        assert metrics.sites_failed == 1
        assert good.calls == 1

    @pytest.mark.asyncio
    async def test_all_sources_failing_returns_empty(self):
        """Total failure is an empty list, not an exception"""
        agg = aggregator(FailingSource("A"), FailingSource("B"))
        assert await agg.crawl_all() == []
        assert agg.get_metrics().sites_failed == 2

    @pytest.mark.asyncio
    async def test_metrics_reset_each_run(self):
        """Counters describe only the latest run"""
        agg = aggregator(StaticSource("A", [make_item("a")]))
        await agg.crawl_all()
        await agg.crawl_all()
        metrics = agg.get_metrics()
        assert metrics.sites_processed == 1
        assert metrics.articles_found == 1
        assert metrics.memory_used_mb >= 0

    @pytest.mark.asyncio
    async def test_delay_only_between_sources(self, monkeypatch):
        """The politeness pause runs between sources, never after the last"""
        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        monkeypatch.setattr("feedcrawler.ingestion.runner.asyncio.sleep", fake_sleep)
        agg = Aggregator(
            sources=[StaticSource(n, []) for n in ("A", "B", "C")],
            keywords=KEYWORDS,
            request_delay=1.5,
        )
        await agg.crawl_all()
        assert sleeps == [1.5, 1.5]


class TestHelpers:
    """Test single-site crawls and filter helpers"""

    @pytest.mark.asyncio
    async def test_test_site(self):
        """Only the named source is crawled"""
        a = StaticSource("A", [make_item("a")])
        b = StaticSource("B", [make_item("b")])
        agg = aggregator(a, b)

        items = await agg.test_site("B")

        assert [i.url for i in items] == ["https://example.com/b"]
        assert a.calls == 0

    @pytest.mark.asyncio
    async def test_test_site_unknown(self):
        assert await aggregator().test_site("Nope") == []

    def test_filter_by_date_range(self):
        items = [make_item("new", hours_ago=0), make_item("old", hours_ago=48)]
        result = Aggregator.filter_by_date_range(items, BASE_TIME - timedelta(hours=24), BASE_TIME)
        assert [i.url for i in result] == ["https://example.com/new"]

    def test_filter_by_keywords_case_insensitive(self):
        items = [make_item("a", title="SVELTE stores", tags=()), make_item("b", title="Go generics", tags=())]
        assert len(Aggregator.filter_by_keywords(items, ["svelte"])) == 1

    def test_matches_korean_keyword(self):
        item = make_item("k", title="프론트엔드 성능 개선기", tags=())
        assert matches_keywords(item, ["프론트엔드"])

    def test_is_valid_url(self):
        assert is_valid_url("https://example.com/a")
        assert is_valid_url("http://example.com")
        assert not is_valid_url("")
        assert not is_valid_url("/relative/path")
        assert not is_valid_url("javascript:alert(1)")
