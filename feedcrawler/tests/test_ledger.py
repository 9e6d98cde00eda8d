"""Delivery ledger tests"""

import json

import pytest

from feedcrawler.schemas.items import Ledger
from feedcrawler.services.ledger import DeliveryLedger, diff_new, record_sent
from feedcrawler.tests.fakes import make_item


class TestDiffNew:
    """Test detection of never-delivered items"""

    def test_empty_ledger_returns_everything(self, three_items):
        """Nothing has been sent yet"""
        assert diff_new(three_items, Ledger()) == three_items

    def test_excludes_sent_items_and_keeps_order(self, three_items):
        """Result is an ordered subset disjoint from the ledger"""
        ledger = Ledger(sent_items=[three_items[1]])
        result = diff_new(three_items, ledger)

        assert result == [three_items[0], three_items[2]]
        assert not {i.key for i in result} & ledger.sent_keys()

    def test_identity_is_url(self):
        """Items with the same URL are the same item regardless of title"""
        sent = make_item("a", title="Old title")
        ledger = Ledger(sent_items=[sent])
        assert diff_new([make_item("a", title="New title")], ledger) == []

    def test_title_is_identity_when_url_empty(self):
        """An empty URL falls back to the title as identity"""
        ledger = Ledger(sent_items=[make_item("x", title="Untitled link", url="")])
        candidates = [make_item("y", title="Untitled link", url=""), make_item("z", title="Other", url="")]
        assert [i.title for i in diff_new(candidates, ledger)] == ["Other"]

    def test_does_not_mutate_ledger(self, three_items):
        """diff_new is pure"""
        ledger = Ledger(sent_items=[three_items[0]])
        before = ledger.model_dump()
        diff_new(three_items, ledger)
        assert ledger.model_dump() == before


class TestRecordSent:
    """Test ledger updates after delivery"""

    def test_prepends_new_items(self, three_items):
        """Newly sent items go to the front"""
        ledger = Ledger(sent_items=[make_item("old")])
        updated = record_sent(three_items, ledger, "manual")

        assert [i.key for i in updated.sent_items] == [
            "https://example.com/u1",
            "https://example.com/u2",
            "https://example.com/u3",
            "https://example.com/old",
        ]
        assert updated.last_sent_count == 3
        assert updated.last_job_kind == "manual"
        assert updated.last_run_time is not None

    def test_cap_evicts_oldest(self):
        """sent_items never exceeds the cap; oldest entries drop first"""
        ledger = Ledger()
        for batch in range(5):
            items = [make_item(f"b{batch}-{n}") for n in range(3)]
            ledger = record_sent(items, ledger, "scheduled", cap=10)
            assert len(ledger.sent_items) <= 10

        keys = [i.key for i in ledger.sent_items]
        assert keys[0] == "https://example.com/b4-0"
        assert "https://example.com/b0-0" not in keys
        assert len(keys) == 10

    def test_empty_batch_only_touches_run_metadata(self, three_items):
        """Recording nothing keeps items and counts"""
        ledger = Ledger(sent_items=three_items, last_sent_count=3, last_job_kind="manual")
        updated = record_sent([], ledger, "scheduled")

        assert updated.sent_items == ledger.sent_items
        assert updated.last_sent_count == 3
        assert updated.last_job_kind == "scheduled"
        assert updated.last_run_time is not None

    def test_original_ledger_unchanged(self, three_items):
        """record_sent returns a new ledger"""
        ledger = Ledger()
        record_sent(three_items, ledger, "manual")
        assert ledger.sent_items == []


class TestDeliveryLedger:
    """Test loading and saving the ledger document"""

    @pytest.mark.asyncio
    async def test_load_missing_returns_default(self, ledger):
        """No file means nothing was ever sent"""
        loaded = await ledger.load()
        assert loaded.sent_items == []
        assert loaded.last_run_time is None

    @pytest.mark.asyncio
    async def test_load_corrupt_returns_default(self, ledger, store):
        """Unreadable or malformed ledgers degrade to empty"""
        store.data_dir.mkdir(parents=True)
        store.path_for("last-run").write_text("[]]", encoding="utf-8")
        assert (await ledger.load()).sent_items == []

        store.path_for("last-run").write_text(json.dumps({"sentItems": "nope"}), encoding="utf-8")
        assert (await ledger.load()).sent_items == []

    @pytest.mark.asyncio
    async def test_save_uses_camel_case(self, ledger, store, three_items):
        """The stored document uses camelCase keys"""
        updated = ledger.record_sent(three_items, await ledger.load(), "manual")
        assert await ledger.save(updated) is True

        raw = store.read("last-run")
        assert set(raw) == {"lastRunTime", "sentItems", "lastSentCount", "lastJobKind"}
        assert raw["sentItems"][0]["publishedAt"].startswith("2026-10-01T09:00:00")

        reloaded = await ledger.load()
        assert reloaded.sent_items == three_items

    @pytest.mark.asyncio
    async def test_save_failure_returns_false(self, ledger, store, tmp_path):
        """A failed write is reported, not raised"""
        blocker = tmp_path / "blocked"
        blocker.write_text("file, not a directory")
        store.data_dir = blocker
        assert await ledger.save(Ledger()) is False

    @pytest.mark.asyncio
    async def test_load_applies_cap(self, store):
        """A ledger written under a larger cap is trimmed to the newest entries"""
        items = [make_item(f"n{n}") for n in range(5)]
        await DeliveryLedger(store, cap=10).save(Ledger(sent_items=items, last_sent_count=5))

        loaded = await DeliveryLedger(store, cap=3).load()

        assert [i.key for i in loaded.sent_items] == [i.key for i in items[:3]]
        assert loaded.last_sent_count == 5
