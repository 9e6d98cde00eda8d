"""JSON document storage tests"""

from feedcrawler.core.storage import JsonStore


class TestJsonStore:
    """Test whole-document reads and atomic writes"""

    def test_write_then_read(self, store):
        """Documents round-trip with unicode preserved"""
        store.write("articles", {"source": "토스 기술블로그", "count": 2})
        assert store.read("articles") == {"source": "토스 기술블로그", "count": 2}

    def test_read_missing_returns_none(self, store):
        """Missing documents read as None"""
        assert store.read("nonexistent") is None

    def test_read_corrupt_returns_none(self, store):
        """Invalid JSON reads as None instead of raising"""
        store.data_dir.mkdir(parents=True)
        store.path_for("last-run").write_text("{not json", encoding="utf-8")
        assert store.read("last-run") is None

    def test_write_leaves_no_temp_files(self, store):
        """Temporary files are renamed into place"""
        store.write("last-run", {"a": 1})
        store.write("last-run", {"a": 2})
        files = sorted(p.name for p in store.data_dir.iterdir())
        assert files == ["last-run.json"]
        assert store.read("last-run") == {"a": 2}

    def test_delete(self, store):
        """Deleting removes the document and tolerates repeats"""
        store.write("articles", [])
        store.delete("articles")
        store.delete("articles")
        assert store.read("articles") is None

    def test_creates_data_dir(self, tmp_path):
        """The data directory is created on first write"""
        nested = JsonStore(tmp_path / "a" / "b")
        nested.write("doc", {"ok": True})
        assert (tmp_path / "a" / "b" / "doc.json").exists()
