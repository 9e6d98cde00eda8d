"""JSON document storage for the ledger and snapshot."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from feedcrawler.core.logging import get_logger

log = get_logger("storage")


class JsonStore:
    """Reads and writes whole JSON documents under a data directory.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so readers see either the old or the new document.
    """

    def __init__(self, data_dir: str | Path = "data"):
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def read(self, name: str) -> Optional[Any]:
        """Load a document, or None if it is missing or unreadable."""
        path = self.path_for(name)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            log.warning(f"Could not read {path}: {exc}")
            return None

    def write(self, name: str, data: Any) -> None:
        """Atomically replace a document; raises OSError on failure."""
        path = self.path_for(name)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, name: str) -> None:
        self.path_for(name).unlink(missing_ok=True)
