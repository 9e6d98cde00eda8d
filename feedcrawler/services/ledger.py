"""Delivery ledger: which items have ever been sent."""

from __future__ import annotations

import asyncio
from typing import Iterable, List

from pydantic import ValidationError

from feedcrawler.core.config import settings
from feedcrawler.core.logging import get_logger
from feedcrawler.core.storage import JsonStore
from feedcrawler.schemas.items import Item, Ledger, utc_now

log = get_logger("ledger")

LEDGER_DOCUMENT = "last-run"


def diff_new(candidates: Iterable[Item], ledger: Ledger) -> List[Item]:
    """Candidates whose identity key is not in the ledger, in candidate order."""
    sent = ledger.sent_keys()
    return [item for item in candidates if item.key not in sent]


def record_sent(
    newly_sent: List[Item],
    ledger: Ledger,
    job_kind: str,
    cap: int = 1000,
) -> Ledger:
    """Return a new ledger with newly_sent prepended and the oldest entries evicted.

    An empty batch only touches last_run_time and last_job_kind.
    """
    return Ledger(
        last_run_time=utc_now(),
        sent_items=[*newly_sent, *ledger.sent_items][:cap],
        last_sent_count=len(newly_sent) if newly_sent else ledger.last_sent_count,
        last_job_kind=job_kind,
    )


class DeliveryLedger:
    """Loads and saves the ledger document.

    load() never raises: a missing or corrupt ledger reads as "nothing ever sent".
    save() logs and reports failure instead of raising, since a missed write only
    degrades the next run's dedup.
    """

    def __init__(self, store: JsonStore | None = None, cap: int | None = None):
        self.store = store or JsonStore(settings.DATA_DIR)
        self.cap = cap if cap is not None else settings.MAX_STORED_ITEMS

    async def load(self) -> Ledger:
        raw = await asyncio.to_thread(self.store.read, LEDGER_DOCUMENT)
        if raw is None:
            return Ledger()
        try:
            ledger = Ledger.model_validate(raw)
        except ValidationError as exc:
            log.warning(f"Ledger is malformed, starting from empty: {exc.error_count()} errors")
            return Ledger()
        if len(ledger.sent_items) > self.cap:
            # The cap may have been lowered since the document was written
            ledger = ledger.model_copy(update={"sent_items": ledger.sent_items[: self.cap]})
        return ledger

    def diff_new(self, candidates: Iterable[Item], ledger: Ledger) -> List[Item]:
        return diff_new(candidates, ledger)

    def record_sent(self, newly_sent: List[Item], ledger: Ledger, job_kind: str) -> Ledger:
        return record_sent(newly_sent, ledger, job_kind, cap=self.cap)

    async def save(self, ledger: Ledger) -> bool:
        payload = ledger.model_dump(mode="json", by_alias=True)
        try:
            await asyncio.to_thread(self.store.write, LEDGER_DOCUMENT, payload)
        except OSError as exc:
            log.error(f"Failed to save ledger: {exc}")
            return False
        log.debug(f"Ledger saved ({len(ledger.sent_items)} sent items)")
        return True
