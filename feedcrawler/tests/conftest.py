"""Pytest fixtures for feedcrawler tests."""

from typing import List

import pytest

from feedcrawler.core.storage import JsonStore
from feedcrawler.schemas.items import Item
from feedcrawler.services.ledger import DeliveryLedger
from feedcrawler.services.snapshot import SnapshotStore
from feedcrawler.tests.fakes import make_item


@pytest.fixture
def store(tmp_path) -> JsonStore:
    """JSON store rooted in a temporary data directory."""
    return JsonStore(tmp_path / "data")


@pytest.fixture
def ledger(store) -> DeliveryLedger:
    return DeliveryLedger(store, cap=1000)


@pytest.fixture
def snapshots(store) -> SnapshotStore:
    return SnapshotStore(store)


@pytest.fixture
def three_items() -> List[Item]:
    """u1..u3, newest first."""
    return [make_item("u1", hours_ago=0), make_item("u2", hours_ago=1), make_item("u3", hours_ago=2)]
