# Services package
from feedcrawler.services.data_service import DataService
from feedcrawler.services.ledger import DeliveryLedger, diff_new, record_sent
from feedcrawler.services.notifier import Notifier
from feedcrawler.services.scheduler import RunCoordinator, ScheduleHandle
from feedcrawler.services.snapshot import SnapshotStore

__all__ = [
    "DataService",
    "DeliveryLedger",
    "diff_new",
    "record_sent",
    "Notifier",
    "RunCoordinator",
    "ScheduleHandle",
    "SnapshotStore",
]
