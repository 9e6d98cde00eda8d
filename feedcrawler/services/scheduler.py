"""Run coordination: one crawl at a time, manual and scheduled triggers."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime, time as dtime, timedelta, timezone
from typing import Dict, List, Literal, Optional, Sequence
from zoneinfo import ZoneInfo

from feedcrawler.core.config import settings
from feedcrawler.core.logging import get_logger
from feedcrawler.ingestion.runner import Aggregator, memory_usage_mb
from feedcrawler.schemas.items import RunResult, ScheduledJobInfo, SchedulerStatus
from feedcrawler.services.ledger import DeliveryLedger
from feedcrawler.services.notifier import Notifier
from feedcrawler.services.snapshot import SnapshotStore

log = get_logger("scheduler")

JobKind = Literal["manual", "scheduled", "initial"]


def parse_time_of_day(value: str) -> dtime:
    hours, minutes = value.strip().split(":")
    return dtime(hour=int(hours), minute=int(minutes))


def next_occurrence(at: dtime, tz: ZoneInfo, after: datetime) -> datetime:
    """First wall-clock occurrence of `at` in `tz` strictly after `after`."""
    local = after.astimezone(tz)
    target = local.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
    if target <= local:
        target += timedelta(days=1)
    return target


@dataclass
class ScheduledJob:
    name: str
    at: dtime
    is_active: bool = True

    @property
    def schedule(self) -> str:
        return f"daily {self.at.strftime('%H:%M')}"

    def info(self) -> ScheduledJobInfo:
        return ScheduledJobInfo(name=self.name, schedule=self.schedule, is_active=self.is_active)


class ScheduleHandle:
    """Returned by start_scheduler(); cancel() stops the triggers it registered."""

    def __init__(self, coordinator: "RunCoordinator", generation: int):
        self._coordinator = coordinator
        self._generation = generation

    @property
    def active(self) -> bool:
        return self._coordinator._generation == self._generation and self._coordinator.is_scheduler_active

    def cancel(self) -> None:
        if self._coordinator._generation == self._generation:
            self._coordinator.stop_scheduler()


class RunCoordinator:
    """Owns the running flag and the periodic trigger registry.

    Every trigger goes through run_crawling_job(). A trigger arriving while a
    run is in progress is dropped with a skipped result, never queued.
    """

    def __init__(
        self,
        aggregator: Optional[Aggregator] = None,
        notifier: Optional[Notifier] = None,
        ledger: Optional[DeliveryLedger] = None,
        snapshots: Optional[SnapshotStore] = None,
        schedule_times: Optional[Sequence[str]] = None,
        timezone_name: Optional[str] = None,
        initial_delay: Optional[float] = None,
        stop_timeout: Optional[float] = None,
    ):
        self.aggregator = aggregator or Aggregator()
        self.notifier = notifier or Notifier()
        self.ledger = ledger or DeliveryLedger()
        self.snapshots = snapshots or SnapshotStore()
        self.schedule_times = list(schedule_times if schedule_times is not None else settings.SCHEDULE_TIMES)
        self.tz = ZoneInfo(timezone_name or settings.SCHEDULE_TIMEZONE)
        self.initial_delay = settings.INITIAL_RUN_DELAY_SECONDS if initial_delay is None else initial_delay
        self.stop_timeout = settings.STOP_TIMEOUT_SECONDS if stop_timeout is None else stop_timeout

        self._running = False
        self._idle = asyncio.Event()
        self._idle.set()
        self._jobs: List[ScheduledJob] = []
        self._timers: List[asyncio.Task] = []
        self._runs: set[asyncio.Task] = set()
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_scheduler_active(self) -> bool:
        return any(job.is_active for job in self._jobs)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------
    async def run_crawling_job(self, job_kind: str = "manual") -> RunResult:
        if self._running:
            log.info(f"[{job_kind}] Crawl already in progress; skipping")
            return RunResult(success=False, skipped=True, job_kind=job_kind, message="Already running")

        self._running = True
        self._idle.clear()
        started = time.perf_counter()
        log.info(f"[{job_kind}] Crawl job started")

        try:
            ledger = await self.ledger.load()
            items = await self.aggregator.crawl_all()
            new_items = self.ledger.diff_new(items, ledger)
            log.info(f"[{job_kind}] {len(new_items)} new of {len(items)} items")

            await self.snapshots.save(items)

            channels = []
            message_sent = False
            if new_items:
                channels = await self.notifier.send_all(new_items)
                message_sent = self.notifier.any_succeeded(channels)
                if message_sent:
                    updated = self.ledger.record_sent(new_items, ledger, job_kind)
                    await self.ledger.save(updated)
                    log.info(f"[{job_kind}] Recorded {len(new_items)} items as sent")
                elif not self.notifier.configured_channels:
                    log.warning(f"[{job_kind}] No channels configured; items remain undelivered")
                else:
                    log.error(f"[{job_kind}] Delivery failed on every channel")
            else:
                log.info(f"[{job_kind}] Nothing new to deliver")

            duration = round(time.perf_counter() - started, 2)
            log.info(f"[{job_kind}] Crawl job finished in {duration}s")
            return RunResult(
                success=True,
                job_kind=job_kind,
                total_articles=len(items),
                new_articles=len(new_items),
                message_sent=message_sent,
                duration=duration,
                message="Crawl completed",
                channels=channels,
                metrics=self.aggregator.get_metrics(),
            )
        except Exception as exc:  # noqa: BLE001
            log.exception(f"[{job_kind}] Crawl job failed: {exc}")
            return RunResult(
                success=False,
                job_kind=job_kind,
                duration=round(time.perf_counter() - started, 2),
                error=str(exc) or exc.__class__.__name__,
            )
        finally:
            self._running = False
            self._idle.set()

    async def manual_run(self) -> RunResult:
        log.info("Manual crawl requested")
        return await self.run_crawling_job("manual")

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------
    def start_scheduler(self) -> ScheduleHandle:
        """Register daily triggers (replacing any existing ones) and an initial run."""
        self.stop_scheduler()
        self._generation += 1

        self._jobs = [
            ScheduledJob(name=f"daily-{value.strip()}", at=parse_time_of_day(value))
            for value in self.schedule_times
        ]
        self._timers = [asyncio.create_task(self._timer_loop(job)) for job in self._jobs]
        if self.initial_delay >= 0:
            self._timers.append(asyncio.create_task(self._initial_run()))

        for job in self._jobs:
            log.info(f"Scheduled {job.name} ({job.schedule}, {self.tz.key})")
        return ScheduleHandle(self, self._generation)

    def stop_scheduler(self) -> None:
        """Cancel future triggers; an in-flight run is left to finish."""
        if not self._timers and not self._jobs:
            return
        log.info("Stopping scheduled jobs")
        for task in self._timers:
            task.cancel()
        for job in self._jobs:
            job.is_active = False
        self._timers = []
        self._jobs = []

    def toggle_schedule(self, name: str, enable: bool) -> bool:
        job = next((j for j in self._jobs if j.name == name), None)
        if job is None:
            log.error(f"Scheduled job not found: {name}")
            return False
        job.is_active = enable
        log.info(f"Scheduled job {name} {'enabled' if enable else 'paused'}")
        return True

    def get_scheduled_jobs(self) -> List[ScheduledJobInfo]:
        return [job.info() for job in self._jobs]

    async def _timer_loop(self, job: ScheduledJob) -> None:
        not_before = datetime.now(timezone.utc)
        while True:
            now = datetime.now(timezone.utc)
            target = next_occurrence(job.at, self.tz, max(now, not_before))
            await asyncio.sleep((target.astimezone(timezone.utc) - now).total_seconds())
            not_before = target.astimezone(timezone.utc) + timedelta(seconds=1)
            if job.is_active:
                log.info(f"Trigger fired: {job.name}")
                self._fire("scheduled")

    async def _initial_run(self) -> None:
        await asyncio.sleep(self.initial_delay)
        log.info("Initial crawl")
        self._fire("initial")

    def _fire(self, job_kind: str) -> None:
        # Runs are separate tasks so cancelling a timer never aborts a crawl
        task = asyncio.create_task(self.run_crawling_job(job_kind))
        self._runs.add(task)
        task.add_done_callback(self._runs.discard)

    # -------------------------------------------------------------------------
    # Status & teardown
    # -------------------------------------------------------------------------
    async def get_status(self) -> SchedulerStatus:
        ledger = await self.ledger.load()
        return SchedulerStatus(
            is_running=self._running,
            last_run_time=ledger.last_run_time,
            total_sent_articles=len(ledger.sent_items),
            last_sent_count=ledger.last_sent_count,
            last_job_kind=ledger.last_job_kind or "unknown",
            scheduled_jobs_count=len(self._jobs),
            is_scheduler_active=self.is_scheduler_active,
        )

    @staticmethod
    def get_memory_usage() -> Dict[str, float]:
        return {"max_rss_mb": memory_usage_mb()}

    async def cleanup(self) -> bool:
        """Stop scheduling and wait (bounded) for an in-flight run; True if idle."""
        log.info("Scheduler cleanup started")
        self.stop_scheduler()
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.stop_timeout

        # Fired runs may not have started yet, so wait on the tasks themselves
        if self._runs:
            _, pending = await asyncio.wait(set(self._runs), timeout=self.stop_timeout)
            if pending:
                log.warning(f"Crawl still running after {self.stop_timeout}s; leaving it to finish")
                return False

        if self._running:
            try:
                await asyncio.wait_for(self._idle.wait(), timeout=max(deadline - loop.time(), 0))
            except asyncio.TimeoutError:
                log.warning(f"Crawl still running after {self.stop_timeout}s; leaving it to finish")
                return False

        log.info("Scheduler cleanup complete")
        return True
