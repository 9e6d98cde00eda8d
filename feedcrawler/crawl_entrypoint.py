"""Crawl entrypoint - Standalone script for running crawl jobs.

Usage:
    python -m feedcrawler.crawl_entrypoint                 # Run one crawl job
    python -m feedcrawler.crawl_entrypoint site Dev.to     # Test-crawl a single source
    python -m feedcrawler.crawl_entrypoint message         # Send the test message
    python -m feedcrawler.crawl_entrypoint status          # Show delivery status
"""

import asyncio
import sys

from feedcrawler.core.logging import get_logger
from feedcrawler.services.scheduler import RunCoordinator

logger = get_logger("crawl_entrypoint")


async def run_crawl_job(coordinator: RunCoordinator) -> bool:
    """Run one crawl job."""
    result = await coordinator.manual_run()
    logger.info(f"Crawl job result: {result.model_dump_json(by_alias=True, exclude={'metrics'})}")
    return result.success


async def run_site_test(coordinator: RunCoordinator, name: str) -> bool:
    """Crawl a single source without storing or delivering anything."""
    items = await coordinator.aggregator.test_site(name)
    return bool(items)


async def run_message_test(coordinator: RunCoordinator) -> bool:
    results = await coordinator.notifier.send_test_message()
    for r in results:
        logger.info(f"{r.channel}: {'ok' if r.success else r.error}")
    return coordinator.notifier.any_succeeded(results)


async def show_status(coordinator: RunCoordinator) -> bool:
    status = await coordinator.get_status()
    logger.info(f"Status: {status.model_dump_json(by_alias=True)}")
    return True


def main():
    """Main entry point for one-off crawl commands."""
    args = sys.argv[1:]
    coordinator = RunCoordinator()

    if not args:
        ok = asyncio.run(run_crawl_job(coordinator))
    elif args[0] == "site" and len(args) == 2:
        ok = asyncio.run(run_site_test(coordinator, args[1]))
    elif args[0] == "message":
        ok = asyncio.run(run_message_test(coordinator))
    elif args[0] == "status":
        ok = asyncio.run(show_status(coordinator))
    else:
        logger.error(f"Invalid arguments: {' '.join(args)}. See module docstring for usage.")
        sys.exit(2)

    # Exit with error code if the command failed
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
