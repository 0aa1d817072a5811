from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from tracker.config import settings

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


def get_scheduler() -> AsyncIOScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler(timezone=settings.scheduler_timezone)
    return _scheduler


def start_scheduler() -> AsyncIOScheduler:
    scheduler = get_scheduler()
    from tracker.scheduler.jobs import register_jobs
    register_jobs(scheduler)
    scheduler.start()
    logger.info(
        "Scheduler started (%s): %s",
        settings.scheduler_timezone,
        ", ".join(job.id for job in scheduler.get_jobs()) or "no jobs",
    )
    return scheduler


def shutdown_scheduler() -> None:
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    _scheduler = None
