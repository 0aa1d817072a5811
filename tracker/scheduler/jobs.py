from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from tracker.config import settings

logger = logging.getLogger(__name__)


async def take_monthly_snapshot():
    """Store last month's portfolio snapshot if it has not been taken yet."""
    from tracker.database import async_session
    from tracker.services.portfolio_service import PortfolioService
    try:
        async with async_session() as session:
            svc = PortfolioService(session)
            await svc.take_monthly_snapshot()
    except Exception:
        logger.exception("Monthly snapshot failed")


def register_jobs(scheduler: AsyncIOScheduler):
    if not settings.monthly_snapshot_enabled:
        logger.info("Monthly snapshot job disabled")
        return

    # 1st of every month, shortly after midnight
    scheduler.add_job(
        take_monthly_snapshot,
        "cron",
        day=1,
        hour=0,
        minute=5,
        id="monthly_snapshot",
        replace_existing=True,
    )
    logger.info("Registered scheduled jobs")
