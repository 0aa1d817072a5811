from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tracker.config import settings
from tracker.database import async_session, engine, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting portfolio tracker (snapshot_binding=%s)", settings.snapshot_binding.value)

    await init_db()

    # Ensure default account exists
    from tracker.services.account_service import AccountService

    async with async_session() as session:
        await AccountService(session).ensure_default(
            settings.default_account_name,
            settings.portfolio_name,
            settings.base_currency,
        )

    from tracker.scheduler.scheduler import shutdown_scheduler, start_scheduler
    start_scheduler()

    yield

    # Shutdown
    shutdown_scheduler()
    await engine.dispose()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Portfolio Tracker",
        version="0.1.0",
        description="Personal investment portfolio: holdings, realized P&L, closed positions and monthly snapshots.",
        lifespan=lifespan,
    )

    from tracker.api.router import api_router
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
