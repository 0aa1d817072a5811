"""Entry point for the portfolio tracker service."""

import uvicorn

from tracker.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "tracker.main:app",
        host=settings.host,
        port=settings.port,
        workers=1,
        log_level=settings.log_level.lower(),
    )
