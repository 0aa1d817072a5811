from __future__ import annotations

from enum import Enum

from pydantic_settings import BaseSettings


class SnapshotBinding(str, Enum):
    # PERIOD: compute as of the end of the requested month
    # CURRENT: stamp the live overview with the requested month/year
    PERIOD = "period"
    CURRENT = "current"


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Portfolio
    default_account_name: str = "default"
    portfolio_name: str = "My Portfolio"
    base_currency: str = "EUR"

    # Snapshots
    snapshot_binding: SnapshotBinding = SnapshotBinding.PERIOD
    monthly_snapshot_enabled: bool = True
    scheduler_timezone: str = "Europe/Rome"

    # Database
    database_url: str = "sqlite+aiosqlite:///./portfolio.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


settings = Settings()
