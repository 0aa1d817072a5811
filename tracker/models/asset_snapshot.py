from __future__ import annotations

from datetime import date as DateType

from sqlalchemy import Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base, TimestampMixin


class AssetSnapshot(TimestampMixin, Base):
    __tablename__ = "asset_snapshots"
    __table_args__ = (
        UniqueConstraint("asset_id", "date", name="uq_asset_snapshot"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"))
    asset_id: Mapped[int] = mapped_column(ForeignKey("assets.id"), index=True)
    date: Mapped[DateType] = mapped_column(Date, index=True)
    quantity: Mapped[float] = mapped_column(default=0.0)
    average_price: Mapped[float] = mapped_column(default=0.0)
    current_price: Mapped[float] = mapped_column(default=0.0)
    total_cost: Mapped[float] = mapped_column(default=0.0)
    market_value: Mapped[float] = mapped_column(default=0.0)
    unrealized_pl: Mapped[float] = mapped_column(default=0.0)
    unrealized_pl_percent: Mapped[float] = mapped_column(default=0.0)
