from __future__ import annotations

from datetime import date as DateType

from sqlalchemy import Date, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base, TimestampMixin


class Price(TimestampMixin, Base):
    """Manually entered closing price for an asset."""

    __tablename__ = "prices"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True)
    asset_id: Mapped[int] = mapped_column(ForeignKey("assets.id"), index=True)
    date: Mapped[DateType] = mapped_column(Date)
    close_price: Mapped[float] = mapped_column()

    def __repr__(self) -> str:
        return f"<Price asset={self.asset_id} date={self.date} close={self.close_price}>"
