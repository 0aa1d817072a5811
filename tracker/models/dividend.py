from __future__ import annotations

from datetime import date as DateType

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base, TimestampMixin


class Dividend(TimestampMixin, Base):
    __tablename__ = "dividends"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True)
    asset_id: Mapped[int] = mapped_column(ForeignKey("assets.id"), index=True)
    payment_date: Mapped[DateType] = mapped_column(Date, index=True)
    amount: Mapped[float] = mapped_column()
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    notes: Mapped[str | None] = mapped_column(Text, default=None)
