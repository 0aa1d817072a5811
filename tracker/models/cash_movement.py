from __future__ import annotations

from datetime import date as DateType

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base, TimestampMixin


class CashMovement(TimestampMixin, Base):
    __tablename__ = "cash_movements"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True)
    date: Mapped[DateType] = mapped_column(Date)
    type: Mapped[str] = mapped_column(String(10))  # deposit / withdraw
    amount: Mapped[float] = mapped_column()
    currency: Mapped[str] = mapped_column(String(3), default="USD")
