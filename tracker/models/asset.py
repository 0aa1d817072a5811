from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base, TimestampMixin


class Asset(TimestampMixin, Base):
    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True)
    name: Mapped[str] = mapped_column(String(100))
    ticker: Mapped[str] = mapped_column(String(20), index=True)
    isin: Mapped[str | None] = mapped_column(String(12), default=None)
    category: Mapped[str] = mapped_column(String(20))  # stocks / etf / crypto / bonds
    sector: Mapped[str | None] = mapped_column(String(50), default=None)
    region: Mapped[str | None] = mapped_column(String(50), default=None)
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    notes: Mapped[str | None] = mapped_column(Text, default=None)

    def __repr__(self) -> str:
        return f"<Asset id={self.id} {self.ticker} category={self.category}>"
