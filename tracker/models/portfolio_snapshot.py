from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base, TimestampMixin


class PortfolioSnapshot(TimestampMixin, Base):
    __tablename__ = "portfolio_snapshots"
    __table_args__ = (
        Index("ix_snapshots_account_period", "account_id", "year", "month"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"))
    month: Mapped[int] = mapped_column()  # 1-12
    year: Mapped[int] = mapped_column()
    total_value: Mapped[float] = mapped_column(default=0.0)
    total_invested: Mapped[float] = mapped_column(default=0.0)
    total_pl: Mapped[float] = mapped_column(default=0.0)
    total_pl_percent: Mapped[float] = mapped_column(default=0.0)
    stocks_value: Mapped[float] = mapped_column(default=0.0)
    etf_value: Mapped[float] = mapped_column(default=0.0)
    crypto_value: Mapped[float] = mapped_column(default=0.0)
    bonds_value: Mapped[float] = mapped_column(default=0.0)
    category_details: Mapped[str | None] = mapped_column(Text, default=None)  # JSON

    def __repr__(self) -> str:
        return f"<PortfolioSnapshot id={self.id} {self.year}-{self.month:02d} value={self.total_value}>"
