from __future__ import annotations

from datetime import date as DateType

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base, TimestampMixin


class Transaction(TimestampMixin, Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_asset_date", "asset_id", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True)
    asset_id: Mapped[int] = mapped_column(ForeignKey("assets.id"))
    date: Mapped[DateType] = mapped_column(Date)
    type: Mapped[str] = mapped_column(String(10))  # BUY / SELL
    quantity: Mapped[float] = mapped_column()
    unit_price: Mapped[float] = mapped_column()
    fees: Mapped[float] = mapped_column(default=0.0)

    def __repr__(self) -> str:
        return (
            f"<Transaction id={self.id} {self.type} asset={self.asset_id} "
            f"qty={self.quantity} price={self.unit_price}>"
        )
