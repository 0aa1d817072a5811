from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base, TimestampMixin


class Account(TimestampMixin, Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True)
    portfolio_name: Mapped[str | None] = mapped_column(String(100), default=None)
    base_currency: Mapped[str] = mapped_column(String(3), default="EUR")

    def __repr__(self) -> str:
        return f"<Account id={self.id} name={self.name!r} portfolio={self.portfolio_name!r}>"
