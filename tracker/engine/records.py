"""Plain records consumed and produced by the portfolio engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from tracker.schemas.common import TransactionType, normalize_category

# Quantity below which a position counts as closed
EPSILON = 0.001


def to_float(value: Any) -> float:
    """Coerce a stored decimal to float; bad input becomes 0.0 instead of raising."""
    if value is None:
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


@dataclass(frozen=True)
class TransactionRecord:
    id: int
    asset_id: int
    type: TransactionType
    date: date
    quantity: float
    unit_price: float
    fees: float = 0.0

    @classmethod
    def from_row(cls, row: Any) -> "TransactionRecord":
        return cls(
            id=row.id,
            asset_id=row.asset_id,
            type=TransactionType(row.type),
            date=row.date,
            quantity=max(to_float(row.quantity), 0.0),
            unit_price=max(to_float(row.unit_price), 0.0),
            fees=max(to_float(row.fees), 0.0),
        )

    @property
    def sort_key(self) -> tuple[date, int]:
        return (self.date, self.id)


@dataclass(frozen=True)
class PricePoint:
    id: int
    asset_id: int
    date: date
    close_price: float
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Any) -> "PricePoint":
        return cls(
            id=row.id,
            asset_id=row.asset_id,
            date=row.date,
            close_price=max(to_float(row.close_price), 0.0),
            created_at=row.created_at,
        )


@dataclass(frozen=True)
class AssetInfo:
    id: int
    name: str
    ticker: str
    category: str
    currency: str = "USD"

    @classmethod
    def from_row(cls, row: Any) -> "AssetInfo":
        return cls(
            id=row.id,
            name=row.name,
            ticker=row.ticker,
            category=normalize_category(row.category),
            currency=row.currency,
        )


@dataclass(frozen=True)
class DividendRecord:
    id: int
    asset_id: int
    payment_date: date
    amount: float

    @classmethod
    def from_row(cls, row: Any) -> "DividendRecord":
        return cls(
            id=row.id,
            asset_id=row.asset_id,
            payment_date=row.payment_date,
            amount=to_float(row.amount),
        )


@dataclass
class PositionState:
    asset_id: int | None
    quantity: float = 0.0
    avg_price: float = 0.0
    book_value: float = 0.0
    total_invested: float = 0.0
    realized_pl: float = 0.0
    total_bought: float = 0.0
    total_fees: float = 0.0
    is_active: bool = False


@dataclass
class Holding:
    asset: AssetInfo
    quantity: float
    avg_price: float
    current_price: float
    has_price: bool
    market_value: float
    book_value: float
    unrealized_pl: float
    unrealized_pl_percent: float


@dataclass
class CategoryAllocation:
    category: str
    value: float
    percentage: float


@dataclass
class PortfolioOverview:
    total_value: float = 0.0
    total_invested: float = 0.0
    total_pl: float = 0.0
    total_pl_percent: float = 0.0
    ytd_dividends: float = 0.0
    holdings: list[Holding] = field(default_factory=list)
    allocation_by_category: list[CategoryAllocation] = field(default_factory=list)


@dataclass
class ClosedPositionCycle:
    asset: AssetInfo
    total_bought: float
    total_sold: float
    avg_buy_price: float
    avg_sell_price: float
    realized_pl: float
    realized_pl_percent: float
    holding_period_days: int
    first_buy_date: date
    last_sell_date: date
    cycle_id: str
    transaction_ids: list[int] = field(default_factory=list)


@dataclass
class CategoryTotals:
    value: float = 0.0
    invested: float = 0.0
    pl: float = 0.0
    pl_percent: float = 0.0
    assets: dict[str, float] = field(default_factory=dict)


@dataclass
class AssetCheckpoint:
    asset_id: int
    date: date
    quantity: float
    average_price: float
    current_price: float
    total_cost: float
    market_value: float
    unrealized_pl: float
    unrealized_pl_percent: float


@dataclass
class SeriesPoint:
    date: date
    total_value: float
    total_invested: float
    total_pl: float
    total_pl_percent: float
