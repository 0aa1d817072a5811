from __future__ import annotations

from datetime import date as DateType, datetime

from pydantic import BaseModel, Field


class AssetRef(BaseModel):
    id: int
    name: str
    ticker: str
    category: str
    currency: str

    model_config = {"from_attributes": True}


class HoldingResponse(BaseModel):
    asset: AssetRef
    quantity: float = Field(..., description="Units currently held")
    avg_price: float = Field(..., description="Average buy price, unit price only (fees excluded)")
    current_price: float = Field(..., description="Latest known price (0 when none)")
    has_price: bool = Field(..., description="False when no price has been recorded for the asset")
    market_value: float = Field(..., description="quantity × current_price")
    book_value: float = Field(..., description="Cost of the held quantity incl. pro-rata buy fees")
    unrealized_pl: float = Field(..., description="market_value - book_value")
    unrealized_pl_percent: float = Field(..., description="unrealized_pl / book_value × 100")

    model_config = {"from_attributes": True}


class CategoryAllocationResponse(BaseModel):
    category: str
    value: float
    percentage: float

    model_config = {"from_attributes": True}


class PortfolioOverviewResponse(BaseModel):
    total_value: float = Field(0.0, description="Sum of holdings' market value")
    total_invested: float = Field(0.0, description="Sum of holdings' book value")
    total_pl: float = Field(0.0, description="total_value - total_invested")
    total_pl_percent: float = Field(0.0, description="total_pl / total_invested × 100")
    ytd_dividends: float = Field(0.0, description="Dividends paid this calendar year")
    holdings: list[HoldingResponse] = Field(default_factory=list)
    allocation_by_category: list[CategoryAllocationResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class ClosedPositionResponse(BaseModel):
    asset: AssetRef
    total_bought: float
    total_sold: float
    avg_buy_price: float
    avg_sell_price: float
    realized_pl: float
    realized_pl_percent: float
    holding_period_days: int
    first_buy_date: DateType
    last_sell_date: DateType
    cycle_id: str
    transaction_ids: list[int] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class PortfolioSummary(BaseModel):
    total_value: float = Field(0.0, description="Market value of open holdings")
    total_invested: float = Field(0.0, description="Book value of open holdings")
    unrealized_pl: float = Field(0.0, description="P&L on open holdings")
    realized_pl: float = Field(0.0, description="Sum of closed cycles' realized P&L")
    total_pl: float = Field(0.0, description="realized_pl + unrealized_pl")
    total_fees: float = Field(0.0, description="Fees paid across all transactions")
    net_deposited: float = Field(0.0, description="Deposits minus withdrawals")
    ytd_dividends: float = Field(0.0, description="Dividends paid this calendar year")
    assets_up: int = Field(0, description="Holdings with positive unrealized P&L")
    assets_down: int = Field(0, description="Holdings with negative unrealized P&L")
    open_positions: int = 0
    closed_positions: int = 0


class SeriesPointResponse(BaseModel):
    date: DateType
    total_value: float
    total_invested: float
    total_pl: float
    total_pl_percent: float

    model_config = {"from_attributes": True}


class SnapshotCreate(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)


class SnapshotUpdate(BaseModel):
    """Manual correction of a stored snapshot; values are kept as entered."""
    month: int | None = Field(None, ge=1, le=12)
    year: int | None = Field(None, ge=1900, le=9999)
    total_value: float | None = None
    total_invested: float | None = None
    total_pl: float | None = None
    total_pl_percent: float | None = None
    stocks_value: float | None = None
    etf_value: float | None = None
    crypto_value: float | None = None
    bonds_value: float | None = None
    category_details: str | None = None


class SnapshotResponse(BaseModel):
    id: int
    month: int
    year: int
    total_value: float
    total_invested: float
    total_pl: float
    total_pl_percent: float
    stocks_value: float
    etf_value: float
    crypto_value: float
    bonds_value: float
    category_details: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class AssetSnapshotCreate(BaseModel):
    date: DateType
    quantity: float = Field(..., ge=0)
    average_price: float = Field(..., ge=0)
    current_price: float = Field(..., ge=0)
    total_cost: float = Field(..., ge=0)
    market_value: float = Field(..., ge=0)
    unrealized_pl: float = 0.0
    unrealized_pl_percent: float = 0.0


class AssetSnapshotUpdate(BaseModel):
    date: DateType | None = None
    quantity: float | None = Field(None, ge=0)
    average_price: float | None = Field(None, ge=0)
    current_price: float | None = Field(None, ge=0)
    total_cost: float | None = Field(None, ge=0)
    market_value: float | None = Field(None, ge=0)
    unrealized_pl: float | None = None
    unrealized_pl_percent: float | None = None


class AssetSnapshotResponse(BaseModel):
    id: int
    asset_id: int
    date: DateType
    quantity: float
    average_price: float
    current_price: float
    total_cost: float
    market_value: float
    unrealized_pl: float
    unrealized_pl_percent: float

    model_config = {"from_attributes": True}
