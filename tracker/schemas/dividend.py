from __future__ import annotations

from datetime import date as DateType, datetime

from pydantic import BaseModel, Field


class DividendCreate(BaseModel):
    asset_id: int
    payment_date: DateType
    amount: float = Field(..., ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    notes: str | None = None


class DividendUpdate(BaseModel):
    asset_id: int | None = None
    payment_date: DateType | None = None
    amount: float | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    notes: str | None = None


class DividendResponse(BaseModel):
    id: int
    asset_id: int
    payment_date: DateType
    amount: float
    currency: str
    notes: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class DividendsSummary(BaseModel):
    ytd: float = Field(0.0, description="Dividends paid this calendar year")
    this_month: float = Field(0.0, description="Dividends paid this month")
    avg_monthly: float = Field(0.0, description="Average per paying month over the last 12 months")
