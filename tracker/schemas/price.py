from __future__ import annotations

from datetime import date as DateType, datetime

from pydantic import BaseModel, Field


class PriceCreate(BaseModel):
    asset_id: int
    date: DateType
    close_price: float = Field(..., ge=0)


class PriceUpdate(BaseModel):
    date: DateType | None = None
    close_price: float | None = Field(None, ge=0)


class PriceResponse(BaseModel):
    id: int
    asset_id: int
    date: DateType
    close_price: float
    created_at: datetime

    model_config = {"from_attributes": True}
