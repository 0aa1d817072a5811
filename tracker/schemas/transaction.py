from __future__ import annotations

from datetime import date as DateType, datetime

from pydantic import BaseModel, Field

from tracker.schemas.common import TransactionType


class TransactionCreate(BaseModel):
    asset_id: int = Field(..., description="Asset the transaction belongs to")
    date: DateType = Field(..., description="Trade date")
    type: TransactionType = Field(..., description="BUY or SELL")
    quantity: float = Field(..., ge=0, description="Units traded")
    unit_price: float = Field(..., ge=0, description="Price per unit, fees excluded")
    fees: float = Field(0.0, ge=0, description="Commission charged on the trade")


class TransactionUpdate(BaseModel):
    asset_id: int | None = None
    date: DateType | None = None
    type: TransactionType | None = None
    quantity: float | None = Field(None, ge=0)
    unit_price: float | None = Field(None, ge=0)
    fees: float | None = Field(None, ge=0)


class TransactionResponse(BaseModel):
    id: int
    asset_id: int
    date: DateType
    type: str
    quantity: float
    unit_price: float
    fees: float
    created_at: datetime

    model_config = {"from_attributes": True}
