from __future__ import annotations

from datetime import date as DateType, datetime

from pydantic import BaseModel, Field

from tracker.schemas.common import CashMovementType


class CashMovementCreate(BaseModel):
    date: DateType
    type: CashMovementType
    amount: float = Field(..., gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)


class CashMovementUpdate(BaseModel):
    date: DateType | None = None
    type: CashMovementType | None = None
    amount: float | None = Field(None, gt=0)
    currency: str | None = Field(None, min_length=3, max_length=3)


class CashMovementResponse(BaseModel):
    id: int
    date: DateType
    type: str
    amount: float
    currency: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CashSummary(BaseModel):
    total_deposits: float = 0.0
    total_withdrawals: float = 0.0
    balance: float = 0.0
