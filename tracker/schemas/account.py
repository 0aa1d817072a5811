from __future__ import annotations

from pydantic import BaseModel, Field


class AccountUpdate(BaseModel):
    portfolio_name: str = Field(..., min_length=1, max_length=100, description="Display name of the portfolio")


class AccountResponse(BaseModel):
    id: int
    name: str
    portfolio_name: str | None = None
    base_currency: str

    model_config = {"from_attributes": True}
