from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from tracker.schemas.common import normalize_category


class AssetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    ticker: str = Field(..., min_length=1, max_length=20)
    isin: str | None = Field(None, max_length=12)
    category: str = Field(..., min_length=1, max_length=20, description="stocks / etf / crypto / bonds")
    sector: str | None = Field(None, max_length=50)
    region: str | None = Field(None, max_length=50)
    currency: str = Field("USD", min_length=3, max_length=3)
    notes: str | None = None

    @field_validator("category")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_category(v)


class AssetUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    ticker: str | None = Field(None, min_length=1, max_length=20)
    isin: str | None = Field(None, max_length=12)
    category: str | None = Field(None, min_length=1, max_length=20)
    sector: str | None = None
    region: str | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)
    notes: str | None = None

    @field_validator("category")
    @classmethod
    def _normalize(cls, v: str | None) -> str | None:
        return normalize_category(v) if v is not None else None


class AssetResponse(BaseModel):
    id: int
    name: str
    ticker: str
    isin: str | None = None
    category: str
    sector: str | None = None
    region: str | None = None
    currency: str
    notes: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
