from __future__ import annotations

from enum import Enum


class TransactionType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def _missing_(cls, value):
        # "buy" / "Sell" from older clients
        if isinstance(value, str):
            upper = value.strip().upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


class AssetCategory(str, Enum):
    STOCKS = "stocks"
    ETF = "etf"
    CRYPTO = "crypto"
    BONDS = "bonds"


class CashMovementType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


_CATEGORY_ALIASES = {
    "stock": AssetCategory.STOCKS.value,
    "fund": AssetCategory.BONDS.value,
}


def normalize_category(category: str | None) -> str:
    """Map legacy category names onto the four buckets (stock → stocks, fund → bonds)."""
    value = (category or "").strip().lower()
    return _CATEGORY_ALIASES.get(value, value)
