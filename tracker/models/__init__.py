from tracker.models.account import Account
from tracker.models.asset import Asset
from tracker.models.transaction import Transaction
from tracker.models.price import Price
from tracker.models.dividend import Dividend
from tracker.models.cash_movement import CashMovement
from tracker.models.portfolio_snapshot import PortfolioSnapshot
from tracker.models.asset_snapshot import AssetSnapshot
from tracker.models.base import Base

__all__ = [
    "Base",
    "Account",
    "Asset",
    "Transaction",
    "Price",
    "Dividend",
    "CashMovement",
    "PortfolioSnapshot",
    "AssetSnapshot",
]
