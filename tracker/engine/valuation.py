"""Holdings valuation, portfolio totals and category allocation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone

from tracker.engine.aggregator import aggregate_positions
from tracker.engine.records import (
    AssetInfo,
    CategoryAllocation,
    Holding,
    PortfolioOverview,
    PositionState,
    PricePoint,
    TransactionRecord,
)

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _price_key(point: PricePoint) -> tuple:
    created = point.created_at or _EPOCH
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return (point.date, created, point.id)


def latest_prices(
    prices: Iterable[PricePoint],
    as_of: date | None = None,
) -> dict[int, PricePoint]:
    """Newest price per asset by (date, created_at), optionally up to ``as_of``."""
    latest: dict[int, PricePoint] = {}
    for point in prices:
        if as_of is not None and point.date > as_of:
            continue
        current = latest.get(point.asset_id)
        if current is None or _price_key(point) > _price_key(current):
            latest[point.asset_id] = point
    return latest


def value_holding(
    asset: AssetInfo,
    position: PositionState,
    price: PricePoint | None,
) -> Holding:
    current_price = price.close_price if price is not None else 0.0
    market_value = position.quantity * current_price
    unrealized_pl = market_value - position.book_value
    unrealized_pl_percent = (
        unrealized_pl / position.book_value * 100 if position.book_value > 0 else 0.0
    )
    return Holding(
        asset=asset,
        quantity=position.quantity,
        avg_price=position.avg_price,
        current_price=current_price,
        has_price=price is not None,
        market_value=market_value,
        book_value=position.book_value,
        unrealized_pl=unrealized_pl,
        unrealized_pl_percent=unrealized_pl_percent,
    )


def allocation_by_category(
    holdings: Iterable[Holding],
    total_value: float,
) -> list[CategoryAllocation]:
    values: dict[str, float] = {}
    for holding in holdings:
        category = holding.asset.category
        values[category] = values.get(category, 0.0) + holding.market_value
    return [
        CategoryAllocation(
            category=category,
            value=value,
            percentage=value / total_value * 100 if total_value > 0 else 0.0,
        )
        for category, value in values.items()
    ]


def inactive_asset_ids(positions: Mapping[int, PositionState]) -> set[int]:
    """Assets whose replayed position is closed; their prices are stale."""
    return {asset_id for asset_id, pos in positions.items() if not pos.is_active}


def build_overview(
    positions: Mapping[int, PositionState],
    prices: Mapping[int, PricePoint],
    assets: Mapping[int, AssetInfo],
    ytd_dividends: float = 0.0,
) -> PortfolioOverview:
    holdings: list[Holding] = []
    for asset_id, position in positions.items():
        if not position.is_active:
            continue
        asset = assets.get(asset_id)
        if asset is None:
            logger.debug("Skipping position for unknown asset %s", asset_id)
            continue
        holdings.append(value_holding(asset, position, prices.get(asset_id)))

    total_value = sum(h.market_value for h in holdings)
    total_invested = sum(h.book_value for h in holdings)
    total_pl = total_value - total_invested
    total_pl_percent = total_pl / total_invested * 100 if total_invested > 0 else 0.0

    return PortfolioOverview(
        total_value=total_value,
        total_invested=total_invested,
        total_pl=total_pl,
        total_pl_percent=total_pl_percent,
        ytd_dividends=ytd_dividends,
        holdings=holdings,
        allocation_by_category=allocation_by_category(holdings, total_value),
    )


def compute_holdings(
    transactions: Iterable[TransactionRecord],
    prices: Iterable[PricePoint],
    assets: Mapping[int, AssetInfo],
) -> PortfolioOverview:
    """Current holdings and portfolio totals from the full transaction history."""
    positions = aggregate_positions(transactions)
    return build_overview(positions, latest_prices(prices), assets)
