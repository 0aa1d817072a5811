"""As-of-date overviews, monthly series and snapshot breakdowns.

Every function here replays the same aggregation used for the live overview,
only over a different slice of the history.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Mapping
from datetime import date

from tracker.engine.aggregator import aggregate_position, aggregate_positions
from tracker.engine.income import compute_ytd_dividends
from tracker.engine.records import (
    AssetCheckpoint,
    AssetInfo,
    CategoryTotals,
    DividendRecord,
    Holding,
    PortfolioOverview,
    PricePoint,
    SeriesPoint,
    TransactionRecord,
)
from tracker.engine.valuation import build_overview, latest_prices
from tracker.schemas.common import AssetCategory

SNAPSHOT_CATEGORIES = tuple(c.value for c in AssetCategory)


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def month_checkpoints(start: date, end: date) -> list[date]:
    """Last day of every month from ``start``'s month through ``end`` (capped at ``end``)."""
    checkpoints: list[date] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        checkpoints.append(min(month_end(year, month), end))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return checkpoints


def compute_overview_as_of(
    transactions: Iterable[TransactionRecord],
    prices: Iterable[PricePoint],
    assets: Mapping[int, AssetInfo],
    as_of: date,
    dividends: Iterable[DividendRecord] = (),
) -> PortfolioOverview:
    """Portfolio overview as it stood at the end of ``as_of``."""
    positions = aggregate_positions(t for t in transactions if t.date <= as_of)
    return build_overview(
        positions,
        latest_prices(prices, as_of=as_of),
        assets,
        ytd_dividends=compute_ytd_dividends(dividends, as_of.year, as_of=as_of),
    )


def category_breakdown(holdings: Iterable[Holding]) -> dict[str, CategoryTotals]:
    """Per-category totals with all four snapshot buckets always present."""
    breakdown = {category: CategoryTotals() for category in SNAPSHOT_CATEGORIES}
    for holding in holdings:
        totals = breakdown.get(holding.asset.category)
        if totals is None:
            continue
        totals.value += holding.market_value
        totals.invested += holding.book_value
        totals.assets[holding.asset.name] = (
            totals.assets.get(holding.asset.name, 0.0) + holding.market_value
        )
    for totals in breakdown.values():
        totals.pl = totals.value - totals.invested
        totals.pl_percent = totals.pl / totals.invested * 100 if totals.invested > 0 else 0.0
    return breakdown


def build_monthly_series(
    transactions: Iterable[TransactionRecord],
    prices: Iterable[PricePoint],
    assets: Mapping[int, AssetInfo],
    end: date,
) -> list[SeriesPoint]:
    txs = list(transactions)
    if not txs:
        return []
    price_list = list(prices)
    start = min(t.date for t in txs)

    series: list[SeriesPoint] = []
    for checkpoint in month_checkpoints(start, end):
        overview = compute_overview_as_of(txs, price_list, assets, checkpoint)
        series.append(SeriesPoint(
            date=checkpoint,
            total_value=overview.total_value,
            total_invested=overview.total_invested,
            total_pl=overview.total_pl,
            total_pl_percent=overview.total_pl_percent,
        ))
    return series


def generate_asset_checkpoints(
    asset_id: int,
    transactions: Iterable[TransactionRecord],
    prices: Iterable[PricePoint],
    end: date,
) -> list[AssetCheckpoint]:
    """Monthly checkpoints for one asset, oldest first; months with no position are skipped."""
    txs = [t for t in transactions if t.asset_id == asset_id]
    if not txs:
        return []
    price_list = [p for p in prices if p.asset_id == asset_id]
    start = min(t.date for t in txs)

    checkpoints: list[AssetCheckpoint] = []
    for checkpoint in month_checkpoints(start, end):
        position = aggregate_position((t for t in txs if t.date <= checkpoint), asset_id)
        if not position.is_active:
            continue
        price = latest_prices(price_list, as_of=checkpoint).get(asset_id)
        current_price = price.close_price if price is not None else 0.0
        market_value = position.quantity * current_price
        unrealized_pl = market_value - position.book_value
        checkpoints.append(AssetCheckpoint(
            asset_id=asset_id,
            date=checkpoint,
            quantity=position.quantity,
            average_price=position.avg_price,
            current_price=current_price,
            total_cost=position.book_value,
            market_value=market_value,
            unrealized_pl=unrealized_pl,
            unrealized_pl_percent=(
                unrealized_pl / position.book_value * 100 if position.book_value > 0 else 0.0
            ),
        ))
    return checkpoints
