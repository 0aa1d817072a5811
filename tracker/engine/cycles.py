"""Closed-position detection: split each asset's history into buy→sell-out cycles."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date

from tracker.engine.aggregator import group_by_asset, prorate_sell_fees, sort_transactions
from tracker.engine.records import (
    EPSILON,
    AssetInfo,
    ClosedPositionCycle,
    TransactionRecord,
)
from tracker.schemas.common import TransactionType

logger = logging.getLogger(__name__)


def make_cycle_id(asset_id: int, cycle_number: int, start: date) -> str:
    return f"{asset_id}-{cycle_number}-{start.isoformat()}"


def detect_cycles(
    asset: AssetInfo,
    transactions: Iterable[TransactionRecord],
) -> list[ClosedPositionCycle]:
    """Replay one asset's history and emit a record for every fully closed cycle.

    A cycle opens on the first buy from a flat position and closes on the sell
    that brings the position back within EPSILON of zero. The cycle's realized
    P&L is the closing sell's per-unit economics scaled to the position held
    just before that sell; it is exact when the cycle has a single closing sell
    and approximate when earlier partial sells happened at different prices.
    """
    cycles: list[ClosedPositionCycle] = []
    position = 0.0
    cycle_buys: list[TransactionRecord] = []
    cycle_tx_ids: list[int] = []
    cycle_start: date | None = None
    cycle_count = 0

    for tx in sort_transactions(transactions):
        if tx.type == TransactionType.BUY:
            if position <= EPSILON:
                cycle_start = tx.date
                cycle_buys = []
                cycle_tx_ids = []
                cycle_count += 1
            cycle_buys.append(tx)
            cycle_tx_ids.append(tx.id)
            position += tx.quantity
            continue

        if position <= 0 or not cycle_buys:
            continue

        sell_qty = min(tx.quantity, position)
        cycle_tx_ids.append(tx.id)

        total_bought = sum(b.quantity for b in cycle_buys)
        total_buy_value = sum(b.quantity * b.unit_price for b in cycle_buys)
        total_buy_fees = sum(b.fees for b in cycle_buys)
        if total_bought <= 0 or sell_qty <= 0:
            continue

        avg_buy_price = total_buy_value / total_bought
        buy_fees = total_buy_fees * (sell_qty / total_bought)
        sell_fees = prorate_sell_fees(tx.fees, sell_qty, tx.quantity)

        cash_received = sell_qty * tx.unit_price - sell_fees
        cost_paid = sell_qty * avg_buy_price + buy_fees
        realized_pl = cash_received - cost_paid
        realized_pl_percent = realized_pl / cost_paid * 100 if cost_paid > 0 else 0.0

        remaining = position - sell_qty
        if remaining <= EPSILON:
            cycles.append(ClosedPositionCycle(
                asset=asset,
                total_bought=position,
                total_sold=position,
                avg_buy_price=avg_buy_price,
                avg_sell_price=tx.unit_price,
                realized_pl=realized_pl * (position / sell_qty),
                realized_pl_percent=realized_pl_percent,
                holding_period_days=(tx.date - cycle_start).days,
                first_buy_date=cycle_start,
                last_sell_date=tx.date,
                cycle_id=make_cycle_id(asset.id, cycle_count, cycle_start),
                transaction_ids=list(cycle_tx_ids),
            ))
            position = 0.0
            cycle_buys = []
            cycle_tx_ids = []
            cycle_start = None
        else:
            position = remaining

    return cycles


def compute_closed_positions(
    transactions: Iterable[TransactionRecord],
    assets: Mapping[int, AssetInfo],
) -> list[ClosedPositionCycle]:
    """All closed cycles across assets, most recent exit first."""
    closed: list[ClosedPositionCycle] = []
    for asset_id, txs in group_by_asset(transactions).items():
        asset = assets.get(asset_id)
        if asset is None:
            logger.debug("Skipping transactions for unknown asset %s", asset_id)
            continue
        closed.extend(detect_cycles(asset, txs))

    closed.sort(key=lambda c: c.cycle_id)
    closed.sort(key=lambda c: c.last_sell_date, reverse=True)
    return closed
