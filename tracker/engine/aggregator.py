"""Position replay: running quantity, weighted average cost, realized P&L."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from tracker.engine.records import EPSILON, PositionState, TransactionRecord
from tracker.schemas.common import TransactionType


def sort_transactions(transactions: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    """Replay order: date ascending, insertion id breaks same-day ties."""
    return sorted(transactions, key=lambda t: t.sort_key)


def prorate_sell_fees(fees: float, sold: float, requested: float) -> float:
    """Share of a sell's fee charged to the quantity actually sold after clamping."""
    if requested <= 0:
        return 0.0
    return fees * (sold / requested)


def clamped_sells(transactions: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    """Sells that ask for more than the position held when they are replayed."""
    quantity = 0.0
    clamped: list[TransactionRecord] = []
    for tx in sort_transactions(transactions):
        if tx.type == TransactionType.BUY:
            quantity += tx.quantity
            continue
        if tx.quantity > quantity + EPSILON:
            clamped.append(tx)
        quantity = max(quantity - tx.quantity, 0.0)
    return clamped


def aggregate_position(
    transactions: Iterable[TransactionRecord],
    asset_id: int | None = None,
) -> PositionState:
    """Replay one asset's transactions and return its current position.

    Sells are clamped to the quantity held; a sell against an empty position
    is ignored. ``avg_price`` uses the cumulative buy totals (unit price only)
    while realized P&L uses the running weighted average cost.
    """
    quantity = 0.0
    total_bought = 0.0
    total_buy_value = 0.0
    total_buy_fees = 0.0
    total_fees = 0.0
    cost_basis = 0.0
    realized_pl = 0.0

    for tx in sort_transactions(transactions):
        if asset_id is None:
            asset_id = tx.asset_id
        total_fees += tx.fees

        if tx.type == TransactionType.BUY:
            quantity += tx.quantity
            total_bought += tx.quantity
            total_buy_value += tx.quantity * tx.unit_price
            total_buy_fees += tx.fees
            cost_basis += tx.quantity * tx.unit_price
            continue

        sold = min(tx.quantity, quantity)
        if sold <= 0:
            continue
        avg_cost = cost_basis / quantity if quantity > 0 else 0.0
        cost_of_sold = sold * avg_cost
        sell_fees = prorate_sell_fees(tx.fees, sold, tx.quantity)
        realized_pl += (sold * tx.unit_price - sell_fees) - cost_of_sold
        quantity -= sold
        cost_basis -= cost_of_sold

    is_active = quantity > EPSILON
    if not is_active:
        quantity = 0.0

    avg_price = total_buy_value / total_bought if is_active and total_bought > 0 else 0.0
    if total_bought > 0:
        book_value = quantity * avg_price + total_buy_fees * (quantity / total_bought)
    else:
        book_value = 0.0

    return PositionState(
        asset_id=asset_id,
        quantity=quantity,
        avg_price=avg_price,
        book_value=book_value,
        total_invested=book_value,
        realized_pl=realized_pl,
        total_bought=total_bought,
        total_fees=total_fees,
        is_active=is_active,
    )


def group_by_asset(
    transactions: Iterable[TransactionRecord],
) -> dict[int, list[TransactionRecord]]:
    grouped: dict[int, list[TransactionRecord]] = defaultdict(list)
    for tx in transactions:
        grouped[tx.asset_id].append(tx)
    return dict(grouped)


def aggregate_positions(
    transactions: Iterable[TransactionRecord],
) -> dict[int, PositionState]:
    return {
        asset_id: aggregate_position(txs, asset_id)
        for asset_id, txs in group_by_asset(transactions).items()
    }
