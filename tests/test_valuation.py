"""Holdings valuation, price selection and category allocation."""

from datetime import date, datetime, timezone

import pytest

from tests.builders import asset_info, buy, price_point, sell
from tracker.engine.aggregator import aggregate_positions
from tracker.engine.cycles import compute_closed_positions
from tracker.engine.records import AssetInfo
from tracker.engine.valuation import (
    build_overview,
    compute_holdings,
    inactive_asset_ids,
    latest_prices,
)


def test_partial_sell_stays_open():
    txs = [buy(1, date(2024, 1, 1), 10, 50), sell(2, date(2024, 1, 20), 4, 60)]
    assert compute_closed_positions(txs, {1: asset_info(1)}) == []
    overview = compute_holdings(
        txs,
        [price_point(1, date(2024, 2, 1), 55)],
        {1: asset_info(1)},
    )
    assert len(overview.holdings) == 1
    h = overview.holdings[0]
    assert h.quantity == 6
    assert h.avg_price == pytest.approx(50)
    assert h.book_value == pytest.approx(300)
    assert h.current_price == 55
    assert h.has_price
    assert h.market_value == pytest.approx(330)
    assert h.unrealized_pl == pytest.approx(30)
    assert h.unrealized_pl_percent == pytest.approx(10)
    assert overview.total_value == pytest.approx(330)
    assert overview.total_invested == pytest.approx(300)
    assert overview.total_pl_percent == pytest.approx(10)


def test_empty_portfolio():
    overview = compute_holdings([], [], {})
    assert overview.holdings == []
    assert overview.allocation_by_category == []
    assert overview.total_value == 0
    assert overview.total_invested == 0
    assert overview.total_pl_percent == 0


def test_holding_without_price_is_worth_zero():
    overview = compute_holdings([buy(1, date(2024, 1, 1), 2, 100, fees=4)], [], {1: asset_info(1)})
    h = overview.holdings[0]
    assert not h.has_price
    assert h.current_price == 0
    assert h.market_value == 0
    assert h.book_value == pytest.approx(204)
    assert h.unrealized_pl == pytest.approx(-204)
    assert h.unrealized_pl_percent == pytest.approx(-100)


def test_closed_positions_are_excluded():
    overview = compute_holdings(
        [
            buy(1, date(2024, 1, 1), 5, 10, asset_id=1),
            sell(2, date(2024, 2, 1), 5, 12, asset_id=1),
            buy(3, date(2024, 1, 1), 1, 100, asset_id=2),
        ],
        [price_point(1, date(2024, 2, 1), 12, asset_id=1), price_point(2, date(2024, 2, 1), 90, asset_id=2)],
        {1: asset_info(1), 2: asset_info(2)},
    )
    assert [h.asset.id for h in overview.holdings] == [2]


def test_inactive_asset_ids():
    positions = aggregate_positions([
        buy(1, date(2024, 1, 1), 5, 10, asset_id=1),
        sell(2, date(2024, 2, 1), 5, 12, asset_id=1),
        buy(3, date(2024, 1, 1), 1, 100, asset_id=2),
    ])
    assert inactive_asset_ids(positions) == {1}


def test_unknown_asset_is_skipped():
    positions = aggregate_positions([buy(1, date(2024, 1, 1), 1, 10, asset_id=99)])
    overview = build_overview(positions, {}, {})
    assert overview.holdings == []
    assert overview.total_invested == 0


def test_allocation_percentages_sum_to_100():
    assets = {
        1: asset_info(1, "stocks"),
        2: asset_info(2, "crypto"),
        3: asset_info(3, "bonds"),
    }
    overview = compute_holdings(
        [
            buy(1, date(2024, 1, 1), 10, 25, asset_id=1),
            buy(2, date(2024, 1, 1), 2, 40, asset_id=2),
            buy(3, date(2024, 1, 1), 1, 100, asset_id=3),
        ],
        [
            price_point(1, date(2024, 2, 1), 30, asset_id=1),
            price_point(2, date(2024, 2, 1), 50, asset_id=2),
            price_point(3, date(2024, 2, 1), 100, asset_id=3),
        ],
        assets,
    )
    allocation = {a.category: a for a in overview.allocation_by_category}
    assert overview.total_value == pytest.approx(500)
    assert allocation["stocks"].percentage == pytest.approx(60)
    assert allocation["crypto"].percentage == pytest.approx(20)
    assert allocation["bonds"].percentage == pytest.approx(20)
    assert sum(a.percentage for a in overview.allocation_by_category) == pytest.approx(100)


def test_allocation_groups_same_category():
    overview = compute_holdings(
        [
            buy(1, date(2024, 1, 1), 1, 10, asset_id=1),
            buy(2, date(2024, 1, 1), 1, 30, asset_id=2),
        ],
        [
            price_point(1, date(2024, 1, 1), 10, asset_id=1),
            price_point(2, date(2024, 1, 1), 30, asset_id=2),
        ],
        {1: asset_info(1, "etf"), 2: asset_info(2, "etf")},
    )
    assert len(overview.allocation_by_category) == 1
    assert overview.allocation_by_category[0].value == pytest.approx(40)
    assert overview.allocation_by_category[0].percentage == pytest.approx(100)


def test_category_is_normalized_from_rows():
    class Row:
        id = 1
        name = "Apple"
        ticker = "AAPL"
        category = "Stock"
        currency = "USD"

    assert AssetInfo.from_row(Row).category == "stocks"


class TestLatestPrices:

    def test_newest_date_wins(self):
        old = price_point(1, date(2024, 1, 1), 10)
        new = price_point(2, date(2024, 3, 1), 12)
        assert latest_prices([new, old])[1] is new

    def test_same_date_uses_creation_time(self):
        early = price_point(5, date(2024, 3, 1), 10, created_at=datetime(2024, 3, 1, 9, 0))
        late = price_point(4, date(2024, 3, 1), 11, created_at=datetime(2024, 3, 1, 18, 0, tzinfo=timezone.utc))
        assert latest_prices([late, early])[1] is late

    def test_same_date_and_time_uses_id(self):
        stamp = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        a = price_point(1, date(2024, 3, 1), 10, created_at=stamp)
        b = price_point(2, date(2024, 3, 1), 11, created_at=stamp)
        assert latest_prices([b, a])[1] is b

    def test_as_of_ignores_future_prices(self):
        jan = price_point(1, date(2024, 1, 31), 10)
        mar = price_point(2, date(2024, 3, 31), 12)
        assert latest_prices([jan, mar], as_of=date(2024, 2, 29))[1] is jan
        assert latest_prices([mar], as_of=date(2024, 2, 29)) == {}


def test_compute_holdings_is_pure():
    txs = [
        buy(1, date(2024, 1, 1), 10, 50, fees=2),
        sell(2, date(2024, 1, 20), 4, 60, fees=1),
        buy(3, date(2024, 2, 1), 3, 20, asset_id=2),
    ]
    prices = [price_point(1, date(2024, 2, 1), 55), price_point(2, date(2024, 2, 1), 18, asset_id=2)]
    assets = {1: asset_info(1), 2: asset_info(2, "crypto")}
    txs_before, prices_before = list(txs), list(prices)

    first = compute_holdings(txs, prices, assets)
    second = compute_holdings(txs, prices, assets)

    assert first == second
    assert txs == txs_before
    assert prices == prices_before
