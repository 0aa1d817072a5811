"""Closed-position cycle detection."""

from datetime import date

import pytest

from tests.builders import asset_info, buy, sell
from tracker.engine.cycles import compute_closed_positions, detect_cycles, make_cycle_id


def test_single_round_trip():
    cycles = detect_cycles(asset_info(1), [
        buy(1, date(2024, 1, 10), 10, 100, fees=1),
        sell(2, date(2024, 3, 10), 10, 120, fees=2),
    ])
    assert len(cycles) == 1
    c = cycles[0]
    assert c.total_bought == 10
    assert c.total_sold == 10
    assert c.avg_buy_price == pytest.approx(100)
    assert c.avg_sell_price == pytest.approx(120)
    assert c.realized_pl == pytest.approx(197)
    assert c.realized_pl_percent == pytest.approx(197 / 1001 * 100)
    assert c.holding_period_days == 60
    assert c.first_buy_date == date(2024, 1, 10)
    assert c.last_sell_date == date(2024, 3, 10)
    assert c.cycle_id == "1-1-2024-01-10"
    assert c.transaction_ids == [1, 2]


def test_oversell_closes_with_held_quantity():
    cycles = detect_cycles(asset_info(1), [
        buy(1, date(2024, 1, 1), 5, 10),
        sell(2, date(2024, 1, 15), 8, 12),
    ])
    assert len(cycles) == 1
    assert cycles[0].total_bought == 5
    assert cycles[0].total_sold == 5
    assert cycles[0].realized_pl == pytest.approx(10)


def test_oversell_fee_is_prorated():
    cycles = detect_cycles(asset_info(1), [
        buy(1, date(2024, 1, 1), 5, 10),
        sell(2, date(2024, 1, 15), 8, 12, fees=4),
    ])
    assert cycles[0].realized_pl == pytest.approx(7.5)


def test_open_position_produces_no_cycle():
    cycles = detect_cycles(asset_info(1), [
        buy(1, date(2024, 1, 1), 10, 10),
        sell(2, date(2024, 2, 1), 4, 12),
    ])
    assert cycles == []


def test_partial_sells_report_closing_tranche():
    # Earlier partial exits are not folded into the cycle figures
    cycles = detect_cycles(asset_info(1), [
        buy(1, date(2024, 1, 1), 10, 10),
        sell(2, date(2024, 2, 1), 5, 12),
        sell(3, date(2024, 3, 1), 5, 14),
    ])
    assert len(cycles) == 1
    c = cycles[0]
    assert c.total_bought == 5
    assert c.realized_pl == pytest.approx(20)
    assert c.avg_sell_price == 14
    assert c.transaction_ids == [1, 2, 3]


def test_sell_while_flat_is_ignored():
    cycles = detect_cycles(asset_info(1), [
        sell(1, date(2024, 1, 1), 3, 10),
        buy(2, date(2024, 1, 2), 3, 10),
        sell(3, date(2024, 1, 3), 3, 11),
    ])
    assert len(cycles) == 1
    assert cycles[0].transaction_ids == [2, 3]
    assert cycles[0].first_buy_date == date(2024, 1, 2)


def _two_cycles():
    return [
        buy(1, date(2024, 1, 1), 10, 10),
        sell(2, date(2024, 2, 1), 10, 15),
        buy(3, date(2024, 3, 1), 4, 20),
        sell(4, date(2024, 4, 1), 4, 18),
    ]


def test_repeated_cycles_get_unique_ids():
    cycles = detect_cycles(asset_info(1), _two_cycles())
    assert [c.cycle_id for c in cycles] == ["1-1-2024-01-01", "1-2-2024-03-01"]
    assert cycles[0].realized_pl == pytest.approx(50)
    assert cycles[1].realized_pl == pytest.approx(-8)
    assert cycles[1].transaction_ids == [3, 4]


def test_closed_positions_sorted_by_exit_date():
    txs = _two_cycles() + [
        buy(5, date(2024, 2, 10), 1, 100, asset_id=2),
        sell(6, date(2024, 3, 15), 1, 110, asset_id=2),
    ]
    closed = compute_closed_positions(txs, {1: asset_info(1), 2: asset_info(2)})
    assert [c.last_sell_date for c in closed] == [
        date(2024, 4, 1), date(2024, 3, 15), date(2024, 2, 1),
    ]
    assert len({c.cycle_id for c in closed}) == 3


def test_closed_positions_skip_unknown_assets():
    closed = compute_closed_positions(_two_cycles(), {})
    assert closed == []


def test_cycles_are_deterministic():
    txs = _two_cycles()
    assets = {1: asset_info(1)}
    assert compute_closed_positions(txs, assets) == compute_closed_positions(list(reversed(txs)), assets)


def test_make_cycle_id():
    assert make_cycle_id(12, 3, date(2023, 7, 4)) == "12-3-2023-07-04"


def test_closed_positions_conserve_quantity_and_are_pure():
    txs = _two_cycles() + [
        buy(5, date(2024, 1, 5), 5, 10, asset_id=2),
        sell(6, date(2024, 2, 5), 8, 12, asset_id=2),
        buy(7, date(2024, 3, 5), 2, 10, asset_id=2),
        sell(8, date(2024, 3, 6), 1, 11, asset_id=2),
        sell(9, date(2024, 3, 7), 1, 9, asset_id=2),
    ]
    before = list(txs)
    assets = {1: asset_info(1), 2: asset_info(2)}

    closed = compute_closed_positions(txs, assets)

    assert len(closed) == 4
    for cycle in closed:
        assert cycle.total_bought == pytest.approx(cycle.total_sold)
        assert cycle.holding_period_days >= 0
    assert compute_closed_positions(txs, assets) == closed
    assert txs == before


def test_dust_close_lets_next_buy_open_a_new_cycle():
    cycles = detect_cycles(asset_info(1), [
        buy(1, date(2024, 1, 1), 1, 100),
        sell(2, date(2024, 1, 2), 0.9995, 110),
        buy(3, date(2024, 2, 1), 2, 50),
        sell(4, date(2024, 2, 2), 2, 55),
    ])
    assert [c.cycle_id for c in cycles] == ["1-1-2024-01-01", "1-2-2024-02-01"]
    assert cycles[1].transaction_ids == [3, 4]
    assert cycles[1].realized_pl == pytest.approx(10)
