"""Dividend and cash-movement totals."""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date
from typing import Any

from tracker.engine.records import DividendRecord, to_float
from tracker.schemas.common import CashMovementType


def compute_ytd_dividends(
    dividends: Iterable[DividendRecord],
    year: int,
    as_of: date | None = None,
) -> float:
    return sum(
        (d.amount for d in dividends
         if d.payment_date.year == year and (as_of is None or d.payment_date <= as_of)),
        0.0,
    )


def _months_back(day: date, months: int) -> date:
    year, month = day.year, day.month - months
    while month <= 0:
        year, month = year - 1, month + 12
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def dividends_summary(dividends: Iterable[DividendRecord], today: date) -> dict:
    """Year-to-date, this month, and average per paying month over the last 12 months."""
    items = list(dividends)
    ytd = compute_ytd_dividends(items, today.year, as_of=today)
    this_month = sum(
        (d.amount for d in items
         if (d.payment_date.year, d.payment_date.month) == (today.year, today.month)
         and d.payment_date <= today),
        0.0,
    )

    window_start = _months_back(today, 12)
    recent = [d for d in items if window_start <= d.payment_date <= today]
    months = {(d.payment_date.year, d.payment_date.month) for d in recent}
    avg_monthly = sum(d.amount for d in recent) / len(months) if months else 0.0

    return {"ytd": ytd, "this_month": this_month, "avg_monthly": avg_monthly}


def cash_summary(movements: Iterable[Any]) -> dict:
    """Deposits, withdrawals and net balance of recorded cash movements."""
    deposits = 0.0
    withdrawals = 0.0
    for movement in movements:
        amount = to_float(movement.amount)
        if movement.type == CashMovementType.DEPOSIT.value:
            deposits += amount
        elif movement.type == CashMovementType.WITHDRAW.value:
            withdrawals += amount
    return {
        "total_deposits": deposits,
        "total_withdrawals": withdrawals,
        "balance": deposits - withdrawals,
    }
