"""Portfolio overview, closed positions, history and snapshots."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.config import SnapshotBinding, settings
from tracker.engine.aggregator import aggregate_positions
from tracker.engine.cycles import compute_closed_positions
from tracker.engine.income import cash_summary, compute_ytd_dividends
from tracker.engine.records import (
    AssetInfo,
    ClosedPositionCycle,
    DividendRecord,
    PortfolioOverview,
    PricePoint,
    SeriesPoint,
    TransactionRecord,
)
from tracker.engine.snapshots import (
    build_monthly_series,
    category_breakdown,
    compute_overview_as_of,
    generate_asset_checkpoints,
    month_end,
)
from tracker.engine.valuation import build_overview, inactive_asset_ids, latest_prices
from tracker.models.asset import Asset
from tracker.models.asset_snapshot import AssetSnapshot
from tracker.models.cash_movement import CashMovement
from tracker.models.dividend import Dividend
from tracker.models.portfolio_snapshot import PortfolioSnapshot
from tracker.models.price import Price
from tracker.models.transaction import Transaction
from tracker.schemas.portfolio import (
    AssetSnapshotCreate,
    AssetSnapshotUpdate,
    PortfolioSummary,
    SnapshotUpdate,
)
from tracker.services.account_service import get_default_account
from tracker.services.transaction_service import to_records

logger = logging.getLogger(__name__)


class PortfolioService:

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── engine inputs ──────────────────────────────────────────

    async def _transactions(self) -> list[TransactionRecord]:
        rows = (await self.session.execute(select(Transaction))).scalars().all()
        return to_records(rows)

    async def _prices(self) -> list[PricePoint]:
        rows = (await self.session.execute(select(Price))).scalars().all()
        return [PricePoint.from_row(p) for p in rows]

    async def _assets(self) -> dict[int, AssetInfo]:
        rows = (await self.session.execute(select(Asset))).scalars().all()
        return {a.id: AssetInfo.from_row(a) for a in rows}

    async def _dividends(self) -> list[DividendRecord]:
        rows = (await self.session.execute(select(Dividend))).scalars().all()
        return [DividendRecord.from_row(d) for d in rows]

    # ── overview ───────────────────────────────────────────────

    async def get_overview(self, today: date | None = None) -> PortfolioOverview:
        """Live overview. Prices of positions that have been sold out are deleted."""
        today = today or date.today()
        positions = aggregate_positions(await self._transactions())

        closed = inactive_asset_ids(positions)
        if closed:
            await self.session.execute(delete(Price).where(Price.asset_id.in_(closed)))
            await self.session.commit()
            logger.debug("Cleared prices for closed positions %s", sorted(closed))

        return build_overview(
            positions,
            latest_prices(await self._prices()),
            await self._assets(),
            ytd_dividends=compute_ytd_dividends(await self._dividends(), today.year),
        )

    async def get_overview_as_of(self, as_of: date) -> PortfolioOverview:
        return compute_overview_as_of(
            await self._transactions(),
            await self._prices(),
            await self._assets(),
            as_of,
            dividends=await self._dividends(),
        )

    async def get_closed_positions(self) -> list[ClosedPositionCycle]:
        return compute_closed_positions(await self._transactions(), await self._assets())

    async def delete_closed_position(self, cycle_id: str) -> int:
        """Delete the transactions that make up a closed cycle."""
        cycle = next(
            (c for c in await self.get_closed_positions() if c.cycle_id == cycle_id),
            None,
        )
        if cycle is None:
            raise ValueError(f"Closed position {cycle_id} not found")

        await self.session.execute(
            delete(Transaction).where(Transaction.id.in_(cycle.transaction_ids))
        )
        await self.session.commit()
        logger.info("Deleted closed position %s (%d transactions)", cycle_id, len(cycle.transaction_ids))
        return len(cycle.transaction_ids)

    async def get_summary(self, today: date | None = None) -> PortfolioSummary:
        overview = await self.get_overview(today)
        closed = await self.get_closed_positions()
        transactions = await self._transactions()
        cash = cash_summary(
            (await self.session.execute(select(CashMovement))).scalars().all()
        )

        unrealized_pl = sum(h.unrealized_pl for h in overview.holdings)
        realized_pl = sum(c.realized_pl for c in closed)
        return PortfolioSummary(
            total_value=overview.total_value,
            total_invested=overview.total_invested,
            unrealized_pl=unrealized_pl,
            realized_pl=realized_pl,
            total_pl=realized_pl + unrealized_pl,
            total_fees=sum(t.fees for t in transactions),
            net_deposited=cash["balance"],
            ytd_dividends=overview.ytd_dividends,
            assets_up=sum(1 for h in overview.holdings if h.unrealized_pl > 0),
            assets_down=sum(1 for h in overview.holdings if h.unrealized_pl < 0),
            open_positions=len(overview.holdings),
            closed_positions=len(closed),
        )

    async def get_history(self, end: date | None = None) -> list[SeriesPoint]:
        return build_monthly_series(
            await self._transactions(),
            await self._prices(),
            await self._assets(),
            end or date.today(),
        )

    # ── portfolio snapshots ────────────────────────────────────

    async def create_snapshot(
        self,
        month: int,
        year: int,
        today: date | None = None,
    ) -> PortfolioSnapshot:
        today = today or date.today()
        account = await get_default_account(self.session)

        if settings.snapshot_binding == SnapshotBinding.CURRENT:
            overview = await self.get_overview(today)
            logger.info("Snapshot %d/%d taken from the live overview", month, year)
        else:
            as_of = min(month_end(year, month), today)
            overview = await self.get_overview_as_of(as_of)
            logger.info("Snapshot %d/%d computed as of %s", month, year, as_of)

        breakdown = category_breakdown(overview.holdings)
        details = {category: totals.assets for category, totals in breakdown.items()}
        details["invested"] = {c: t.invested for c, t in breakdown.items()}
        details["pl"] = {c: t.pl for c, t in breakdown.items()}
        details["plPercent"] = {c: t.pl_percent for c, t in breakdown.items()}

        snapshot = PortfolioSnapshot(
            account_id=account.id,
            month=month,
            year=year,
            total_value=overview.total_value,
            total_invested=overview.total_invested,
            total_pl=overview.total_pl,
            total_pl_percent=overview.total_pl_percent,
            stocks_value=breakdown["stocks"].value,
            etf_value=breakdown["etf"].value,
            crypto_value=breakdown["crypto"].value,
            bonds_value=breakdown["bonds"].value,
            category_details=json.dumps(details),
        )
        self.session.add(snapshot)
        await self.session.commit()
        return snapshot

    async def take_monthly_snapshot(self, today: date | None = None) -> PortfolioSnapshot | None:
        """Store the previous month's snapshot unless one already exists."""
        today = today or date.today()
        year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)

        existing = await self.session.execute(
            select(PortfolioSnapshot.id).where(
                PortfolioSnapshot.year == year,
                PortfolioSnapshot.month == month,
            )
        )
        if existing.first() is not None:
            logger.info("Snapshot for %d/%d already exists", month, year)
            return None
        return await self.create_snapshot(month, year, today=today)

    async def get_snapshots(self) -> list[PortfolioSnapshot]:
        result = await self.session.execute(
            select(PortfolioSnapshot).order_by(
                PortfolioSnapshot.year.desc(),
                PortfolioSnapshot.month.desc(),
                PortfolioSnapshot.id.desc(),
            )
        )
        return list(result.scalars().all())

    async def _get_snapshot(self, snapshot_id: int) -> PortfolioSnapshot:
        result = await self.session.execute(
            select(PortfolioSnapshot).where(PortfolioSnapshot.id == snapshot_id)
        )
        snapshot = result.scalar_one_or_none()
        if not snapshot:
            raise ValueError(f"Portfolio snapshot {snapshot_id} not found")
        return snapshot

    async def update_snapshot(self, snapshot_id: int, req: SnapshotUpdate) -> PortfolioSnapshot:
        snapshot = await self._get_snapshot(snapshot_id)
        for field, value in req.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(snapshot, field, value)
        await self.session.commit()
        return snapshot

    async def delete_snapshot(self, snapshot_id: int) -> None:
        snapshot = await self._get_snapshot(snapshot_id)
        await self.session.delete(snapshot)
        await self.session.commit()

    # ── asset snapshots ────────────────────────────────────────

    async def _require_asset(self, asset_id: int) -> Asset:
        result = await self.session.execute(select(Asset).where(Asset.id == asset_id))
        asset = result.scalar_one_or_none()
        if not asset:
            raise ValueError(f"Asset {asset_id} not found")
        return asset

    async def get_asset_snapshots(self, asset_id: int) -> list[AssetSnapshot]:
        result = await self.session.execute(
            select(AssetSnapshot)
            .where(AssetSnapshot.asset_id == asset_id)
            .order_by(AssetSnapshot.date.desc())
        )
        return list(result.scalars().all())

    async def create_asset_snapshot(self, asset_id: int, req: AssetSnapshotCreate) -> AssetSnapshot:
        account = await get_default_account(self.session)
        await self._require_asset(asset_id)
        snapshot = AssetSnapshot(account_id=account.id, asset_id=asset_id, **req.model_dump())
        self.session.add(snapshot)
        await self.session.commit()
        return snapshot

    async def _get_asset_snapshot(self, asset_id: int, snapshot_id: int) -> AssetSnapshot:
        result = await self.session.execute(
            select(AssetSnapshot).where(
                AssetSnapshot.id == snapshot_id,
                AssetSnapshot.asset_id == asset_id,
            )
        )
        snapshot = result.scalar_one_or_none()
        if not snapshot:
            raise ValueError(f"Asset snapshot {snapshot_id} not found")
        return snapshot

    async def update_asset_snapshot(
        self,
        asset_id: int,
        snapshot_id: int,
        req: AssetSnapshotUpdate,
    ) -> AssetSnapshot:
        snapshot = await self._get_asset_snapshot(asset_id, snapshot_id)
        for field, value in req.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(snapshot, field, value)
        await self.session.commit()
        return snapshot

    async def delete_asset_snapshot(self, asset_id: int, snapshot_id: int) -> None:
        snapshot = await self._get_asset_snapshot(asset_id, snapshot_id)
        await self.session.delete(snapshot)
        await self.session.commit()

    async def generate_asset_snapshots(
        self,
        asset_id: int,
        today: date | None = None,
    ) -> list[AssetSnapshot]:
        """Rebuild monthly snapshots for one asset.

        Every stored row from the month of the first trade onwards is replaced,
        including rows a mid-month run dated on that day.
        """
        account = await get_default_account(self.session)
        await self._require_asset(asset_id)

        transactions = [t for t in await self._transactions() if t.asset_id == asset_id]
        checkpoints = generate_asset_checkpoints(
            asset_id,
            transactions,
            await self._prices(),
            today or date.today(),
        )
        if transactions:
            first = min(t.date for t in transactions)
            await self.session.execute(
                delete(AssetSnapshot).where(
                    AssetSnapshot.asset_id == asset_id,
                    AssetSnapshot.date >= first.replace(day=1),
                )
            )

        snapshots = [AssetSnapshot(account_id=account.id, **asdict(c)) for c in checkpoints]
        self.session.add_all(snapshots)
        await self.session.commit()
        logger.info("Generated %d snapshots for asset %s", len(snapshots), asset_id)
        return snapshots
