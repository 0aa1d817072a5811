"""Transaction CRUD service: asset check → sell quantity check → persist."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.engine.aggregator import aggregate_position, clamped_sells
from tracker.engine.records import TransactionRecord
from tracker.models.asset import Asset
from tracker.models.transaction import Transaction
from tracker.schemas.common import TransactionType
from tracker.schemas.transaction import TransactionCreate, TransactionUpdate
from tracker.services.account_service import get_default_account

logger = logging.getLogger(__name__)


def to_records(rows) -> list[TransactionRecord]:
    """Convert rows to engine records, skipping rows with an unknown type."""
    records = []
    for row in rows:
        try:
            records.append(TransactionRecord.from_row(row))
        except ValueError:
            logger.warning("Skipping transaction %s with unknown type %r", row.id, row.type)
    return records


class TransactionService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _require_asset(self, asset_id: int) -> Asset:
        result = await self.session.execute(select(Asset).where(Asset.id == asset_id))
        asset = result.scalar_one_or_none()
        if not asset:
            raise ValueError(f"Asset {asset_id} not found")
        return asset

    async def _check_sell(self, asset: Asset, req: TransactionCreate) -> None:
        """Reject a sell that is not covered on its date or that uncovers a later sell.

        Edits and deletes are not re-checked; the engine clamps such history.
        """
        rows = (await self.session.execute(
            select(Transaction).where(Transaction.asset_id == asset.id)
        )).scalars().all()
        existing = to_records(rows)
        # new rows get the highest id, so the sell replays last on its date
        candidate = TransactionRecord(
            id=max((t.id for t in existing), default=0) + 1,
            asset_id=asset.id,
            type=TransactionType.SELL,
            date=req.date,
            quantity=req.quantity,
            unit_price=req.unit_price,
            fees=req.fees,
        )

        already = {t.id for t in clamped_sells(existing)}
        uncovered = [t for t in clamped_sells([*existing, candidate]) if t.id not in already]
        if not uncovered:
            return

        if uncovered[0].id == candidate.id:
            held = aggregate_position((t for t in existing if t.date <= req.date), asset.id).quantity
            raise ValueError(
                f"Insufficient position in {asset.ticker}: held {held:g}, selling {req.quantity:g}"
            )
        raise ValueError(
            f"Insufficient position in {asset.ticker}: selling {req.quantity:g} on {req.date} "
            f"leaves the sell of {uncovered[0].quantity:g} on {uncovered[0].date} uncovered"
        )

    async def create(self, req: TransactionCreate) -> Transaction:
        account = await get_default_account(self.session)
        asset = await self._require_asset(req.asset_id)

        if req.type == TransactionType.SELL:
            await self._check_sell(asset, req)

        tx = Transaction(
            account_id=account.id,
            asset_id=asset.id,
            date=req.date,
            type=req.type.value,
            quantity=req.quantity,
            unit_price=req.unit_price,
            fees=req.fees,
        )
        self.session.add(tx)
        await self.session.commit()
        logger.info("Recorded %s %g %s @ %g", tx.type, tx.quantity, asset.ticker, tx.unit_price)
        return tx

    async def get(self, tx_id: int) -> Transaction | None:
        result = await self.session.execute(select(Transaction).where(Transaction.id == tx_id))
        return result.scalar_one_or_none()

    async def list_all(self, asset_id: int | None = None) -> list[Transaction]:
        stmt = select(Transaction).order_by(Transaction.date.desc(), Transaction.id.desc())
        if asset_id is not None:
            stmt = stmt.where(Transaction.asset_id == asset_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, tx_id: int, req: TransactionUpdate) -> Transaction:
        tx = await self.get(tx_id)
        if not tx:
            raise ValueError(f"Transaction {tx_id} not found")

        changes = req.model_dump(exclude_unset=True, exclude_none=True)
        if "asset_id" in changes:
            await self._require_asset(changes["asset_id"])
        if "type" in changes:
            changes["type"] = changes["type"].value
        for field, value in changes.items():
            setattr(tx, field, value)

        await self.session.commit()
        return tx

    async def delete(self, tx_id: int) -> None:
        tx = await self.get(tx_id)
        if not tx:
            raise ValueError(f"Transaction {tx_id} not found")
        await self.session.delete(tx)
        await self.session.commit()
