"""Dividend CRUD and income summary."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.engine.income import dividends_summary
from tracker.engine.records import DividendRecord
from tracker.models.asset import Asset
from tracker.models.dividend import Dividend
from tracker.schemas.dividend import DividendCreate, DividendUpdate
from tracker.services.account_service import get_default_account

logger = logging.getLogger(__name__)


class DividendService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _require_asset(self, asset_id: int) -> None:
        result = await self.session.execute(select(Asset.id).where(Asset.id == asset_id))
        if result.scalar_one_or_none() is None:
            raise ValueError(f"Asset {asset_id} not found")

    async def create(self, req: DividendCreate) -> Dividend:
        account = await get_default_account(self.session)
        await self._require_asset(req.asset_id)
        dividend = Dividend(
            account_id=account.id,
            asset_id=req.asset_id,
            payment_date=req.payment_date,
            amount=req.amount,
            currency=req.currency.upper(),
            notes=req.notes,
        )
        self.session.add(dividend)
        await self.session.commit()
        logger.info("Recorded dividend %g %s for asset %s", dividend.amount, dividend.currency, dividend.asset_id)
        return dividend

    async def get(self, dividend_id: int) -> Dividend | None:
        result = await self.session.execute(select(Dividend).where(Dividend.id == dividend_id))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Dividend]:
        result = await self.session.execute(
            select(Dividend).order_by(Dividend.payment_date.desc(), Dividend.id.desc())
        )
        return list(result.scalars().all())

    async def update(self, dividend_id: int, req: DividendUpdate) -> Dividend:
        dividend = await self.get(dividend_id)
        if not dividend:
            raise ValueError(f"Dividend {dividend_id} not found")
        changes = req.model_dump(exclude_unset=True, exclude_none=True)
        if "asset_id" in changes:
            await self._require_asset(changes["asset_id"])
        for field, value in changes.items():
            setattr(dividend, field, value)
        await self.session.commit()
        return dividend

    async def delete(self, dividend_id: int) -> None:
        dividend = await self.get(dividend_id)
        if not dividend:
            raise ValueError(f"Dividend {dividend_id} not found")
        await self.session.delete(dividend)
        await self.session.commit()

    async def records(self) -> list[DividendRecord]:
        return [DividendRecord.from_row(d) for d in await self.list_all()]

    async def get_summary(self, today: date | None = None) -> dict:
        return dividends_summary(await self.records(), today or date.today())
