"""Asset CRUD service."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models.asset import Asset
from tracker.models.asset_snapshot import AssetSnapshot
from tracker.models.dividend import Dividend
from tracker.models.price import Price
from tracker.models.transaction import Transaction
from tracker.schemas.asset import AssetCreate, AssetUpdate
from tracker.services.account_service import get_default_account

logger = logging.getLogger(__name__)


class AssetService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, req: AssetCreate) -> Asset:
        account = await get_default_account(self.session)
        asset = Asset(
            account_id=account.id,
            name=req.name.strip(),
            ticker=req.ticker.upper().strip(),
            isin=req.isin.upper().strip() if req.isin else None,
            category=req.category,
            sector=req.sector,
            region=req.region,
            currency=req.currency.upper(),
            notes=req.notes,
        )
        self.session.add(asset)
        await self.session.commit()
        logger.info("Created asset %s (%s)", asset.ticker, asset.category)
        return asset

    async def get(self, asset_id: int) -> Asset | None:
        result = await self.session.execute(select(Asset).where(Asset.id == asset_id))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Asset]:
        result = await self.session.execute(select(Asset).order_by(Asset.name, Asset.id))
        return list(result.scalars().all())

    async def update(self, asset_id: int, req: AssetUpdate) -> Asset:
        asset = await self.get(asset_id)
        if not asset:
            raise ValueError(f"Asset {asset_id} not found")

        for field, value in req.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "ticker", "category", "currency"):
                continue
            if field == "ticker":
                value = value.upper().strip()
            setattr(asset, field, value)

        await self.session.commit()
        return asset

    async def delete(self, asset_id: int) -> None:
        asset = await self.get(asset_id)
        if not asset:
            raise ValueError(f"Asset {asset_id} not found")

        # dependent rows first (foreign keys are enforced)
        for model in (Transaction, Price, Dividend, AssetSnapshot):
            await self.session.execute(delete(model).where(model.asset_id == asset_id))
        await self.session.delete(asset)
        await self.session.commit()
        logger.info("Deleted asset %s and its history", asset.ticker)
