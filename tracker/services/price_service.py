"""Manual price entry. Every update is kept so past month ends can be valued."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models.asset import Asset
from tracker.models.price import Price
from tracker.schemas.price import PriceCreate, PriceUpdate
from tracker.services.account_service import get_default_account

logger = logging.getLogger(__name__)


class PriceService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> list[Price]:
        result = await self.session.execute(
            select(Price).order_by(Price.date.desc(), Price.id.desc())
        )
        return list(result.scalars().all())

    async def set_price(self, req: PriceCreate) -> Price:
        """Record a new price; the newest by date becomes the current one."""
        account = await get_default_account(self.session)
        asset = (await self.session.execute(
            select(Asset).where(Asset.id == req.asset_id)
        )).scalar_one_or_none()
        if not asset:
            raise ValueError(f"Asset {req.asset_id} not found")

        price = Price(
            account_id=account.id,
            asset_id=asset.id,
            date=req.date,
            close_price=req.close_price,
        )
        self.session.add(price)
        await self.session.commit()
        logger.info("Price for %s set to %g (%s)", asset.ticker, price.close_price, price.date)
        return price

    async def update(self, price_id: int, req: PriceUpdate) -> Price:
        result = await self.session.execute(select(Price).where(Price.id == price_id))
        price = result.scalar_one_or_none()
        if not price:
            raise ValueError(f"Price {price_id} not found")

        for field, value in req.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(price, field, value)
        await self.session.commit()
        return price
