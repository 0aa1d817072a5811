"""Cash deposits and withdrawals."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.engine.income import cash_summary
from tracker.models.cash_movement import CashMovement
from tracker.schemas.cash import CashMovementCreate, CashMovementUpdate
from tracker.services.account_service import get_default_account


class CashService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, req: CashMovementCreate) -> CashMovement:
        account = await get_default_account(self.session)
        movement = CashMovement(
            account_id=account.id,
            date=req.date,
            type=req.type.value,
            amount=req.amount,
            currency=req.currency.upper(),
        )
        self.session.add(movement)
        await self.session.commit()
        return movement

    async def get(self, movement_id: int) -> CashMovement | None:
        result = await self.session.execute(
            select(CashMovement).where(CashMovement.id == movement_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[CashMovement]:
        result = await self.session.execute(
            select(CashMovement).order_by(CashMovement.date.desc(), CashMovement.id.desc())
        )
        return list(result.scalars().all())

    async def update(self, movement_id: int, req: CashMovementUpdate) -> CashMovement:
        movement = await self.get(movement_id)
        if not movement:
            raise ValueError(f"Cash movement {movement_id} not found")
        changes = req.model_dump(exclude_unset=True, exclude_none=True)
        if "type" in changes:
            changes["type"] = changes["type"].value
        for field, value in changes.items():
            setattr(movement, field, value)
        await self.session.commit()
        return movement

    async def delete(self, movement_id: int) -> None:
        movement = await self.get(movement_id)
        if not movement:
            raise ValueError(f"Cash movement {movement_id} not found")
        await self.session.delete(movement)
        await self.session.commit()

    async def get_summary(self) -> dict:
        return cash_summary(await self.list_all())
