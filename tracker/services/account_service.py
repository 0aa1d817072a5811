"""Default account lookup and portfolio naming."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models.account import Account

logger = logging.getLogger(__name__)


async def get_default_account(session: AsyncSession) -> Account:
    result = await session.execute(select(Account).order_by(Account.id).limit(1))
    account = result.scalar_one_or_none()
    if not account:
        raise ValueError("No account found")
    return account


class AccountService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def ensure_default(self, name: str, portfolio_name: str, base_currency: str) -> Account:
        result = await self.session.execute(select(Account).where(Account.name == name))
        account = result.scalar_one_or_none()
        if account is None:
            account = Account(name=name, portfolio_name=portfolio_name, base_currency=base_currency)
            self.session.add(account)
            await self.session.commit()
            logger.info("Created default account %r", name)
        return account

    async def get(self) -> Account:
        return await get_default_account(self.session)

    async def rename_portfolio(self, portfolio_name: str) -> Account:
        account = await get_default_account(self.session)
        account.portfolio_name = portfolio_name.strip()
        await self.session.commit()
        return account
