from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.config import settings
from tracker.database import get_session
from tracker.schemas.account import AccountResponse, AccountUpdate
from tracker.services.account_service import AccountService

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    summary="Health check",
    description="Returns service status and the active snapshot binding.",
)
async def health():
    return {
        "status": "ok",
        "snapshot_binding": settings.snapshot_binding.value,
        "version": "0.1.0",
    }


@router.get("/account", response_model=AccountResponse, summary="Portfolio account")
async def get_account(session: AsyncSession = Depends(get_session)):
    svc = AccountService(session)
    try:
        return await svc.get()
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/account", response_model=AccountResponse, summary="Rename the portfolio")
async def update_account(
    req: AccountUpdate,
    session: AsyncSession = Depends(get_session),
):
    svc = AccountService(session)
    try:
        return await svc.rename_portfolio(req.portfolio_name)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
