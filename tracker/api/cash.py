from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.database import get_session
from tracker.schemas.cash import (
    CashMovementCreate,
    CashMovementResponse,
    CashMovementUpdate,
    CashSummary,
)
from tracker.services.cash_service import CashService

router = APIRouter(prefix="/cash-movements", tags=["cash"])


@router.get("", response_model=list[CashMovementResponse], summary="List cash movements")
async def list_cash_movements(session: AsyncSession = Depends(get_session)):
    svc = CashService(session)
    return await svc.list_all()


@router.get("/summary", response_model=CashSummary, summary="Deposits, withdrawals and balance")
async def cash_summary(session: AsyncSession = Depends(get_session)):
    svc = CashService(session)
    return CashSummary(**await svc.get_summary())


@router.post("", response_model=CashMovementResponse, summary="Record a deposit or withdrawal")
async def create_cash_movement(
    req: CashMovementCreate,
    session: AsyncSession = Depends(get_session),
):
    svc = CashService(session)
    return await svc.create(req)


@router.patch("/{movement_id}", response_model=CashMovementResponse, summary="Edit a cash movement")
async def update_cash_movement(
    movement_id: int,
    req: CashMovementUpdate,
    session: AsyncSession = Depends(get_session),
):
    svc = CashService(session)
    try:
        return await svc.update(movement_id, req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{movement_id}", summary="Delete a cash movement")
async def delete_cash_movement(movement_id: int, session: AsyncSession = Depends(get_session)):
    svc = CashService(session)
    try:
        await svc.delete(movement_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted"}
