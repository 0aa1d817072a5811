from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.database import get_session
from tracker.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate
from tracker.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get(
    "",
    response_model=list[TransactionResponse],
    summary="List transactions",
    description="Newest first. Filter by asset with asset_id.",
)
async def list_transactions(
    asset_id: int | None = None,
    session: AsyncSession = Depends(get_session),
):
    svc = TransactionService(session)
    return await svc.list_all(asset_id=asset_id)


@router.post(
    "",
    response_model=TransactionResponse,
    summary="Record a buy or sell",
    description="A sell is rejected with 400 when it exceeds the quantity held on its date.",
)
async def create_transaction(
    req: TransactionCreate,
    session: AsyncSession = Depends(get_session),
):
    svc = TransactionService(session)
    try:
        return await svc.create(req)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{tx_id}", response_model=TransactionResponse, summary="Edit a transaction")
async def update_transaction(
    tx_id: int,
    req: TransactionUpdate,
    session: AsyncSession = Depends(get_session),
):
    svc = TransactionService(session)
    try:
        return await svc.update(tx_id, req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{tx_id}", summary="Delete a transaction")
async def delete_transaction(tx_id: int, session: AsyncSession = Depends(get_session)):
    svc = TransactionService(session)
    try:
        await svc.delete(tx_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted"}
