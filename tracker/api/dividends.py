from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.database import get_session
from tracker.schemas.dividend import (
    DividendCreate,
    DividendResponse,
    DividendsSummary,
    DividendUpdate,
)
from tracker.services.dividend_service import DividendService

router = APIRouter(prefix="/dividends", tags=["dividends"])


@router.get("", response_model=list[DividendResponse], summary="List dividends")
async def list_dividends(session: AsyncSession = Depends(get_session)):
    svc = DividendService(session)
    return await svc.list_all()


@router.get(
    "/summary",
    response_model=DividendsSummary,
    summary="Dividend income summary",
    description="Year-to-date, current month, and average per paying month over the last 12 months.",
)
async def dividends_summary(session: AsyncSession = Depends(get_session)):
    svc = DividendService(session)
    return DividendsSummary(**await svc.get_summary())


@router.post("", response_model=DividendResponse, summary="Record a dividend")
async def create_dividend(
    req: DividendCreate,
    session: AsyncSession = Depends(get_session),
):
    svc = DividendService(session)
    try:
        return await svc.create(req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{dividend_id}", response_model=DividendResponse, summary="Edit a dividend")
async def update_dividend(
    dividend_id: int,
    req: DividendUpdate,
    session: AsyncSession = Depends(get_session),
):
    svc = DividendService(session)
    try:
        return await svc.update(dividend_id, req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{dividend_id}", summary="Delete a dividend")
async def delete_dividend(dividend_id: int, session: AsyncSession = Depends(get_session)):
    svc = DividendService(session)
    try:
        await svc.delete(dividend_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted"}
