from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.database import get_session
from tracker.schemas.price import PriceCreate, PriceResponse, PriceUpdate
from tracker.services.price_service import PriceService

router = APIRouter(prefix="/prices", tags=["prices"])


@router.get("", response_model=list[PriceResponse], summary="List recorded prices")
async def list_prices(session: AsyncSession = Depends(get_session)):
    svc = PriceService(session)
    return await svc.list_all()


@router.post(
    "",
    response_model=PriceResponse,
    summary="Set the current price of an asset",
    description="Earlier prices are kept as history; the newest by date is used as the current price.",
)
async def set_price(
    req: PriceCreate,
    session: AsyncSession = Depends(get_session),
):
    svc = PriceService(session)
    try:
        return await svc.set_price(req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{price_id}", response_model=PriceResponse, summary="Edit a price")
async def update_price(
    price_id: int,
    req: PriceUpdate,
    session: AsyncSession = Depends(get_session),
):
    svc = PriceService(session)
    try:
        return await svc.update(price_id, req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
