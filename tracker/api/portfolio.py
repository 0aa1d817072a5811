from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.database import get_session
from tracker.schemas.portfolio import (
    ClosedPositionResponse,
    PortfolioOverviewResponse,
    PortfolioSummary,
    SeriesPointResponse,
    SnapshotCreate,
    SnapshotResponse,
    SnapshotUpdate,
)
from tracker.services.portfolio_service import PortfolioService

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get(
    "/overview",
    response_model=PortfolioOverviewResponse,
    summary="Portfolio overview",
    description="Holdings, totals and category allocation replayed from the full transaction history. "
                "With as_of, only transactions and prices dated on or before that day are used.",
)
async def portfolio_overview(
    as_of: date | None = None,
    session: AsyncSession = Depends(get_session),
):
    svc = PortfolioService(session)
    if as_of is not None:
        overview = await svc.get_overview_as_of(as_of)
    else:
        overview = await svc.get_overview()
    return PortfolioOverviewResponse.model_validate(overview)


@router.get(
    "/summary",
    response_model=PortfolioSummary,
    summary="Dashboard summary",
    description="Realized and unrealized P&L, fees, net deposits and dividend income.",
)
async def portfolio_summary(session: AsyncSession = Depends(get_session)):
    svc = PortfolioService(session)
    return await svc.get_summary()


@router.get(
    "/history",
    response_model=list[SeriesPointResponse],
    summary="Monthly value history",
    description="Portfolio totals at every month end from the first transaction until today.",
)
async def portfolio_history(session: AsyncSession = Depends(get_session)):
    svc = PortfolioService(session)
    return [SeriesPointResponse.model_validate(p) for p in await svc.get_history()]


@router.get(
    "/closed-positions",
    response_model=list[ClosedPositionResponse],
    summary="Closed positions",
    description="One entry per completed buy→sell-out cycle, most recent exit first.",
)
async def closed_positions(session: AsyncSession = Depends(get_session)):
    svc = PortfolioService(session)
    return [ClosedPositionResponse.model_validate(c) for c in await svc.get_closed_positions()]


@router.delete(
    "/closed-positions/{cycle_id}",
    summary="Delete a closed position",
    description="Removes the buy and sell transactions that make up the cycle.",
)
async def delete_closed_position(cycle_id: str, session: AsyncSession = Depends(get_session)):
    svc = PortfolioService(session)
    try:
        deleted = await svc.delete_closed_position(cycle_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted", "transactions": deleted}


@router.get(
    "/snapshots",
    response_model=list[SnapshotResponse],
    summary="Stored monthly snapshots",
)
async def list_snapshots(session: AsyncSession = Depends(get_session)):
    svc = PortfolioService(session)
    return [SnapshotResponse.model_validate(s) for s in await svc.get_snapshots()]


@router.post(
    "/snapshots",
    response_model=SnapshotResponse,
    summary="Store a monthly snapshot",
    description="Computes the portfolio for the requested month and stores it. "
                "Whether the month end or the live state is used depends on the snapshot_binding setting.",
)
async def create_snapshot(
    req: SnapshotCreate,
    session: AsyncSession = Depends(get_session),
):
    svc = PortfolioService(session)
    snapshot = await svc.create_snapshot(req.month, req.year)
    return SnapshotResponse.model_validate(snapshot)


@router.patch(
    "/snapshots/{snapshot_id}",
    response_model=SnapshotResponse,
    summary="Edit a stored snapshot",
    description="Values are stored as entered and are not recomputed.",
)
async def update_snapshot(
    snapshot_id: int,
    req: SnapshotUpdate,
    session: AsyncSession = Depends(get_session),
):
    svc = PortfolioService(session)
    try:
        snapshot = await svc.update_snapshot(snapshot_id, req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SnapshotResponse.model_validate(snapshot)


@router.delete("/snapshots/{snapshot_id}", summary="Delete a stored snapshot")
async def delete_snapshot(snapshot_id: int, session: AsyncSession = Depends(get_session)):
    svc = PortfolioService(session)
    try:
        await svc.delete_snapshot(snapshot_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted"}
