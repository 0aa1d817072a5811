from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.database import get_session
from tracker.schemas.asset import AssetCreate, AssetResponse, AssetUpdate
from tracker.schemas.portfolio import (
    AssetSnapshotCreate,
    AssetSnapshotResponse,
    AssetSnapshotUpdate,
)
from tracker.services.asset_service import AssetService
from tracker.services.portfolio_service import PortfolioService

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("", response_model=list[AssetResponse], summary="List assets")
async def list_assets(session: AsyncSession = Depends(get_session)):
    svc = AssetService(session)
    return await svc.list_all()


@router.post("", response_model=AssetResponse, summary="Create an asset")
async def create_asset(
    req: AssetCreate,
    session: AsyncSession = Depends(get_session),
):
    svc = AssetService(session)
    return await svc.create(req)


@router.get("/{asset_id}", response_model=AssetResponse, summary="Get an asset")
async def get_asset(asset_id: int, session: AsyncSession = Depends(get_session)):
    svc = AssetService(session)
    asset = await svc.get(asset_id)
    if not asset:
        raise HTTPException(status_code=404, detail="Asset not found")
    return asset


@router.patch("/{asset_id}", response_model=AssetResponse, summary="Update an asset")
async def update_asset(
    asset_id: int,
    req: AssetUpdate,
    session: AsyncSession = Depends(get_session),
):
    svc = AssetService(session)
    try:
        return await svc.update(asset_id, req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete(
    "/{asset_id}",
    summary="Delete an asset",
    description="Deletes the asset together with its transactions, prices, dividends and snapshots.",
)
async def delete_asset(asset_id: int, session: AsyncSession = Depends(get_session)):
    svc = AssetService(session)
    try:
        await svc.delete(asset_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted"}


# ── asset snapshots ────────────────────────────────────────────


@router.get(
    "/{asset_id}/snapshots",
    response_model=list[AssetSnapshotResponse],
    summary="List an asset's monthly snapshots",
)
async def list_asset_snapshots(asset_id: int, session: AsyncSession = Depends(get_session)):
    svc = PortfolioService(session)
    snapshots = await svc.get_asset_snapshots(asset_id)
    return [AssetSnapshotResponse.model_validate(s) for s in snapshots]


@router.post(
    "/{asset_id}/snapshots",
    response_model=AssetSnapshotResponse,
    summary="Record an asset snapshot manually",
)
async def create_asset_snapshot(
    asset_id: int,
    req: AssetSnapshotCreate,
    session: AsyncSession = Depends(get_session),
):
    svc = PortfolioService(session)
    try:
        snapshot = await svc.create_asset_snapshot(asset_id, req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return AssetSnapshotResponse.model_validate(snapshot)


@router.post(
    "/{asset_id}/snapshots/generate",
    response_model=list[AssetSnapshotResponse],
    summary="Generate monthly asset snapshots",
    description="Replays the asset's transactions at every month end from the first trade until today "
                "and stores one snapshot per month with an open position.",
)
async def generate_asset_snapshots(asset_id: int, session: AsyncSession = Depends(get_session)):
    svc = PortfolioService(session)
    try:
        snapshots = await svc.generate_asset_snapshots(asset_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return [AssetSnapshotResponse.model_validate(s) for s in snapshots]


@router.patch(
    "/{asset_id}/snapshots/{snapshot_id}",
    response_model=AssetSnapshotResponse,
    summary="Edit an asset snapshot",
)
async def update_asset_snapshot(
    asset_id: int,
    snapshot_id: int,
    req: AssetSnapshotUpdate,
    session: AsyncSession = Depends(get_session),
):
    svc = PortfolioService(session)
    try:
        snapshot = await svc.update_asset_snapshot(asset_id, snapshot_id, req)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return AssetSnapshotResponse.model_validate(snapshot)


@router.delete("/{asset_id}/snapshots/{snapshot_id}", summary="Delete an asset snapshot")
async def delete_asset_snapshot(
    asset_id: int,
    snapshot_id: int,
    session: AsyncSession = Depends(get_session),
):
    svc = PortfolioService(session)
    try:
        await svc.delete_asset_snapshot(asset_id, snapshot_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted"}
