from __future__ import annotations

from fastapi import APIRouter

from tracker.api.system import router as system_router
from tracker.api.assets import router as assets_router
from tracker.api.transactions import router as transactions_router
from tracker.api.prices import router as prices_router
from tracker.api.dividends import router as dividends_router
from tracker.api.cash import router as cash_router
from tracker.api.portfolio import router as portfolio_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(assets_router)
api_router.include_router(transactions_router)
api_router.include_router(prices_router)
api_router.include_router(dividends_router)
api_router.include_router(cash_router)
api_router.include_router(portfolio_router)
