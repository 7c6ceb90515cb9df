"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .documents import router as documents_router
from .portfolio import router as portfolio_router

api_router = APIRouter()
# Registered first so /portfolios/export is not captured by /portfolios/{portfolio_id}
api_router.include_router(documents_router, prefix="/portfolios", tags=["documents"])
api_router.include_router(portfolio_router, prefix="/portfolios", tags=["portfolio"])

__all__ = ["api_router"]
