"""Shared FastAPI dependencies for the portfolio API."""

from __future__ import annotations

from fastapi import Depends, Request

from app.config import AppSettings
from app.services.portfolio import PortfolioService
from app.services.store import PortfolioStore, build_store


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_store(request: Request) -> PortfolioStore:
    """Return the application store, building it on first use.

    A misconfigured remote store raises ``StoreConfigurationError`` here, so
    every request reports the missing settings instead of the app refusing to boot.
    """

    store = getattr(request.app.state, "store", None)
    if store is None:
        store = build_store(request.app.state.settings)
        request.app.state.store = store
    return store


def get_portfolio_service(
    store: PortfolioStore = Depends(get_store),
    settings: AppSettings = Depends(get_app_settings),
) -> PortfolioService:
    return PortfolioService(
        store,
        seed_demo=settings.seed_demo_portfolio,
        base_currency=settings.base_currency,
    )


__all__ = ["get_app_settings", "get_portfolio_service", "get_store"]
