"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.api.routes import api_router
from app.config import AppSettings, get_settings
from app.core.errors import (
    StoreConfigurationError,
    StoreConflictError,
    StoreError,
    StorePermissionError,
)
from app.core.logging import setup_logging
from app.core.telemetry import setup_telemetry
from app.services.store import PortfolioStore
from portfolio_tracker.commands import PortfolioNotFound, RecordNotFound
from portfolio_tracker.csv_import import CsvImportError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


def _store_error_status(exc: StoreError) -> int:
    if isinstance(exc, StoreConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, StorePermissionError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, StoreConfigurationError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_502_BAD_GATEWAY


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as the ``{"ok": false, "error": ...}`` envelope."""

    @app.exception_handler(StoreError)
    async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
        code = _store_error_status(exc)
        logger.warning("Store failure on %s %s (%d): %s", request.method, request.url.path, code, exc)
        return _error(code, str(exc))

    @app.exception_handler(PortfolioNotFound)
    @app.exception_handler(RecordNotFound)
    async def _not_found(request: Request, exc: LookupError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc.args[0]) if exc.args else "Not found")

    @app.exception_handler(CsvImportError)
    async def _bad_csv(request: Request, exc: CsvImportError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(ValueError)
    async def _bad_value(request: Request, exc: ValueError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(HTTPException)
    async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            f"{location}: {message}" if location else message,
        )


def create_app(settings: AppSettings | None = None, store: PortfolioStore | None = None) -> FastAPI:
    """Build the API; ``store`` overrides the configured backend (used by tests)."""

    settings = settings or get_settings()
    setup_logging()

    app = FastAPI(title=settings.app_name, version="0.1.0")
    app.state.settings = settings
    app.state.store = store
    setup_telemetry(app, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["traceparent", "tracestate", "content-disposition"],
    )

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "storage": settings.storage_backend,
        }

    register_exception_handlers(app)
    app.include_router(api_router)
    logger.info("Portfolio tracker configured: %s", settings.dict_for_logging())
    return app


app = create_app()

__all__ = ["app", "create_app"]
