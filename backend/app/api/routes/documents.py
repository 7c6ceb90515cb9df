"""Whole-document endpoints: read, replace and export the portfolio collection."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.schemas import DocumentResponse
from app.services.document import decode_portfolios, encode_portfolios, export_json
from app.services.portfolio import PortfolioService

from ..dependencies import get_portfolio_service

router = APIRouter()

EXPORT_FILENAME = "portfolios.json"


@router.get("", response_model=DocumentResponse, response_model_exclude_none=True)
async def get_document(service: PortfolioService = Depends(get_portfolio_service)) -> dict[str, Any]:
    portfolios = await service.load_document()
    return {"ok": True, "data": encode_portfolios(portfolios)}


@router.put("", response_model=DocumentResponse, response_model_exclude_none=True)
async def put_document(
    payload: dict[str, Any] = Body(...),
    service: PortfolioService = Depends(get_portfolio_service),
) -> Any:
    if "data" not in payload:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"ok": False, "error": "Missing 'data' field"})
    try:
        portfolios = decode_portfolios(payload["data"])
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False, include_context=False)) from exc
    await service.replace_all(portfolios)
    return {"ok": True}


@router.get("/export")
async def export_document(service: PortfolioService = Depends(get_portfolio_service)) -> Response:
    portfolios = await service.load_document()
    return Response(
        content=export_json(portfolios),
        media_type="application/json; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


__all__ = ["router"]
