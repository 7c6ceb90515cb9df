"""Portfolio commands plus position, summary and ledger views."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.config import AppSettings
from app.schemas import (
    CsvImportRequest,
    DividendCreateRequest,
    DividendDocument,
    DividendLedgerRowSchema,
    ErrorResponse,
    HistoryPointCreateRequest,
    HistoryPointDocument,
    PortfolioCreateRequest,
    PortfolioDocument,
    PortfolioRenameRequest,
    PortfolioSummaryResponse,
    PositionSchema,
    PriceQuoteDocument,
    PriceUpdateRequest,
    TransactionCreateRequest,
    TransactionDocument,
    TriggerDocument,
    TriggerUpdateRequest,
)
from app.services.portfolio import PortfolioService
from portfolio_tracker.csv_import import EXPECTED_HEADER
from portfolio_tracker.formatting import MoneyFormatter

from ..dependencies import get_app_settings, get_portfolio_service

router = APIRouter(responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}})


@router.post("", response_model=PortfolioDocument, status_code=status.HTTP_201_CREATED, response_model_exclude_none=True)
async def create_portfolio(
    payload: PortfolioCreateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioDocument:
    portfolio = await service.create_portfolio(payload.name.strip(), payload.base_currency)
    return PortfolioDocument.from_domain(portfolio)


@router.get("/{portfolio_id}", response_model=PortfolioDocument, response_model_exclude_none=True)
async def get_portfolio(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioDocument:
    return PortfolioDocument.from_domain(await service.get_portfolio(portfolio_id))


@router.patch("/{portfolio_id}", response_model=PortfolioDocument, response_model_exclude_none=True)
async def rename_portfolio(
    portfolio_id: str,
    payload: PortfolioRenameRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioDocument:
    portfolio = await service.rename_portfolio(portfolio_id, payload.name.strip())
    return PortfolioDocument.from_domain(portfolio)


@router.delete("/{portfolio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_portfolio(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> Response:
    await service.delete_portfolio(portfolio_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{portfolio_id}/transactions", response_model=list[TransactionDocument])
async def list_transactions(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> list[TransactionDocument]:
    return [TransactionDocument.from_domain(tx) for tx in await service.list_transactions(portfolio_id)]


@router.post("/{portfolio_id}/transactions", response_model=TransactionDocument, status_code=status.HTTP_201_CREATED)
async def add_transaction(
    portfolio_id: str,
    payload: TransactionCreateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> TransactionDocument:
    tx = await service.add_transaction(
        portfolio_id,
        date=payload.date,
        ticker=payload.ticker,
        type=payload.type,
        qty=payload.qty,
        price=payload.price,
        fees=payload.fees,
    )
    return TransactionDocument.from_domain(tx)


@router.post(
    "/{portfolio_id}/transactions/import",
    response_model=list[TransactionDocument],
    status_code=status.HTTP_201_CREATED,
)
async def import_transactions(
    portfolio_id: str,
    payload: CsvImportRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> list[TransactionDocument]:
    imported = await service.import_csv(portfolio_id, payload.csv)
    if not imported:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Nothing imported. Check the header: {EXPECTED_HEADER}",
        )
    return [TransactionDocument.from_domain(tx) for tx in imported]


@router.delete("/{portfolio_id}/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    portfolio_id: str,
    transaction_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> Response:
    await service.remove_transaction(portfolio_id, transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{portfolio_id}/prices/{ticker}", response_model=PriceQuoteDocument)
async def set_price(
    portfolio_id: str,
    ticker: str,
    payload: PriceUpdateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PriceQuoteDocument:
    quote = await service.set_price(portfolio_id, ticker, payload.price)
    return PriceQuoteDocument.from_domain(quote)


@router.put("/{portfolio_id}/triggers/{ticker}", response_model=TriggerDocument, response_model_exclude_none=True)
async def set_trigger(
    portfolio_id: str,
    ticker: str,
    payload: TriggerUpdateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> TriggerDocument:
    trigger = await service.set_trigger(portfolio_id, ticker, payload.changes())
    return TriggerDocument.from_domain(trigger)


@router.get("/{portfolio_id}/dividends", response_model=list[DividendLedgerRowSchema], response_model_exclude_none=True)
async def dividend_ledger(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> list[DividendLedgerRowSchema]:
    return [DividendLedgerRowSchema.from_row(row) for row in await service.dividend_ledger(portfolio_id)]


@router.post(
    "/{portfolio_id}/dividends",
    response_model=DividendDocument,
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
)
async def add_dividend(
    portfolio_id: str,
    payload: DividendCreateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> DividendDocument:
    entry = await service.add_dividend(
        portfolio_id,
        date=payload.date,
        ticker=payload.ticker,
        type=payload.type,
        value_per_share=payload.value_per_share,
        note=payload.note,
    )
    return DividendDocument.from_domain(entry)


@router.delete("/{portfolio_id}/dividends/{dividend_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dividend(
    portfolio_id: str,
    dividend_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> Response:
    await service.remove_dividend(portfolio_id, dividend_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{portfolio_id}/history", response_model=HistoryPointDocument, status_code=status.HTTP_201_CREATED)
async def add_history_point(
    portfolio_id: str,
    payload: HistoryPointCreateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> HistoryPointDocument:
    point = await service.add_history_point(portfolio_id, date=payload.date, total_value=payload.total_value)
    return HistoryPointDocument(date=point.date, total_value=point.total_value)


@router.get("/{portfolio_id}/positions", response_model=list[PositionSchema], response_model_exclude_none=True)
async def get_positions(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> list[PositionSchema]:
    return [PositionSchema.from_domain(p) for p in await service.positions(portfolio_id)]


@router.get("/{portfolio_id}/summary", response_model=PortfolioSummaryResponse, response_model_exclude_none=True)
async def get_summary(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
    settings: AppSettings = Depends(get_app_settings),
) -> PortfolioSummaryResponse:
    portfolio, summary = await service.summary(portfolio_id)
    formatter = MoneyFormatter(settings.display_locale)
    totals = summary.totals
    formatted = {
        "invested": formatter.format_currency(totals.invested, portfolio.base_currency),
        "mkt": formatter.format_currency(totals.mkt, portfolio.base_currency),
        "pl": formatter.format_currency(totals.pl, portfolio.base_currency),
        "plPct": f"{formatter.format_number(totals.pl_pct)}%",
        "divs": formatter.format_currency(totals.divs, portfolio.base_currency),
    }
    return PortfolioSummaryResponse.from_domain(portfolio, summary, formatted)


__all__ = ["router"]
