"""Pydantic schema exports."""

from .document import (
    DividendDocument,
    HistoryPointDocument,
    PortfolioDocument,
    PriceQuoteDocument,
    TransactionDocument,
    TriggerDocument,
)
from .portfolio import (
    AllocationSliceSchema,
    CsvImportRequest,
    DividendCreateRequest,
    DividendLedgerRowSchema,
    DocumentResponse,
    ErrorResponse,
    HistoryPointCreateRequest,
    PortfolioCreateRequest,
    PortfolioRenameRequest,
    PortfolioSummaryResponse,
    PositionSchema,
    PriceUpdateRequest,
    TickerDividendsSchema,
    TotalsSchema,
    TransactionCreateRequest,
    TriggerUpdateRequest,
)

__all__ = [
    "AllocationSliceSchema",
    "CsvImportRequest",
    "DividendCreateRequest",
    "DividendDocument",
    "DividendLedgerRowSchema",
    "DocumentResponse",
    "ErrorResponse",
    "HistoryPointCreateRequest",
    "HistoryPointDocument",
    "PortfolioCreateRequest",
    "PortfolioDocument",
    "PortfolioRenameRequest",
    "PortfolioSummaryResponse",
    "PositionSchema",
    "PriceQuoteDocument",
    "PriceUpdateRequest",
    "TickerDividendsSchema",
    "TotalsSchema",
    "TransactionCreateRequest",
    "TransactionDocument",
    "TriggerDocument",
    "TriggerUpdateRequest",
]
