"""Convert between the persisted JSON document and domain portfolios."""

from __future__ import annotations

import json
from typing import Any, Iterable

from pydantic import TypeAdapter

from app.schemas.document import PortfolioDocument
from portfolio_tracker.models import Portfolio

_DOCUMENT_LIST = TypeAdapter(list[PortfolioDocument])


def decode_portfolios(raw: Any) -> list[Portfolio]:
    """Validate a JSON array of portfolio objects; raises ``pydantic.ValidationError``."""

    return [doc.to_domain() for doc in _DOCUMENT_LIST.validate_python(raw)]


def encode_portfolios(portfolios: Iterable[Portfolio]) -> list[dict[str, Any]]:
    return [
        PortfolioDocument.from_domain(p).model_dump(mode="json", by_alias=True, exclude_none=True)
        for p in portfolios
    ]


def export_json(portfolios: Iterable[Portfolio]) -> str:
    """Serialize the whole collection as indented JSON for download."""

    return json.dumps(encode_portfolios(portfolios), indent=2, ensure_ascii=False)


__all__ = ["decode_portfolios", "encode_portfolios", "export_json"]
