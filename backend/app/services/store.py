"""Record stores holding the portfolio collection.

Two backends share the same ``load``/``save`` contract: a JSON file on local
disk and a JSON file committed to a GitHub repository. Both replace the whole
document on every save.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

import httpx
from pydantic import ValidationError

from app.config import AppSettings, get_settings
from app.core.errors import StoreError
from app.core.telemetry import store_tracer
from app.providers.github_contents import GitHubContentsClient
from app.services.document import decode_portfolios, encode_portfolios
from portfolio_tracker.models import Portfolio

logger = logging.getLogger(__name__)


class PortfolioStore(Protocol):
    """Opaque load/save pair over the full portfolio collection."""

    async def load(self) -> list[Portfolio]:
        ...

    async def save(self, portfolios: list[Portfolio]) -> None:
        ...


class LocalFileStore:
    """Keep the collection in one JSON file; unreadable content loads as empty."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def load(self) -> list[Portfolio]:
        with store_tracer.start_as_current_span("store.local.load"):
            if not self.path.exists():
                return []
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning("Ignoring unreadable portfolio file %s: %s", self.path, exc)
                return []
            if not isinstance(raw, list):
                logger.warning("Ignoring portfolio file %s: root is not a list", self.path)
                return []
            try:
                return decode_portfolios(raw)
            except ValidationError as exc:
                logger.warning("Ignoring invalid portfolio file %s: %s", self.path, exc.error_count())
                return []

    async def save(self, portfolios: list[Portfolio]) -> None:
        with store_tracer.start_as_current_span("store.local.save"):
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(encode_portfolios(portfolios), indent=2, ensure_ascii=False)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.path)
            except OSError:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise


class GitHubStore:
    """Collection stored in a GitHub repository, guarded by the blob sha."""

    def __init__(self, client: GitHubContentsClient):
        self.client = client

    async def load(self) -> list[Portfolio]:
        with store_tracer.start_as_current_span("store.github.load"):
            document = await self.client.fetch()
            if not isinstance(document.data, list):
                raise StoreError(f"Stored document {self.client.target.path} is not a JSON array")
            try:
                return decode_portfolios(document.data)
            except ValidationError as exc:
                raise StoreError(f"Stored document {self.client.target.path} is invalid: {exc}") from exc

    async def save(self, portfolios: list[Portfolio]) -> None:
        with store_tracer.start_as_current_span("store.github.save"):
            # The sha is read right before writing; a concurrent write in between
            # makes GitHub reject this one with a conflict.
            current = await self.client.fetch()
            await self.client.replace(encode_portfolios(portfolios), current.sha)


def build_store(settings: AppSettings, *, http_client: httpx.AsyncClient | None = None) -> PortfolioStore:
    """Create the configured store, validating remote settings eagerly."""

    if settings.storage_backend == "github":
        return GitHubStore(GitHubContentsClient.from_settings(settings, client=http_client))
    return LocalFileStore(settings.local_store_path)


def get_store() -> PortfolioStore:
    return build_store(get_settings())


__all__ = ["GitHubStore", "LocalFileStore", "PortfolioStore", "build_store", "get_store"]
