"""Client for the GitHub contents API holding the portfolio JSON document."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from app.config import AppSettings
from app.core.errors import (
    StoreConfigurationError,
    StoreConflictError,
    StoreError,
    StorePermissionError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitHubTarget:
    """Repository coordinates of the stored document."""

    owner: str
    repo: str
    branch: str
    path: str
    token: str

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "GitHubTarget":
        missing = settings.missing_github_settings()
        if missing:
            raise StoreConfigurationError(missing)
        return cls(
            owner=settings.github_owner,  # type: ignore[arg-type]
            repo=settings.github_repo,  # type: ignore[arg-type]
            branch=settings.github_branch,  # type: ignore[arg-type]
            path=settings.github_data_path,  # type: ignore[arg-type]
            token=settings.github_token,  # type: ignore[arg-type]
        )


@dataclass(frozen=True)
class FetchedDocument:
    data: Any
    sha: str | None


class GitHubContentsClient:
    """Read and replace one JSON file, using the blob sha as a version token."""

    def __init__(
        self,
        target: GitHubTarget,
        *,
        api_url: str = "https://api.github.com",
        commit_message: str = "chore(data): update portfolios.json via app",
        user_agent: str = "portfolio-tracker-app",
        timeout_seconds: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.target = target
        self.commit_message = commit_message
        self._api_url = api_url.rstrip("/")
        self._user_agent = user_agent
        self._timeout = timeout_seconds
        self._client = client

    @classmethod
    def from_settings(cls, settings: AppSettings, client: httpx.AsyncClient | None = None) -> "GitHubContentsClient":
        return cls(
            GitHubTarget.from_settings(settings),
            api_url=settings.github_api_url,
            commit_message=settings.github_commit_message,
            user_agent=settings.github_user_agent,
            timeout_seconds=settings.http_timeout_seconds,
            client=client,
        )

    @property
    def url(self) -> str:
        t = self.target
        return f"{self._api_url}/repos/{t.owner}/{t.repo}/contents/{quote(t.path, safe='/')}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.target.token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": self._user_agent,
        }

    async def _send(self, method: str, **kwargs: Any) -> httpx.Response:
        try:
            if self._client is not None:
                return await self._client.request(method, self.url, headers=self._headers(), **kwargs)
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.request(method, self.url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            raise StoreError(f"Failed to reach GitHub API: {exc}") from exc

    async def fetch(self) -> FetchedDocument:
        """Return the decoded document and its sha; a missing file reads as ``[]``."""

        response = await self._send("GET", params={"ref": self.target.branch})
        if response.status_code == 404:
            logger.info("No document at %s yet; starting empty", self.target.path)
            return FetchedDocument(data=[], sha=None)
        if response.status_code in (401, 403):
            raise StorePermissionError(
                f"Permission denied by GitHub API (GET {response.status_code}). "
                "Check that GITHUB_TOKEN has Contents read/write access and that "
                f"GITHUB_OWNER/GITHUB_REPO point at the right repository. Detail: {response.text}"
            )
        if response.status_code >= 400:
            raise StoreError(f"GET {response.status_code}: {response.text}")

        try:
            payload = response.json()
            encoded = (payload.get("content") or "").replace("\n", "")
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8") if encoded else ""
        except (ValueError, AttributeError) as exc:
            raise StoreError(f"Unexpected GitHub API response for {self.target.path}: {exc}") from exc
        try:
            data = json.loads(decoded) if decoded.strip() else []
        except json.JSONDecodeError as exc:
            raise StoreError(f"Stored document {self.target.path} is not valid JSON") from exc
        return FetchedDocument(data=data, sha=payload.get("sha"))

    async def replace(self, data: Any, sha: str | None) -> dict[str, Any]:
        """Write ``data`` as the new file content; ``sha`` must match the current blob."""

        content = base64.b64encode(json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")).decode("ascii")
        body: dict[str, Any] = {
            "message": self.commit_message,
            "content": content,
            "branch": self.target.branch,
        }
        if sha:
            body["sha"] = sha

        response = await self._send("PUT", json=body)
        if response.status_code in (401, 403):
            raise StorePermissionError(
                f"Permission denied by GitHub API (PUT {response.status_code}). "
                "The token needs Contents read/write on this repository and branch. "
                f"Detail: {response.text}"
            )
        # GitHub answers a stale sha with 409, or 422 "does not match" on some endpoints
        if response.status_code == 409 or (response.status_code == 422 and "does not match" in response.text):
            raise StoreConflictError(
                "Conflict while saving: the document was changed by another operation. "
                f"Reload and try again. Detail: {response.text}"
            )
        if response.status_code >= 400:
            raise StoreError(f"PUT {response.status_code}: {response.text}")
        logger.info("Saved %s to %s/%s@%s", self.target.path, self.target.owner, self.target.repo, self.target.branch)
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError(f"Unexpected GitHub API response after saving {self.target.path}") from exc


__all__ = ["FetchedDocument", "GitHubContentsClient", "GitHubTarget"]
