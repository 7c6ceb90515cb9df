"""GitHub contents client and store tests against a mocked transport."""

from __future__ import annotations

import base64
import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.config import AppSettings
from app.core.errors import (
    StoreConfigurationError,
    StoreConflictError,
    StoreError,
    StorePermissionError,
)
from app.main import create_app
from app.providers.github_contents import GitHubContentsClient, GitHubTarget
from app.services.store import GitHubStore

TARGET = GitHubTarget(owner="me", repo="vault", branch="main", path="data/portfolios.json", token="secret")
CONTENTS_URL = "https://api.github.com/repos/me/vault/contents/data/portfolios.json"


def _encoded(data: object) -> str:
    raw = base64.b64encode(json.dumps(data).encode("utf-8")).decode("ascii")
    # GitHub wraps base64 content at 60 characters
    return "\n".join(raw[i : i + 60] for i in range(0, len(raw), 60))


def _client(handler) -> GitHubContentsClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubContentsClient(TARGET, client=http)


async def test_fetch_decodes_content_and_sends_auth_headers():
    seen: list[httpx.Request] = []
    document = [{"id": "p1", "name": "Main"}]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"content": _encoded(document), "sha": "abc123"})

    fetched = await _client(handler).fetch()
    assert fetched.data == document
    assert fetched.sha == "abc123"
    request = seen[0]
    assert str(request.url) == f"{CONTENTS_URL}?ref=main"
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert request.headers["User-Agent"] == "portfolio-tracker-app"


async def test_fetch_missing_file_is_empty_document():
    fetched = await _client(lambda request: httpx.Response(404, json={"message": "Not Found"})).fetch()
    assert fetched.data == []
    assert fetched.sha is None


@pytest.mark.parametrize("status_code", [401, 403])
async def test_fetch_permission_errors(status_code):
    client = _client(lambda request: httpx.Response(status_code, json={"message": "Bad credentials"}))
    with pytest.raises(StorePermissionError):
        await client.fetch()


async def test_fetch_other_failures_raise_store_error():
    client = _client(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(StoreError, match="GET 500"):
        await client.fetch()


async def test_replace_sends_sha_branch_and_message():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"content": {"sha": "def456"}})

    await _client(handler).replace([{"id": "p1"}], "abc123")
    body = bodies[0]
    assert body["sha"] == "abc123"
    assert body["branch"] == "main"
    assert body["message"] == "chore(data): update portfolios.json via app"
    assert json.loads(base64.b64decode(body["content"])) == [{"id": "p1"}]


async def test_replace_without_sha_creates_file():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={})

    await _client(handler).replace([], None)
    assert "sha" not in bodies[0]


@pytest.mark.parametrize(
    ("status_code", "message"),
    [(409, "is at abc but expected def"), (422, "sha does not match")],
)
async def test_replace_stale_sha_is_conflict(status_code, message):
    client = _client(lambda request: httpx.Response(status_code, json={"message": message}))
    with pytest.raises(StoreConflictError):
        await client.replace([], "stale")


async def test_replace_unrelated_422_is_plain_store_error():
    client = _client(lambda request: httpx.Response(422, json={"message": "Invalid request"}))
    with pytest.raises(StoreError) as excinfo:
        await client.replace([], "sha")
    assert not isinstance(excinfo.value, StoreConflictError)


async def test_network_failure_becomes_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(StoreError, match="Failed to reach GitHub API"):
        await _client(handler).fetch()


def test_missing_configuration_lists_every_absent_variable():
    settings = AppSettings(
        storage_backend="github",
        github_owner=None,
        github_repo="vault",
        github_token=None,
        github_branch="main",
        github_data_path="",
    )
    with pytest.raises(StoreConfigurationError) as excinfo:
        GitHubTarget.from_settings(settings)
    assert excinfo.value.missing == ["GITHUB_OWNER", "GITHUB_TOKEN", "GITHUB_DATA_PATH"]
    assert "GITHUB_OWNER, GITHUB_TOKEN, GITHUB_DATA_PATH" in str(excinfo.value)


async def test_github_store_save_reads_current_sha_before_writing():
    calls: list[tuple[str, dict | None]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            calls.append(("GET", None))
            return httpx.Response(200, json={"content": _encoded([]), "sha": "fresh"})
        calls.append(("PUT", json.loads(request.content)))
        return httpx.Response(200, json={})

    await GitHubStore(_client(handler)).save([])
    assert [c[0] for c in calls] == ["GET", "PUT"]
    assert calls[1][1]["sha"] == "fresh"


async def test_github_store_rejects_non_array_document():
    client = _client(lambda request: httpx.Response(200, json={"content": _encoded({"id": 1}), "sha": "x"}))
    with pytest.raises(StoreError, match="not a JSON array"):
        await GitHubStore(client).load()


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json={"content": "not*base64!", "sha": "x"}),
    ],
)
async def test_fetch_malformed_success_response_is_store_error(response):
    with pytest.raises(StoreError, match="Unexpected GitHub API response"):
        await _client(lambda request: response).fetch()


async def test_malformed_remote_response_maps_to_bad_gateway():
    store = GitHubStore(_client(lambda request: httpx.Response(200, text="not json")))
    app = create_app(settings=AppSettings(seed_demo_portfolio=False), store=store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        result = await client.get("/portfolios")
    assert result.status_code == 502
    assert result.json()["ok"] is False
