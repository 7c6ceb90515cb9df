from __future__ import annotations

import json
from datetime import date, datetime, timezone

from app.config import AppSettings
from app.services.store import GitHubStore, LocalFileStore, build_store
from portfolio_tracker.demo import demo_portfolio


async def test_local_store_round_trip(tmp_path):
    store = LocalFileStore(tmp_path / "nested" / "portfolios.json")
    portfolio = demo_portfolio(today=date(2024, 6, 1), now=datetime(2024, 6, 1, tzinfo=timezone.utc))
    await store.save([portfolio])
    assert await store.load() == [portfolio]
    assert json.loads(store.path.read_text(encoding="utf-8"))[0]["id"] == "demo"


async def test_local_store_missing_file_loads_empty(tmp_path):
    assert await LocalFileStore(tmp_path / "absent.json").load() == []


async def test_local_store_corrupt_or_unexpected_content_loads_empty(tmp_path):
    path = tmp_path / "portfolios.json"
    path.write_text("{not json", encoding="utf-8")
    assert await LocalFileStore(path).load() == []
    path.write_text('{"id": "p"}', encoding="utf-8")
    assert await LocalFileStore(path).load() == []
    path.write_text('[{"name": "missing id"}]', encoding="utf-8")
    assert await LocalFileStore(path).load() == []


def test_build_store_selects_backend(tmp_path):
    local = build_store(AppSettings(storage_backend="local", local_store_path=str(tmp_path / "p.json")))
    assert isinstance(local, LocalFileStore)
    remote = build_store(
        AppSettings(storage_backend="github", github_owner="me", github_repo="data", github_token="t")
    )
    assert isinstance(remote, GitHubStore)
    assert remote.client.target.path == "data/portfolios.json"
    assert remote.client.target.branch == "main"
