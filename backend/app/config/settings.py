"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_CURRENCY = "BRL"
DEFAULT_GITHUB_BRANCH = "main"
DEFAULT_GITHUB_DATA_PATH = "data/portfolios.json"


class AppSettings(BaseSettings):
    """Configuration options for the portfolio tracker service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Portfolio Tracker")
    base_currency: str = Field(default=DEFAULT_BASE_CURRENCY)
    display_locale: str = Field(default="pt-BR")

    storage_backend: Literal["local", "github"] = Field(
        default="local",
        description="Where the portfolio document lives.",
    )
    local_store_path: str = Field(default="data/portfolios.json")
    seed_demo_portfolio: bool = Field(
        default=True,
        description="Serve a demo portfolio while the store is still empty.",
    )

    github_owner: str | None = Field(default=None)
    github_repo: str | None = Field(default=None)
    github_token: str | None = Field(default=None)
    github_branch: str | None = Field(default=DEFAULT_GITHUB_BRANCH)
    github_data_path: str | None = Field(default=DEFAULT_GITHUB_DATA_PATH)
    github_api_url: str = Field(default="https://api.github.com")
    github_commit_message: str = Field(default="chore(data): update portfolios.json via app")
    github_user_agent: str = Field(default="portfolio-tracker-app")

    http_timeout_seconds: float = Field(default=15.0)

    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://localhost:4200"])

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="portfolio-tracker")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    def missing_github_settings(self) -> list[str]:
        """Return the environment variable names of every unset GitHub store option."""

        required = {
            "GITHUB_OWNER": self.github_owner,
            "GITHUB_REPO": self.github_repo,
            "GITHUB_TOKEN": self.github_token,
            "GITHUB_BRANCH": self.github_branch,
            "GITHUB_DATA_PATH": self.github_data_path,
        }
        return [name for name, value in required.items() if not value]

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"github_token"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_BASE_CURRENCY",
    "DEFAULT_GITHUB_BRANCH",
    "DEFAULT_GITHUB_DATA_PATH",
    "get_settings",
]
