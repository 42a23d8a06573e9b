"""Environment-driven configuration helpers for ParlayDesk."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: AnyUrl | str = Field(default="sqlite:///./parlaydesk.db")
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    http_timeout: float = Field(default=20.0, gt=0)

    odds_api_key: str = Field(default="", validation_alias="ODDS_API_KEY")
    odds_api_base: str = Field(default="https://api.the-odds-api.com/v4")
    odds_bookmaker: str = Field(default="draftkings")

    balldontlie_api_key: str = Field(default="", validation_alias="BALLDONTLIE_API_KEY")
    balldontlie_base_url: str = Field(default="https://api.balldontlie.io/v1")
    nhl_api_base: str = Field(default="https://api-web.nhle.com/v1")

    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini")
    suggestion_max_tokens: int = Field(default=1000, ge=1)
    analysis_max_tokens: int = Field(default=500, ge=1)

    default_stake: float = Field(default=10.0, ge=0.0)
    session_ttl_days: int = Field(default=7, ge=1, le=365)
    cookie_secure: bool = Field(default=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]


def configure_logging(level: str | None = None) -> None:
    """Install the root handler used by the API process."""

    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
