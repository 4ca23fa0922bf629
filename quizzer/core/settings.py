"""Deploy-time settings read from the environment and an optional ``.env`` file."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from quizzer.constants.network_constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_HOST,
    DEFAULT_PORT,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
    TOKEN_TTL_HOURS,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    api_base_url: str = DEFAULT_API_BASE_URL

    database_path: Path = Path("db") / "quizzer.db"
    static_dir: Path = Path("static")
    uploads_subdir: str = "uploads"

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = TOKEN_TTL_HOURS

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    rate_limit_max_requests: int = RATE_LIMIT_MAX_REQUESTS
    rate_limit_window_seconds: int = RATE_LIMIT_WINDOW_SECONDS

    session_file: Path = Path.home() / ".quizzer" / "session.json"

    @property
    def uploads_dir(self) -> Path:
        return self.static_dir / self.uploads_subdir


@lru_cache
def get_settings() -> Settings:
    return Settings()
