"""
Global configuration: pydantic-settings reads the .env file and environment
"""

from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, loaded from .env"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Strapi backend ──
    STRAPI_URL: str = "http://localhost:1337"
    STRAPI_API_TOKEN: str = ""  # sent as Bearer token when set
    STRAPI_TIMEOUT: int = 30  # per-request timeout (seconds)

    # ── Tool dispatch ──
    DEFAULT_TOOL_TIMEOUT_MS: int = 45_000  # registry fallback per tool call, above STRAPI_TIMEOUT

    # ── i18n validation defaults ──
    I18N_MIN_CONFIDENCE: int = 30  # 0-100
    I18N_MIXED_THRESHOLD: float = 0.15  # share of words per language

    # ── Application ──
    ENV: str = "development"  # development | production
    APP_NAME: str = "strapi-tools"
    APP_PORT: int = 8000

    @model_validator(mode="after")
    def _check_backend(self) -> "Settings":
        """STRAPI_URL is mandatory; production additionally requires an API token"""
        if not self.STRAPI_URL.strip():
            raise ValueError("STRAPI_URL is required")
        self.STRAPI_URL = self.STRAPI_URL.rstrip("/")
        if self.ENV == "production" and not self.STRAPI_API_TOKEN:
            raise ValueError(
                "STRAPI_API_TOKEN must be configured in production. "
                "Create an API token in the Strapi admin panel and set it in .env."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton"""
    return Settings()
