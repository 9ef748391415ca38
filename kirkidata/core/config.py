# kirkidata/core/config.py
from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === App Info ===
    APP_NAME: str = "Kirkidata API Client"
    ENV: str = os.getenv("ENV", "dev")
    DEBUG: bool = False

    # === Remote API ===
    API_BASE_URL: str = "https://api.kirkidata.ng"
    API_VERSION: str = "v1"
    # None = 交給 httpx 的預設逾時
    HTTP_TIMEOUT_SEC: Optional[float] = None

    @field_validator("API_BASE_URL", mode="before")
    @classmethod
    def _strip_base_url(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    # === Session Storage ===
    # memory：行程內保存；redis：跨行程保存（對應瀏覽器的 localStorage）
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    STORAGE_KEY_PREFIX: str = "kirkidata:"

    # === Logging ===
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # === Observability（Sentry） ===
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    SENTRY_ENV: str = os.getenv("SENTRY_ENV", "dev")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def api_url(self) -> str:
        return f"{self.API_BASE_URL}/api/{self.API_VERSION}"


@lru_cache
def get_settings() -> Settings:
    """測試環境一律改用記憶體儲存，不碰 Redis"""
    s = Settings()
    if s.ENV == "test":
        s.STORAGE_BACKEND = "memory"
    return s


settings = get_settings()
