# kirkidata/main.py
import logging
from typing import Optional

import httpx
import sentry_sdk

from kirkidata.api.v1.router import ApiV1
from kirkidata.core.config import Settings, settings as default_settings
from kirkidata.core.logging import setup_logging
from kirkidata.db.storage import KeyValueStorage, get_storage
from kirkidata.services.api_client import ApiClient
from kirkidata.services.session import build_sessions

log = logging.getLogger(__name__)


def _validate_config(settings: Settings) -> None:
    """
    部署前安全檢查：prod/staging 環境下，token 只能走 HTTPS。
    """
    env = (settings.ENV or "").lower()
    if env in {"prod", "production", "staging", "preview"}:
        if not settings.API_BASE_URL.lower().startswith("https://"):
            raise RuntimeError(
                f"Insecure API_BASE_URL for ENV={settings.ENV}: {settings.API_BASE_URL}. "
                "Bearer tokens must only be sent over HTTPS."
            )


def create_client(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    http: Optional[httpx.AsyncClient] = None,
    configure_logging: bool = True,
) -> ApiV1:
    settings = settings or default_settings

    # 基本安全檢查
    _validate_config(settings)

    if configure_logging:
        setup_logging(settings.LOG_LEVEL)

    # ---- Sentry 初始化（若 .env/SENTRY_DSN 未設定就略過）----
    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.SENTRY_ENV or settings.ENV,
        )

    storage = storage if storage is not None else get_storage(settings)
    client = ApiClient(
        settings.api_url,
        build_sessions(storage),
        http=http,
        timeout=settings.HTTP_TIMEOUT_SEC,
    )

    log.info("API client initialized for %s (env=%s)", settings.api_url, settings.ENV)
    return ApiV1(client, storage=storage)
