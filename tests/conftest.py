# tests/conftest.py
import os
from typing import List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ---- 測試期環境變數（先於 kirkidata 載入）----
os.environ.setdefault("ENV", "test")

from kirkidata.api.v1.router import ApiV1  # noqa: E402
from kirkidata.db.storage import MemoryStorage  # noqa: E402
from kirkidata.services.api_client import ApiClient  # noqa: E402
from kirkidata.services.session import build_sessions  # noqa: E402

from fake_backend import BackendState, create_backend  # noqa: E402

BASE_URL = "http://testserver/api/v1"


class RecordingStorage(MemoryStorage):
    """記錄每一次讀寫的 key，用來驗證兩個角色互不碰觸"""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.touched: List[str] = []

    async def get(self, key: str) -> Optional[str]:
        self.touched.append(key)
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        self.touched.append(key)
        await super().set(key, value)

    async def delete(self, *keys: str) -> None:
        self.touched.extend(keys)
        await super().delete(*keys)


@pytest.fixture
def backend() -> BackendState:
    return BackendState()


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest_asyncio.fixture
async def http(backend: BackendState):
    """使用 ASGITransport 直接掛載假後端，不需啟動伺服器。"""
    transport = ASGITransport(app=create_backend(backend))
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def client(http: AsyncClient, storage: RecordingStorage) -> ApiClient:
    return ApiClient(BASE_URL, build_sessions(storage), http=http)


@pytest_asyncio.fixture
async def api(client: ApiClient, storage: RecordingStorage) -> ApiV1:
    return ApiV1(client, storage=storage)

