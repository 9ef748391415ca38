# kirkidata/db/storage.py
from __future__ import annotations

from typing import Dict, Optional, Protocol

from redis.asyncio import Redis

from kirkidata.core.config import Settings


class KeyValueStorage(Protocol):
    """Session 用的持久化 key-value 儲存（相當於瀏覽器的 localStorage）"""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def delete(self, *keys: str) -> None:
        ...

    async def aclose(self) -> None:
        ...


class MemoryStorage:
    """行程內的 dict 儲存；測試與短命腳本用"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)

    async def aclose(self) -> None:
        return None

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class RedisStorage:
    """以 Redis 保存 session，key 會加上 prefix 避免與其他服務衝突"""

    def __init__(self, url: str, prefix: str = "kirkidata:"):
        self.url = url
        self.prefix = prefix
        self._redis: Optional[Redis] = None

    def _client(self) -> Redis:
        # lazy 初始化，避免 import 時就建立連線
        if self._redis is None:
            self._redis = Redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        return await self._client().get(self._key(key))

    async def set(self, key: str, value: str) -> None:
        await self._client().set(self._key(key), value)

    async def delete(self, *keys: str) -> None:
        if keys:
            await self._client().delete(*(self._key(k) for k in keys))

    async def aclose(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


def get_storage(settings: Settings) -> KeyValueStorage:
    backend = (settings.STORAGE_BACKEND or "memory").lower()
    if backend == "memory":
        return MemoryStorage()
    if backend == "redis":
        return RedisStorage(settings.REDIS_URL, prefix=settings.STORAGE_KEY_PREFIX)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")
