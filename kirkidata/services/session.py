# kirkidata/services/session.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from kirkidata.core.security import is_token_expired, token_expiry
from kirkidata.db.storage import KeyValueStorage
from kirkidata.schemas.auth import Role, TokenPair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionKeys:
    access_token: str
    refresh_token: str
    profile: str

    def all(self) -> tuple:
        return (self.access_token, self.refresh_token, self.profile)


# 與前端 localStorage 相同的 key，兩個角色互不重疊
USER_KEYS = SessionKeys("accessToken", "refreshToken", "userData")
ADMIN_KEYS = SessionKeys("adminAccessToken", "adminRefreshToken", "adminData")

DEFAULT_KEYS: Dict[Role, SessionKeys] = {Role.USER: USER_KEYS, Role.ADMIN: ADMIN_KEYS}


class SessionEvent(str, Enum):
    LOGIN = "login"
    REFRESHED = "refreshed"
    CLEARED = "cleared"


SessionListener = Callable[[Role, SessionEvent], Any]


class SessionManager:
    """
    單一角色的 session：token pair + 快取的 profile。
    只讀寫自己角色的 key；狀態變更以事件通知訂閱者，取代輪詢。
    """

    def __init__(self, role: Role, storage: KeyValueStorage, keys: Optional[SessionKeys] = None):
        self.role = role
        self.storage = storage
        self.keys = keys or DEFAULT_KEYS[role]
        self._listeners: List[SessionListener] = []

    def __repr__(self) -> str:
        return f"SessionManager(role={self.role.value!r})"

    # === Tokens ===
    async def get_access_token(self) -> Optional[str]:
        return await self.storage.get(self.keys.access_token)

    async def get_refresh_token(self) -> Optional[str]:
        return await self.storage.get(self.keys.refresh_token)

    async def set_tokens(self, access_token: str, refresh_token: str) -> None:
        await self.storage.set(self.keys.access_token, access_token)
        await self.storage.set(self.keys.refresh_token, refresh_token)
        self._emit(SessionEvent.REFRESHED)

    async def has_tokens(self) -> bool:
        return bool(await self.get_access_token() and await self.get_refresh_token())

    # === Profile（僅供顯示，不作授權依據） ===
    async def get_profile(self) -> Optional[Dict[str, Any]]:
        raw = await self.storage.get(self.keys.profile)
        if not raw:
            return None
        try:
            profile = json.loads(raw)
        except ValueError:
            logger.warning("Cached %s profile is not valid JSON, ignoring it", self.role.value)
            return None
        return profile if isinstance(profile, dict) else None

    async def set_profile(self, profile: Dict[str, Any]) -> None:
        await self.storage.set(self.keys.profile, json.dumps(profile))

    # === Lifecycle ===
    async def start(self, pair: TokenPair, profile: Optional[Dict[str, Any]] = None) -> None:
        """登入成功：寫入 token pair 與 profile"""
        await self.storage.set(self.keys.access_token, pair.access_token)
        await self.storage.set(self.keys.refresh_token, pair.refresh_token)
        if profile is not None:
            await self.set_profile(profile)
        self._emit(SessionEvent.LOGIN)

    async def clear(self) -> None:
        await self.storage.delete(*self.keys.all())
        logger.info("%s authentication data cleared", self.role.value.capitalize())
        self._emit(SessionEvent.CLEARED)

    # === Events ===
    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.role, event)
            except Exception:
                logger.exception("Session listener failed on %s/%s", self.role.value, event.value)

    # === Diagnostics ===
    async def describe(self) -> Dict[str, Any]:
        """回報各 key 是否存在與 access token 的到期時間（不含 token 本身）"""
        access = await self.get_access_token()
        refresh = await self.get_refresh_token()
        profile_raw = await self.storage.get(self.keys.profile)
        info: Dict[str, Any] = {
            "role": self.role.value,
            "access_token": bool(access),
            "refresh_token": bool(refresh),
            "profile": bool(profile_raw),
            "access_token_expires_at": None,
            "access_token_expired": None,
        }
        if access:
            expiry = token_expiry(access)
            info["access_token_expires_at"] = expiry.isoformat() if expiry else None
            info["access_token_expired"] = is_token_expired(access)
        return info


def build_sessions(storage: KeyValueStorage) -> Dict[Role, SessionManager]:
    return {role: SessionManager(role, storage) for role in Role}


async def clear_all_sessions(sessions: Iterable[SessionManager]) -> None:
    for session in sessions:
        await session.clear()
