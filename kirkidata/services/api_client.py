# kirkidata/services/api_client.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx
from pydantic import ValidationError

from kirkidata.core.errors import (
    ApiError,
    AuthenticationRequired,
    NetworkOrProtocolError,
    ServerError,
    error_from_response,
    server_message,
)
from kirkidata.schemas.auth import RefreshRequest, Role, TokenPair
from kirkidata.schemas.common import Envelope
from kirkidata.services.session import SessionManager

logger = logging.getLogger(__name__)

REFRESH_ENDPOINT = "/auth/refresh"


def _without_authorization(headers: Mapping[str, str]) -> Dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() != "authorization"}


class ApiClient:
    """
    遠端 REST API 的非同步 client。
      1️⃣ 依 role 從對應的 session 取出 access token 放進 Authorization
      2️⃣ 回應一律要求是 JSON，2xx 原樣回傳 envelope
      3️⃣ 第一次遇到 401 時，以該 role 的 refresh token 換新 pair 後重送一次
      4️⃣ refresh 本身回 401 → 清掉該 role 的 session；其他失敗保留 token
    同一 role 同時只會有一個 refresh 在進行，其餘呼叫等待同一個結果。
    """

    def __init__(
        self,
        base_url: str,
        sessions: Mapping[Role, SessionManager],
        http: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.sessions: Dict[Role, SessionManager] = dict(sessions)
        if http is None:
            http = httpx.AsyncClient(timeout=timeout) if timeout is not None else httpx.AsyncClient()
            self._owns_http = True
        else:
            self._owns_http = False
        self._http = http
        self._refreshing: Dict[Role, asyncio.Task] = {}

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        # 外部注入的 httpx client 由外部負責關閉
        if self._owns_http:
            await self._http.aclose()

    def session(self, role: Role) -> SessionManager:
        try:
            return self.sessions[role]
        except KeyError:
            raise ValueError(f"No session configured for role {role!r}") from None

    # === Core request ===
    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        role: Optional[Role] = None,
        is_retry: bool = False,
    ) -> Any:
        merged: Dict[str, str] = {"Content-Type": "application/json", **(headers or {})}

        # 送出前的 token；401 時用來判斷是否已被其他呼叫換過
        stored_token: Optional[str] = None
        if role is not None:
            stored_token = await self.session(role).get_access_token()
            if not any(k.lower() == "authorization" for k in merged):
                if not stored_token:
                    raise AuthenticationRequired(
                        "Admin access token required" if role is Role.ADMIN else "Authentication required"
                    )
                merged["Authorization"] = f"Bearer {stored_token}"

        response = await self._send(method, f"{self.base_url}{endpoint}", merged, json, params)
        data = self._parse(response)

        if response.is_success:
            return data

        if response.status_code == 401 and not is_retry and role is not None:
            return await self._refresh_and_retry(
                endpoint, method=method, headers=merged, json=json, params=params, role=role,
                original=data, stale_token=stored_token,
            )

        raise error_from_response(response.status_code, data)

    async def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        json: Any,
        params: Optional[Mapping[str, Any]],
    ) -> httpx.Response:
        try:
            return await self._http.request(method, url, headers=headers, json=json, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out: %s", method, url, type(exc).__name__)
            raise NetworkOrProtocolError(
                "Request timed out. Please check your internet connection and try again."
            ) from exc
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, url, type(exc).__name__)
            raise NetworkOrProtocolError(
                "Please check your internet connection and try again."
            ) from exc

    @staticmethod
    def _parse(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            if not response.is_success:
                raise NetworkOrProtocolError(
                    f"Server error: {response.status_code} {response.reason_phrase}".rstrip(),
                    response.status_code,
                ) from None
            raise ServerError("Invalid JSON response from server", response.status_code) from None

    # === Refresh & retry ===
    async def _refresh_and_retry(
        self,
        endpoint: str,
        *,
        method: str,
        headers: Dict[str, str],
        json: Any,
        params: Optional[Mapping[str, Any]],
        role: Role,
        original: Any,
        stale_token: Optional[str],
    ) -> Any:
        try:
            access_token = await self._refresh_once(role, stale_token=stale_token)
        except ApiError as exc:
            cleared = isinstance(exc, AuthenticationRequired) and exc.session_cleared
            raise AuthenticationRequired(
                server_message(original) or "Authentication required",
                401,
                original,
                session_cleared=cleared,
            ) from exc

        retry_headers = _without_authorization(headers)
        retry_headers["Authorization"] = f"Bearer {access_token}"
        # 重送失敗時直接往上拋（含狀態與訊息），不再 refresh
        return await self.request(
            endpoint, method=method, headers=retry_headers, json=json, params=params, role=role, is_retry=True,
        )

    async def _refresh_once(self, role: Role, stale_token: Optional[str] = None) -> str:
        """single-flight：同一 role 的並行 401 共用同一個 refresh task"""
        if stale_token is not None:
            current = await self.session(role).get_access_token()
            if current and current != stale_token:
                # 其他呼叫已經換過 token，直接用新的重送
                return current

        task = self._refreshing.get(role)
        if task is None or task.done():
            task = asyncio.ensure_future(self._refresh_and_store(role))
            self._refreshing[role] = task

            def _done(t: asyncio.Task, r: Role = role) -> None:
                if self._refreshing.get(r) is t:
                    del self._refreshing[r]
                # 等待者全被取消時，仍要取走例外以免 asyncio 回報未處理
                if not t.cancelled():
                    t.exception()

            task.add_done_callback(_done)
        return await asyncio.shield(task)

    async def _refresh_and_store(self, role: Role) -> str:
        session = self.session(role)
        logger.info("Access token rejected, refreshing %s session", role.value)
        try:
            pair = await self.refresh_token(role)
        except AuthenticationRequired as exc:
            if exc.status_code == 401:
                logger.warning("Token refresh failed with 401, clearing %s session", role.value)
                await session.clear()
                exc.session_cleared = True
            raise
        except ApiError as exc:
            logger.warning("Token refresh for %s failed, keeping tokens: %s", role.value, exc.message)
            raise
        await session.set_tokens(pair.access_token, pair.refresh_token)
        return pair.access_token

    async def refresh_token(self, role: Role = Role.USER) -> TokenPair:
        """
        以該 role 的 refresh token 換一組新的 pair（不會自動寫回 session）。
        沒有 refresh token 時不發請求，直接拋 AuthenticationRequired。
        """
        refresh = await self.session(role).get_refresh_token()
        if not refresh:
            raise AuthenticationRequired(
                "No admin refresh token available" if role is Role.ADMIN else "No refresh token available"
            )

        body = RefreshRequest(refresh_token=refresh, role=role).to_wire()
        raw = await self.request(REFRESH_ENDPOINT, method="POST", json=body, is_retry=True)

        try:
            envelope = Envelope[TokenPair].model_validate(raw)
        except ValidationError as exc:
            raise ServerError("Token refresh returned no token pair", payload=raw) from exc
        if not envelope.success:
            raise ServerError(envelope.message or "Token refresh failed", payload=raw)
        if envelope.data is None:
            raise ServerError("Token refresh returned no token pair", payload=raw)
        return envelope.data

    async def admin_refresh_token(self) -> TokenPair:
        return await self.refresh_token(Role.ADMIN)

    async def validate_and_refresh_tokens(self, role: Role = Role.USER) -> bool:
        """主動換一次 token；成功寫回 session 並回傳 True，任何 API 錯誤回傳 False"""
        try:
            await self._refresh_once(role)
        except ApiError as exc:
            logger.info("Token validation for %s failed: %s", role.value, exc.message)
            return False
        return True
