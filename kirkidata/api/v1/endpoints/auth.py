# kirkidata/api/v1/endpoints/auth.py
import logging
import re
from typing import Any, Dict

from kirkidata.core.deps import EndpointGroup
from kirkidata.core.errors import InvalidRequest
from kirkidata.schemas.auth import (
    AdminLoginRequest,
    ChangePasswordRequest,
    ChangePinRequest,
    ForgotPinRequest,
    LoginRequest,
    PasswordResetRequest,
    RegisterRequest,
    ResetPasswordRequest,
    Role,
    TokenPair,
)
from kirkidata.schemas.user import AdminProfile, UserProfile

logger = logging.getLogger(__name__)

_PIN_RE = re.compile(r"^\d{4}$")
PASSWORD_MIN_LENGTH = 6


class AuthEndpoints(EndpointGroup):
    """/auth/*：註冊、登入／登出（user 與 admin）、密碼與 PIN"""

    # === 註冊 / 登入（匿名） ===
    async def register(self, payload: RegisterRequest) -> Dict[str, Any]:
        envelope = await self._call("/auth/register", method="POST", json=payload.to_wire())
        await self._start_session(Role.USER, envelope, "user")
        return envelope

    async def login(self, payload: LoginRequest) -> Dict[str, Any]:
        """使用者登入；成功時寫入 user session（token pair + profile）"""
        envelope = await self._call("/auth/login", method="POST", json=payload.to_wire())
        await self._start_session(Role.USER, envelope, "user")
        return envelope

    async def admin_login(self, payload: AdminLoginRequest) -> Dict[str, Any]:
        envelope = await self._call("/auth/admin/login", method="POST", json=payload.to_wire())
        await self._start_session(Role.ADMIN, envelope, "admin")
        return envelope

    async def _start_session(self, role: Role, envelope: Any, profile_key: str) -> None:
        if not isinstance(envelope, dict) or not envelope.get("success"):
            return
        data = envelope.get("data") or {}
        if not data.get("accessToken") or not data.get("refreshToken"):
            return
        pair = TokenPair.model_validate(data)
        model = AdminProfile if role is Role.ADMIN else UserProfile
        raw_profile = data.get(profile_key)
        profile = model.model_validate(raw_profile).to_wire() if isinstance(raw_profile, dict) else None
        await self.client.session(role).start(pair, profile)
        logger.info("%s session started", role.value.capitalize())

    # === 登出 ===
    async def logout(self) -> Dict[str, Any]:
        """伺服器端登出；不論結果如何，本地 user session 一律清除"""
        try:
            return await self._call("/auth/logout", method="POST", role=Role.USER)
        finally:
            await self.client.session(Role.USER).clear()

    async def admin_logout(self) -> Dict[str, Any]:
        try:
            return await self._call("/auth/admin/logout", method="POST", role=Role.ADMIN)
        finally:
            await self.client.session(Role.ADMIN).clear()

    # === Session 狀態 ===
    async def get_session(self) -> Dict[str, Any]:
        return await self._call("/auth/session", role=Role.USER)

    async def get_admin_session(self) -> Dict[str, Any]:
        return await self._call("/auth/admin/session", role=Role.ADMIN)

    # === 忘記密碼（匿名） ===
    async def request_password_reset(self, payload: PasswordResetRequest) -> Dict[str, Any]:
        return await self._call("/auth/request-password-reset", method="POST", json=payload.to_wire())

    async def reset_password(self, payload: ResetPasswordRequest) -> Dict[str, Any]:
        return await self._call("/auth/reset-password", method="POST", json=payload.to_wire())

    # === PIN / 密碼變更（送出前先在本地檢查） ===
    async def change_pin(self, current_pin: str, new_pin: str) -> Dict[str, Any]:
        if not current_pin or not new_pin:
            raise InvalidRequest("Current PIN and new PIN are required", status_code=None)
        if len(current_pin) != 4 or len(new_pin) != 4:
            raise InvalidRequest("PIN must be exactly 4 digits", status_code=None)
        if not _PIN_RE.match(current_pin) or not _PIN_RE.match(new_pin):
            raise InvalidRequest("PIN must contain only numbers", status_code=None)

        body = ChangePinRequest(current_pin=current_pin, new_pin=new_pin).to_wire()
        return await self._call("/auth/pin/change", method="POST", json=body, role=Role.USER)

    async def forgot_pin(self, current_password: str, new_pin: str) -> Dict[str, Any]:
        """忘記 PIN：以登入密碼驗證身分後直接設定新 PIN"""
        if not current_password or not new_pin:
            raise InvalidRequest("Current password and new PIN are required", status_code=None)
        if len(new_pin) != 4:
            raise InvalidRequest("PIN must be exactly 4 digits", status_code=None)
        if not _PIN_RE.match(new_pin):
            raise InvalidRequest("PIN must contain only numbers", status_code=None)

        body = ForgotPinRequest(current_password=current_password, new_pin=new_pin).to_wire()
        return await self._call("/auth/pin/forgot", method="POST", json=body, role=Role.USER)

    async def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        if not current_password or not new_password:
            raise InvalidRequest("Current password and new password are required", status_code=None)
        if len(new_password) < PASSWORD_MIN_LENGTH:
            raise InvalidRequest(
                f"New password must be at least {PASSWORD_MIN_LENGTH} characters", status_code=None
            )
        if current_password == new_password:
            raise InvalidRequest("New password must be different from current password", status_code=None)

        body = ChangePasswordRequest(current_password=current_password, new_password=new_password).to_wire()
        return await self._call("/auth/change-password", method="POST", json=body, role=Role.USER)

    async def is_authenticated(self, role: Role = Role.USER) -> bool:
        """本地是否持有該 role 的 token pair；不代表伺服器仍接受"""
        return await self.client.session(role).has_tokens()
