# kirkidata/api/v1/endpoints/users.py
from typing import Any, Dict, Optional

from kirkidata.core.deps import EndpointGroup, query_params, rephrase_errors
from kirkidata.schemas.auth import Role
from kirkidata.schemas.user import (
    BulkUserOperationRequest,
    SearchUsersRequest,
    UpdateUserProfileRequest,
    UpdateUserWalletRequest,
    UserProfile,
    UserStatsRequest,
)

_USER_NOT_FOUND = {404: "User not found"}


class UserEndpoints(EndpointGroup):
    """
    /users/*
      - me 系列：以 user 身分呼叫
      - 其餘（查詢、錢包調整、停用／刪除）：僅 admin
    """

    role = Role.USER

    # === 目前登入的使用者 ===
    async def get_profile(self) -> Dict[str, Any]:
        envelope = await self._call("/users/me")
        await self._cache_profile(envelope)
        return envelope

    async def update_profile(self, payload: UpdateUserProfileRequest) -> Dict[str, Any]:
        envelope = await self._call("/users/me", method="PATCH", json=payload.to_wire())
        await self._cache_profile(envelope)
        return envelope

    async def get_wallet_balance(self) -> Dict[str, Any]:
        return await self._call("/users/me/wallet")

    async def _cache_profile(self, envelope: Any) -> None:
        if isinstance(envelope, dict) and envelope.get("success") and isinstance(envelope.get("data"), dict):
            profile = UserProfile.model_validate(envelope["data"])
            await self.session.set_profile(profile.to_wire())

    # === Admin：使用者管理 ===
    async def get_user_by_phone(self, phone: str) -> Dict[str, Any]:
        with rephrase_errors(_USER_NOT_FOUND):
            return await self._call(f"/users/phone/{phone}", role=Role.ADMIN)

    async def get_user_by_email(self, email: str) -> Dict[str, Any]:
        with rephrase_errors(_USER_NOT_FOUND):
            return await self._call(f"/users/email/{email}", role=Role.ADMIN)

    async def get_user_by_id(self, user_id: str) -> Dict[str, Any]:
        with rephrase_errors(_USER_NOT_FOUND):
            return await self._call(f"/users/{user_id}", role=Role.ADMIN)

    async def update_user(self, user_id: str, payload: UpdateUserProfileRequest) -> Dict[str, Any]:
        with rephrase_errors(_USER_NOT_FOUND):
            return await self._call(f"/users/{user_id}", method="PATCH", json=payload.to_wire(), role=Role.ADMIN)

    async def update_user_wallet(self, user_id: str, payload: UpdateUserWalletRequest) -> Dict[str, Any]:
        with rephrase_errors(_USER_NOT_FOUND):
            return await self._call(
                f"/users/{user_id}/wallet", method="POST", json=payload.to_wire(), role=Role.ADMIN,
            )

    async def search_users(self, filters: Optional[SearchUsersRequest] = None) -> Dict[str, Any]:
        return await self._call("/users", params=query_params(filters), role=Role.ADMIN)

    async def get_user_stats(self, filters: Optional[UserStatsRequest] = None) -> Dict[str, Any]:
        return await self._call("/users/stats/aggregate", params=query_params(filters), role=Role.ADMIN)

    async def bulk_operation(self, payload: BulkUserOperationRequest) -> Dict[str, Any]:
        with rephrase_errors({400: "Invalid request data. Please check the user IDs format."}):
            return await self._call("/users/bulk", method="POST", json=payload.to_wire(), role=Role.ADMIN)

    async def deactivate_user(self, user_id: str) -> Dict[str, Any]:
        with rephrase_errors(_USER_NOT_FOUND):
            return await self._call(f"/users/{user_id}/deactivate", method="POST", role=Role.ADMIN)

    async def reactivate_user(self, user_id: str) -> Dict[str, Any]:
        with rephrase_errors(_USER_NOT_FOUND):
            return await self._call(f"/users/{user_id}/reactivate", method="POST", role=Role.ADMIN)

    async def delete_user(self, user_id: str) -> Dict[str, Any]:
        with rephrase_errors(_USER_NOT_FOUND):
            return await self._call(f"/users/{user_id}", method="DELETE", role=Role.ADMIN)

    async def generate_virtual_account(self, user_id: str) -> Dict[str, Any]:
        """替指定使用者開立虛擬帳戶；已有帳戶時後端回 400"""
        with rephrase_errors({
            **_USER_NOT_FOUND,
            400: "Invalid request. Virtual account may already exist.",
        }):
            return await self._call(f"/users/{user_id}/virtual-account", method="POST", role=Role.ADMIN)
