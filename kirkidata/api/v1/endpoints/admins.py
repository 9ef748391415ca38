# kirkidata/api/v1/endpoints/admins.py
from typing import Any, Dict

from kirkidata.core.deps import EndpointGroup
from kirkidata.schemas.auth import ChangePasswordRequest, Role
from kirkidata.schemas.user import AdminProfile, UpdateAdminProfileRequest


class AdminEndpoints(EndpointGroup):
    role = Role.ADMIN

    async def get_profile(self) -> Dict[str, Any]:
        envelope = await self._call("/admins/me")
        if isinstance(envelope, dict) and envelope.get("success") and isinstance(envelope.get("data"), dict):
            await self.session.set_profile(AdminProfile.model_validate(envelope["data"]).to_wire())
        return envelope

    async def update_profile(self, payload: UpdateAdminProfileRequest) -> Dict[str, Any]:
        return await self._call("/admins/me", method="PATCH", json=payload.to_wire())

    async def change_password(self, payload: ChangePasswordRequest) -> Dict[str, Any]:
        return await self._call("/admins/me/change-password", method="POST", json=payload.to_wire())

    async def get_dashboard_stats(self) -> Dict[str, Any]:
        return await self._call("/admin/stats/dashboard")
