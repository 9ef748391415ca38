# kirkidata/api/v1/router.py
from typing import Any, Optional

# 匯入所有已定義的 endpoint 群組
from .endpoints.admins import AdminEndpoints
from .endpoints.auth import AuthEndpoints
from .endpoints.data_plans import DataPlanEndpoints
from .endpoints.otobill import OtoBillEndpoints
from .endpoints.purchases import PurchaseEndpoints
from .endpoints.transactions import TransactionEndpoints
from .endpoints.users import UserEndpoints
from .endpoints.virtual_accounts import VirtualAccountEndpoints
from kirkidata.db.storage import KeyValueStorage
from kirkidata.schemas.auth import Role
from kirkidata.services.api_client import ApiClient
from kirkidata.services.session import SessionManager, clear_all_sessions


class ApiV1:
    """API v1 門面：共用同一個 ApiClient 的所有 endpoint 群組"""

    def __init__(self, client: ApiClient, storage: Optional[KeyValueStorage] = None):
        self.client = client
        self.storage = storage

        # 認證 / 登入 / Refresh Token
        self.auth = AuthEndpoints(client)
        # 使用者（me 與 admin 管理）
        self.users = UserEndpoints(client)
        # 管理員自身
        self.admins = AdminEndpoints(client)
        # 數據與話費購買
        self.purchases = PurchaseEndpoints(client)
        # 第三方帳務 OtoBill
        self.otobill = OtoBillEndpoints(client)
        # 全站交易紀錄（admin）
        self.transactions = TransactionEndpoints(client)
        # 數據方案維護（admin）
        self.data_plans = DataPlanEndpoints(client)
        # 虛擬帳戶與 KYC
        self.virtual_accounts = VirtualAccountEndpoints(client)

    @property
    def user_session(self) -> SessionManager:
        return self.client.session(Role.USER)

    @property
    def admin_session(self) -> SessionManager:
        return self.client.session(Role.ADMIN)

    async def clear_all_sessions(self) -> None:
        await clear_all_sessions(self.client.sessions.values())

    async def aclose(self) -> None:
        await self.client.aclose()
        if self.storage is not None:
            await self.storage.aclose()

    async def __aenter__(self) -> "ApiV1":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
