# kirkidata/api/v1/endpoints/purchases.py
from typing import Any, Dict

from kirkidata.core.deps import EndpointGroup, rephrase_errors
from kirkidata.schemas.auth import Role
from kirkidata.schemas.purchase import AirtimePurchaseRequest, DataPurchaseRequest

# 402：餘額不足；409：交易衝突（通常重試即可）
_PURCHASE_ERRORS = {
    402: "Insufficient wallet balance. Please fund your wallet.",
    409: "Purchase failed. Please try again.",
}


class PurchaseEndpoints(EndpointGroup):
    """/purchases/*：網路清單、數據方案、購買數據與話費（user 身分）"""

    role = Role.USER

    async def get_networks(self) -> Dict[str, Any]:
        return await self._call("/purchases/networks")

    async def get_data_plan_categories(self, network_name: str) -> Dict[str, Any]:
        return await self._call(f"/purchases/data-plans/network/{network_name}/categories")

    async def get_data_plans(
        self, network_name: str, page: int = 1, sort_by: str = "price", sort_order: str = "asc",
    ) -> Dict[str, Any]:
        params = {"page": page, "sortBy": sort_by, "sortOrder": sort_order}
        return await self._call(f"/purchases/data-plans/network/{network_name}", params=params)

    async def purchase_data(self, payload: DataPurchaseRequest) -> Dict[str, Any]:
        with rephrase_errors({
            400: "Invalid purchase data. Please check your phone number and plan selection.",
            **_PURCHASE_ERRORS,
        }):
            return await self._call("/purchases/data", method="POST", json=payload.to_wire())

    async def purchase_airtime(self, payload: AirtimePurchaseRequest) -> Dict[str, Any]:
        # 400 的「餘額不足」「金額下限」訊息對使用者有意義，保留伺服器原文
        with rephrase_errors(_PURCHASE_ERRORS):
            return await self._call("/purchases/airtime", method="POST", json=payload.to_wire())
