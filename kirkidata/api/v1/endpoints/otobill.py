# kirkidata/api/v1/endpoints/otobill.py
from typing import Any, Dict, Literal, Optional

from kirkidata.core.deps import EndpointGroup, query_params, rephrase_errors
from kirkidata.schemas.auth import Role
from kirkidata.schemas.purchase import OtoBillTransactionFilters


class OtoBillEndpoints(EndpointGroup):
    """
    /otobill/*：第三方帳務（OtoBill）的帳戶、定價、交易與同步，僅 admin 可用。
    """

    role = Role.ADMIN

    # === 帳戶 ===
    async def get_profile(self) -> Dict[str, Any]:
        return await self._call("/otobill/profile")

    async def get_wallet_balance(self) -> Dict[str, Any]:
        return await self._call("/otobill/wallet/balance")

    # === 方案與定價 ===
    async def get_networks(self) -> Dict[str, Any]:
        return await self._call("/otobill/networks")

    async def get_data_plans_by_network(
        self, network_name: str, plan_type: str, page: int = 1, limit: int = 20,
    ) -> Dict[str, Any]:
        params = {"planType": plan_type, "page": page, "limit": limit}
        return await self._call(f"/otobill/data-plans/network/{network_name}", params=params)

    async def get_pricing_summary(self) -> Dict[str, Any]:
        return await self._call("/otobill/pricing/summary")

    async def get_data_plans_pricing(
        self, network_name: str, plan_type: str, page: int = 1, limit: int = 20,
    ) -> Dict[str, Any]:
        params = {"networkName": network_name, "planType": plan_type, "page": page, "limit": limit}
        return await self._call("/otobill/data-plans/pricing", params=params)

    async def update_data_plan_pricing(self, plan_id: str, admin_price: float) -> Dict[str, Any]:
        return await self._call(
            f"/otobill/data-plans/{plan_id}/pricing", method="PATCH", json={"adminPrice": admin_price},
        )

    # === 交易 ===
    async def get_transactions(
        self, page: int = 1, limit: int = 20, filters: Optional[OtoBillTransactionFilters] = None,
    ) -> Dict[str, Any]:
        params = {"page": page, "limit": limit, **query_params(filters)}
        return await self._call("/otobill/transactions", params=params)

    async def get_transaction(self, transaction_id: str) -> Dict[str, Any]:
        with rephrase_errors({404: "Transaction not found"}):
            return await self._call(f"/otobill/transactions/{transaction_id}")

    async def get_transaction_stats(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        type: Optional[Literal["all", "data", "airtime"]] = None,
    ) -> Dict[str, Any]:
        params = {k: v for k, v in (("startDate", start_date), ("endDate", end_date), ("type", type)) if v}
        return await self._call("/otobill/stats/transactions", params=params)

    # === 同步 ===
    async def sync_data_plans(self) -> Dict[str, Any]:
        return await self._call("/otobill/sync/data-plans", method="POST")

    async def sync_airtime_pricing(self) -> Dict[str, Any]:
        return await self._call("/otobill/sync/airtime-pricing", method="POST")
