# kirkidata/api/v1/endpoints/transactions.py
from typing import Any, Dict, Optional

from kirkidata.core.deps import EndpointGroup, query_params, rephrase_errors
from kirkidata.schemas.auth import Role
from kirkidata.schemas.purchase import TransactionFilters


class TransactionEndpoints(EndpointGroup):
    """/transactions/*：全站交易紀錄與統計（admin）"""

    role = Role.ADMIN

    async def get_all_transactions(
        self, page: int = 1, limit: int = 20, filters: Optional[TransactionFilters] = None,
    ) -> Dict[str, Any]:
        params = {"page": page, "limit": limit, **query_params(filters)}
        return await self._call("/transactions", params=params)

    async def get_transaction(self, transaction_id: str) -> Dict[str, Any]:
        with rephrase_errors({404: "Transaction not found"}):
            return await self._call(f"/transactions/{transaction_id}")

    async def get_transaction_stats(
        self, start_date: Optional[str] = None, end_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = {k: v for k, v in (("startDate", start_date), ("endDate", end_date)) if v}
        return await self._call("/transactions/stats", params=params)

    async def get_user_transactions(
        self, user_id: str, page: int = 1, limit: int = 50, filters: Optional[TransactionFilters] = None,
    ) -> Dict[str, Any]:
        params = {"page": page, "limit": limit, **query_params(filters)}
        return await self._call(f"/transactions/user/{user_id}", params=params)
