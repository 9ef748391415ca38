# kirkidata/api/v1/endpoints/data_plans.py
from typing import Any, Dict, Optional

from kirkidata.core.deps import EndpointGroup, query_params, rephrase_errors
from kirkidata.schemas.auth import Role
from kirkidata.schemas.purchase import CreateDataPlanRequest, DataPlanFilters, UpdateDataPlanRequest

_PLAN_NOT_FOUND = {404: "Data plan not found"}


class DataPlanEndpoints(EndpointGroup):
    """
    /data-plans/*：管理員維護自家的數據方案
      - 建立 / 查詢 / 調整售價與上下架 / 刪除
      - 依網路列出方案類型與各類型的方案
    """

    role = Role.ADMIN

    async def create_data_plan(self, payload: CreateDataPlanRequest) -> Dict[str, Any]:
        with rephrase_errors({409: "Data plan with this Plan ID already exists"}):
            return await self._call("/data-plans", method="POST", json=payload.to_wire())

    async def get_data_plans(self, filters: Optional[DataPlanFilters] = None) -> Dict[str, Any]:
        return await self._call("/data-plans", params=query_params(filters))

    async def get_data_plan(self, plan_id: str) -> Dict[str, Any]:
        with rephrase_errors(_PLAN_NOT_FOUND):
            return await self._call(f"/data-plans/{plan_id}")

    async def update_data_plan(self, plan_id: str, payload: UpdateDataPlanRequest) -> Dict[str, Any]:
        with rephrase_errors(_PLAN_NOT_FOUND):
            return await self._call(f"/data-plans/{plan_id}", method="PATCH", json=payload.to_wire())

    async def delete_data_plan(self, plan_id: str) -> Dict[str, Any]:
        with rephrase_errors(_PLAN_NOT_FOUND):
            return await self._call(f"/data-plans/{plan_id}", method="DELETE")

    async def get_plan_types_by_network(self, network_name: str) -> Dict[str, Any]:
        return await self._call(f"/data-plans/network/{network_name}/types")

    async def get_plans_by_network_and_type(
        self, network_name: str, plan_type: str, page: int = 1, limit: int = 20,
    ) -> Dict[str, Any]:
        return await self._call(
            f"/data-plans/network/{network_name}/type/{plan_type}", params={"page": page, "limit": limit},
        )
