# kirkidata/api/v1/endpoints/virtual_accounts.py
import re
from typing import Any, Dict

from kirkidata.core.deps import EndpointGroup
from kirkidata.core.errors import InvalidRequest
from kirkidata.schemas.auth import Role
from kirkidata.schemas.virtual_account import BankId, CreateVirtualAccountRequest, KycUpgradeRequest

_BVN_RE = re.compile(r"^[0-9]{11}$")


class VirtualAccountEndpoints(EndpointGroup):
    """/virtual-accounts/*：使用者的入金虛擬帳戶與 KYC 升級"""

    role = Role.USER

    async def get_available_banks(self) -> Dict[str, Any]:
        """回傳可開戶的銀行（available）與已開立的帳戶（existing）"""
        return await self._call("/virtual-accounts/available-banks")

    async def create_virtual_account(self, bank: BankId) -> Dict[str, Any]:
        body = CreateVirtualAccountRequest(bank=bank).to_wire()
        return await self._call("/virtual-accounts", method="POST", json=body)

    async def get_virtual_accounts(self) -> Dict[str, Any]:
        return await self._call("/virtual-accounts")

    async def get_virtual_account(self, account_id: str) -> Dict[str, Any]:
        return await self._call(f"/virtual-accounts/{account_id}")

    async def upgrade_kyc(self, bvn: str) -> Dict[str, Any]:
        bvn = (bvn or "").strip()
        if not bvn:
            raise InvalidRequest("Please enter a BVN", status_code=None)
        if not _BVN_RE.match(bvn):
            raise InvalidRequest("BVN must be 11 digits", status_code=None)
        body = KycUpgradeRequest(bvn=bvn).to_wire()
        return await self._call("/virtual-accounts/kyc/upgrade", method="POST", json=body)

    async def get_transactions(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        return await self._call("/virtual-accounts/transactions", params={"page": page, "limit": limit})

    async def get_account_transactions(self, account_id: str, limit: int = 10) -> Dict[str, Any]:
        return await self._call(f"/virtual-accounts/{account_id}/transactions", params={"limit": limit})
