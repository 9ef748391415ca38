from typing import Literal

from kirkidata.schemas.common import CamelModel

# 目前支援開立虛擬帳戶的銀行
BankId = Literal["PALMPAY", "9PSB"]


class CreateVirtualAccountRequest(CamelModel):
    bank: BankId


class KycUpgradeRequest(CamelModel):
    bvn: str
