# kirkidata/schemas/user.py
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, ConfigDict, Field

from kirkidata.schemas.common import CamelModel


class UserProfile(CamelModel):
    # 後端欄位會陸續增加，快取時一併保留
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_email_verified: bool = False
    is_active: bool = True
    wallet: float = 0

    @property
    def name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class AdminProfile(CamelModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    role: Optional[str] = None


class UpdateUserProfileRequest(CamelModel):
    first_name: str
    last_name: str
    state: str


class UpdateAdminProfileRequest(CamelModel):
    first_name: str
    last_name: str
    phone: str


class UpdateUserWalletRequest(CamelModel):
    amount: float = Field(..., gt=0)
    operation: Literal["add", "subtract"]
    description: str


class BulkUserOperationRequest(CamelModel):
    user_ids: List[str] = Field(..., min_length=1)
    operation: Literal["activate", "deactivate", "delete"]
    additional_data: Optional[Dict[str, Any]] = None


class SearchUsersRequest(CamelModel):
    search: Optional[str] = None
    is_active: Optional[bool] = None
    is_email_verified: Optional[bool] = None
    min_wallet_balance: Optional[float] = None
    max_wallet_balance: Optional[float] = None
    page: Optional[int] = None
    limit: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[Literal["asc", "desc"]] = None


class UserStatsRequest(CamelModel):
    period: Optional[Literal["day", "week", "month", "year"]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
