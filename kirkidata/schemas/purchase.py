from typing import Literal, Optional

from pydantic import Field

from kirkidata.schemas.common import CamelModel


class DataPurchaseRequest(CamelModel):
    plan_id: str
    phone_number: str


class AirtimePurchaseRequest(CamelModel):
    network_name: str
    phone_number: str
    amount: float = Field(..., gt=0)


class OtoBillTransactionFilters(CamelModel):
    transaction_type: Optional[Literal["data", "airtime"]] = None
    status: Optional[Literal["successful", "pending", "failed"]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    user_id: Optional[str] = None


class TransactionFilters(CamelModel):
    type: Optional[Literal["airtime", "data", "funding", "debit"]] = None
    status: Optional[Literal["pending", "completed", "failed", "cancelled"]] = None
    network_name: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None


# === Admin：數據方案 ===
class CreateDataPlanRequest(CamelModel):
    plan_id: str
    name: str
    network_name: str
    plan_type: str
    data_size: str
    validity_days: int = Field(..., gt=0)
    original_price: float = Field(..., ge=0)
    admin_price: float = Field(..., ge=0)
    is_active: bool = True


class UpdateDataPlanRequest(CamelModel):
    admin_price: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class DataPlanFilters(CamelModel):
    network_name: Optional[str] = None
    plan_type: Optional[str] = None
    is_active: Optional[bool] = None
    page: Optional[int] = None
    limit: Optional[int] = None
