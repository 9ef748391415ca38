# tests/test_admin_and_accounts.py
import pytest
import pytest_asyncio

from kirkidata.core.errors import ApiError, Conflict, InvalidRequest
from kirkidata.schemas.auth import LoginRequest, Role
from kirkidata.schemas.purchase import CreateDataPlanRequest, TransactionFilters

from fake_backend import seed_session

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def admin(api, backend):
    await seed_session(api.client, backend, Role.ADMIN, "ADM1", "ADMR1", access_valid=True)
    return api


# ---------- Transactions ----------
async def test_all_transactions_sends_page_and_filters(admin, backend):
    body = await admin.transactions.get_all_transactions(
        page=2, filters=TransactionFilters(type="data", status="completed", min_amount=99.5),
    )

    assert body["data"]["filters"] == {
        "page": "2",
        "limit": "20",
        "type": "data",
        "status": "completed",
        "minAmount": "99.5",
    }
    assert backend.calls_to("/transactions")[0]["auth"] == "Bearer ADM1"


async def test_user_transactions_default_page_size(admin):
    body = await admin.transactions.get_user_transactions("u-1")
    assert body["data"] == {"userId": "u-1", "filters": {"page": "1", "limit": "50"}}


async def test_transaction_404_is_rephrased(admin):
    body = await admin.transactions.get_transaction("tx-1")
    assert body["data"]["id"] == "tx-1"

    with pytest.raises(ApiError) as ei:
        await admin.transactions.get_transaction("tx-404")
    assert ei.value.message == "Transaction not found"
    assert ei.value.status_code == 404


# ---------- Users：依 id 查詢 / 開立虛擬帳戶 ----------
async def test_user_by_id(admin):
    body = await admin.users.get_user_by_id("u-1")
    assert body["data"]["firstName"] == "Ada"

    with pytest.raises(ApiError) as ei:
        await admin.users.get_user_by_id("u-9")
    assert ei.value.message == "User not found"
    assert ei.value.status_code == 404


async def test_generate_virtual_account(admin):
    body = await admin.users.generate_virtual_account("u-2")
    assert body["data"]["accountNumber"] == "9900000002"

    with pytest.raises(InvalidRequest) as ei:
        await admin.users.generate_virtual_account("u-1")
    assert ei.value.message == "Invalid request. Virtual account may already exist."
    assert ei.value.status_code == 400

    with pytest.raises(ApiError) as ei:
        await admin.users.generate_virtual_account("u-9")
    assert ei.value.message == "User not found"


# ---------- Data plans ----------
def _plan(plan_id: str) -> CreateDataPlanRequest:
    return CreateDataPlanRequest(
        plan_id=plan_id, name="MTN 1GB", network_name="MTN", plan_type="SME",
        data_size="1GB", validity_days=30, original_price=250, admin_price=300,
    )


async def test_create_data_plan(admin):
    body = await admin.data_plans.create_data_plan(_plan("plan-1"))
    assert body["data"]["planId"] == "plan-1"
    assert body["data"]["validityDays"] == 30
    assert body["data"]["isActive"] is True

    with pytest.raises(Conflict) as ei:
        await admin.data_plans.create_data_plan(_plan("dup"))
    assert ei.value.message == "Data plan with this Plan ID already exists"


async def test_delete_missing_data_plan(admin):
    body = await admin.data_plans.delete_data_plan("plan-1")
    assert body["message"] == "Data plan deleted"

    with pytest.raises(ApiError) as ei:
        await admin.data_plans.delete_data_plan("plan-404")
    assert ei.value.message == "Data plan not found"


async def test_data_plan_calls_need_admin_token(api, backend):
    with pytest.raises(ApiError) as ei:
        await api.data_plans.get_plan_types_by_network("MTN")
    assert ei.value.message == "Admin access token required"
    assert backend.calls == []


# ---------- Virtual accounts ----------
async def _login(api):
    await api.auth.login(LoginRequest(phone="08010000000", password="secret"))


async def test_virtual_account_flow(api, backend):
    await _login(api)

    banks = await api.virtual_accounts.get_available_banks()
    assert [b["bankId"] for b in banks["data"]["available"]] == ["9PSB"]

    created = await api.virtual_accounts.create_virtual_account("9PSB")
    assert created["data"]["bankId"] == "9PSB"
    assert backend.calls_to("/virtual-accounts", method="POST")[0]["auth"] == "Bearer A2"


@pytest.mark.parametrize(
    "bvn, message",
    [
        ("", "Please enter a BVN"),
        ("   ", "Please enter a BVN"),
        ("1234567890", "BVN must be 11 digits"),
        ("1234567890a", "BVN must be 11 digits"),
    ],
)
async def test_kyc_upgrade_local_validation(api, backend, bvn, message):
    with pytest.raises(InvalidRequest) as ei:
        await api.virtual_accounts.upgrade_kyc(bvn)
    assert ei.value.message == message
    assert backend.calls == []


async def test_kyc_upgrade_strips_bvn(api):
    await _login(api)

    body = await api.virtual_accounts.upgrade_kyc(" 12345678901 ")
    assert body["data"] == {"bvnLast4": "8901"}
