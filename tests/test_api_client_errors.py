# tests/test_api_client_errors.py
import httpx
import pytest

from kirkidata.core.errors import (
    ApiError,
    AuthenticationRequired,
    Conflict,
    InvalidRequest,
    NetworkOrProtocolError,
    ServerError,
)
from kirkidata.schemas.auth import Role
from kirkidata.services.api_client import ApiClient
from kirkidata.services.session import build_sessions
from kirkidata.db.storage import MemoryStorage

from conftest import BASE_URL

pytestmark = pytest.mark.asyncio


# ---------- 2xx ----------
async def test_success_body_is_returned_untouched(client):
    body = await client.request("/echo")
    assert body == {"success": True, "data": {"nested": [1, 2, 3]}, "extra": "kept"}


async def test_default_content_type_and_no_auth_for_anonymous(client, backend):
    await client.request("/echo")
    call = backend.calls_to("/echo")[0]
    assert call["content_type"] == "application/json"
    assert call["auth"] is None


async def test_caller_authorization_header_wins(client, backend):
    # 沒有 session 也能送，因為呼叫方已自帶 Authorization
    await client.request("/echo", headers={"Authorization": "Bearer custom"}, role=Role.USER)
    assert backend.calls_to("/echo")[0]["auth"] == "Bearer custom"


async def test_role_without_token_raises_before_network(client, backend):
    with pytest.raises(AuthenticationRequired) as ei:
        await client.request("/echo", role=Role.USER)
    assert ei.value.message == "Authentication required"
    assert ei.value.status_code is None

    with pytest.raises(AuthenticationRequired) as ei:
        await client.request("/echo", role=Role.ADMIN)
    assert ei.value.message == "Admin access token required"

    assert backend.calls == []


# ---------- 400 ----------
@pytest.mark.parametrize(
    "server_message, expected, cause",
    [
        ("Invalid or expired OTP", "Invalid or expired OTP. Please check your OTP and try again.", "otp_invalid"),
        ("Validation failed: Current PIN is incorrect!", "Current PIN is incorrect", "pin_incorrect"),
        ("\"currentPin\" is required", "Current PIN is incorrect", "pin_incorrect"),
        ("Current password is incorrect", "Current password is incorrect", "password_incorrect"),
        ("Phone number is invalid", "Phone number is invalid", None),
    ],
)
async def test_400_messages_are_refined(client, server_message, expected, cause):
    with pytest.raises(InvalidRequest) as ei:
        await client.request("/status/400", params={"message": server_message})
    assert ei.value.message == expected
    assert ei.value.known_cause == cause
    assert ei.value.status_code == 400


async def test_400_without_message_uses_fallback(client):
    with pytest.raises(InvalidRequest) as ei:
        await client.request("/status/400")
    assert ei.value.message == "Invalid request data"
    assert ei.value.payload == {"success": False}


# ---------- 409 / 500 / 其他 ----------
async def test_409_is_conflict(client):
    with pytest.raises(Conflict) as ei:
        await client.request("/status/409")
    assert ei.value.message == "User already exists with this email or phone number"

    with pytest.raises(Conflict) as ei:
        await client.request("/status/409", params={"message": "Phone taken"})
    assert ei.value.message == "Phone taken"


async def test_500_is_server_error(client):
    with pytest.raises(ServerError) as ei:
        await client.request("/status/500")
    assert ei.value.message == "Server error occurred. Please try again later."
    assert ei.value.status_code == 500


@pytest.mark.parametrize("code", [403, 404, 418, 502])
async def test_other_statuses_are_generic_api_errors(client, code):
    with pytest.raises(ApiError) as ei:
        await client.request(f"/status/{code}")
    assert type(ei.value) is ApiError
    assert ei.value.message == f"HTTP error! status: {code}"
    assert ei.value.status_code == code


async def test_server_message_is_preferred(client):
    with pytest.raises(ApiError) as ei:
        await client.request("/status/403", params={"message": "Account suspended"})
    assert ei.value.message == "Account suspended"


# ---------- 非 JSON ----------
async def test_non_json_failure_is_protocol_error(client):
    with pytest.raises(NetworkOrProtocolError) as ei:
        await client.request("/raw/502")
    assert ei.value.message == "Server error: 502 Bad Gateway"
    assert ei.value.status_code == 502


async def test_non_json_success_is_server_error(client):
    with pytest.raises(ServerError) as ei:
        await client.request("/raw/200")
    assert ei.value.message == "Invalid JSON response from server"


# ---------- 傳輸層 ----------
def _client_raising(exc_factory) -> ApiClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ApiClient(BASE_URL, build_sessions(MemoryStorage()), http=http)


async def test_timeout_is_wrapped():
    client = _client_raising(lambda req: httpx.ConnectTimeout("timed out", request=req))
    with pytest.raises(NetworkOrProtocolError) as ei:
        await client.request("/echo")
    assert ei.value.message.startswith("Request timed out")
    assert ei.value.status_code is None
    assert isinstance(ei.value.__cause__, httpx.TimeoutException)
    await client._http.aclose()


async def test_connection_error_is_wrapped():
    client = _client_raising(lambda req: httpx.ConnectError("refused", request=req))
    with pytest.raises(NetworkOrProtocolError) as ei:
        await client.request("/echo")
    assert ei.value.message == "Please check your internet connection and try again."
    assert isinstance(ei.value.__cause__, httpx.ConnectError)
    await client._http.aclose()


async def test_unknown_role_is_rejected(client):
    client.sessions.pop(Role.ADMIN)
    with pytest.raises(ValueError):
        client.session(Role.ADMIN)
