# kirkidata/core/errors.py
from typing import Any, Optional, Tuple

# 伺服器 400 訊息 -> (穩定的顯示訊息, known_cause)；依序比對，先命中者為準
_KNOWN_400_MESSAGES: Tuple[Tuple[str, str, str], ...] = (
    ("Invalid or expired OTP",
     "Invalid or expired OTP. Please check your OTP and try again.", "otp_invalid"),
    ("Current PIN is incorrect", "Current PIN is incorrect", "pin_incorrect"),
    ("currentPin", "Current PIN is incorrect", "pin_incorrect"),
    ("Current password is incorrect", "Current password is incorrect", "password_incorrect"),
    # 後端在 PIN 欄位缺漏時會回傳 JS 的解構錯誤
    ("Cannot destructure property", "Current PIN is incorrect", "pin_incorrect"),
    ("PIN is incorrect", "Current PIN is incorrect", "pin_incorrect"),
)


class ApiError(Exception):
    """所有遠端 API 錯誤的基底；status_code 為 None 表示未發出請求或無 HTTP 狀態"""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={self.message!r})"


class AuthenticationRequired(ApiError):
    """401：憑證失效且無法自動恢復，呼叫方需重新登入"""

    def __init__(self, message: str = "Authentication required", status_code: Optional[int] = None,
                 payload: Any = None, session_cleared: bool = False):
        super().__init__(message, status_code, payload)
        self.session_cleared = session_cleared


class InvalidRequest(ApiError):
    def __init__(self, message: str = "Invalid request data", status_code: Optional[int] = 400,
                 payload: Any = None, known_cause: Optional[str] = None):
        super().__init__(message, status_code, payload)
        self.known_cause = known_cause


class Conflict(ApiError):
    pass


class ServerError(ApiError):
    pass


class NetworkOrProtocolError(ApiError):
    pass


def server_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def refine_400(message: Optional[str]) -> Tuple[str, Optional[str]]:
    """把已知的 400 訊息換成穩定文字；未知者原樣回傳"""
    if message:
        for needle, friendly, cause in _KNOWN_400_MESSAGES:
            if needle in message:
                return friendly, cause
    return message or "Invalid request data", None


def error_from_response(status_code: int, payload: Any) -> ApiError:
    """依 HTTP 狀態把非 2xx 的回應分類成對應的例外（不含 refresh 流程）"""
    message = server_message(payload)

    if status_code == 401:
        return AuthenticationRequired(message or "Authentication required", status_code, payload)
    if status_code == 400:
        friendly, cause = refine_400(message)
        return InvalidRequest(friendly, status_code, payload, known_cause=cause)
    if status_code == 409:
        return Conflict(message or "User already exists with this email or phone number", status_code, payload)
    if status_code == 500:
        return ServerError(message or "Server error occurred. Please try again later.", status_code, payload)
    return ApiError(message or f"HTTP error! status: {status_code}", status_code, payload)
