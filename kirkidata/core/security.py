# kirkidata/core/security.py
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError


# === Claims（不驗簽，僅供診斷用） ===
def get_unverified_claims(token: str) -> Dict[str, Any]:
    """
    解出 JWT 的 payload，不驗證簽章。
    客戶端沒有簽章金鑰，這裡的結果只能拿來顯示，不可作為授權依據。
    """
    return jwt.get_unverified_claims(token)


def token_expiry(token: str) -> Optional[datetime]:
    """回傳 token 的 exp（UTC）；格式錯誤或沒有 exp 時回傳 None"""
    try:
        claims = get_unverified_claims(token)
    except JWTError:
        return None
    exp = claims.get("exp")
    if exp is None:
        return None
    try:
        return datetime.fromtimestamp(int(exp), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def is_token_expired(token: str, now: Optional[datetime] = None) -> Optional[bool]:
    expiry = token_expiry(token)
    if expiry is None:
        return None
    return expiry < (now or datetime.now(timezone.utc))
