# tests/test_security.py
from datetime import datetime, timedelta, timezone

from jose import jwt

from kirkidata.core.security import get_unverified_claims, is_token_expired, token_expiry

SECRET = "test-secret"


def _token(**claims) -> str:
    return jwt.encode(claims, SECRET, algorithm="HS256")


def test_claims_are_read_without_key():
    token = _token(sub="u-1", type="access")
    assert get_unverified_claims(token)["sub"] == "u-1"


def test_expiry_round_trip():
    exp = datetime(2030, 1, 1, tzinfo=timezone.utc)
    token = _token(sub="u-1", exp=int(exp.timestamp()))

    assert token_expiry(token) == exp
    assert is_token_expired(token, now=exp - timedelta(seconds=1)) is False
    assert is_token_expired(token, now=exp + timedelta(seconds=1)) is True


def test_missing_or_bad_exp():
    assert token_expiry(_token(sub="u-1")) is None
    assert token_expiry(_token(sub="u-1", exp="soon")) is None
    assert is_token_expired(_token(sub="u-1")) is None


def test_garbage_token():
    assert token_expiry("garbage") is None
    assert is_token_expired("a.b.c") is None
