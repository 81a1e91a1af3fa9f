from datetime import UTC, datetime, timedelta
from uuid import uuid4

from src.api.auth_utils import (
    cookie_value,
    create_access_token,
    create_user_token,
    get_password_hash,
    token_from_cookie,
    user_id_from_token,
    verify_password,
)


def test_password_roundtrip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_empty_hash_never_verifies():
    assert verify_password("", "") is False
    assert verify_password("anything", "") is False


def test_user_token_roundtrip():
    uid = uuid4()
    assert user_id_from_token(create_user_token(uid)) == uid


def test_expired_token():
    long_ago = datetime.now(UTC) - timedelta(days=30)
    token = create_user_token(uuid4(), now_utc=long_ago)
    assert user_id_from_token(token) is None


def test_bad_subject():
    assert user_id_from_token(create_access_token({"sub": "nope"})) is None
    assert user_id_from_token(create_access_token({"sub": 42})) is None
    assert user_id_from_token(create_access_token({})) is None


def test_garbage_token():
    assert user_id_from_token("not-a-jwt") is None


def test_cookie_form():
    assert token_from_cookie(cookie_value("abc")) == "abc"
    assert token_from_cookie("abc") is None
    assert token_from_cookie(None) is None
