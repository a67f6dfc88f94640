import base64
import json
import uuid
from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from todo_api.exceptions import UnauthorizedError
from todo_api.utils.auth import TokenManager, get_password_hash, verify_password

SECRET = "unit-test-secret"


@pytest.fixture
def token_manager() -> TokenManager:
    return TokenManager(secret_key=SECRET)


def _b64url(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def test_password_hash_is_salted_and_verifiable():
    first = get_password_hash("pw123456")
    second = get_password_hash("pw123456")

    assert first != "pw123456"
    assert first != second
    assert verify_password("pw123456", first)
    assert verify_password("pw123456", second)
    assert not verify_password("pw1234567", first)


def test_password_longer_than_bcrypt_limit_never_verifies():
    hashed = get_password_hash("x" * 72)

    assert verify_password("x" * 72, hashed)
    assert not verify_password("x" * 100, hashed)
    assert not verify_password("\u00e9" * 40, hashed)


def test_token_resolves_to_its_own_user(token_manager: TokenManager):
    alice, bob = uuid.uuid4(), uuid.uuid4()

    alice_token = token_manager.create_access_token(alice)
    bob_token = token_manager.create_access_token(bob)

    assert token_manager.verify_session_token(alice_token) == alice
    assert token_manager.verify_session_token(bob_token) == bob
    assert token_manager.verify_session_token(alice_token) != bob


def test_token_carries_a_24_hour_window(token_manager: TokenManager):
    token = token_manager.create_access_token(uuid.uuid4())
    payload = token_manager.decode_access_token(token)

    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_expired_token_is_rejected(token_manager: TokenManager):
    token = token_manager.create_access_token(
        uuid.uuid4(), expires_delta=timedelta(seconds=-1)
    )

    assert token_manager.decode_access_token(token) is None
    with pytest.raises(UnauthorizedError, match="Invalid token"):
        token_manager.verify_session_token(token)


def test_token_signed_with_another_key_is_rejected(token_manager: TokenManager):
    forged = TokenManager(secret_key="someone-elses-key").create_access_token(
        uuid.uuid4()
    )

    assert token_manager.extract_user_id_from_token(forged) is None


def test_tampered_payload_is_rejected(token_manager: TokenManager):
    alice, bob = uuid.uuid4(), uuid.uuid4()
    header, _, signature = token_manager.create_access_token(alice).split(".")
    now = int(datetime.now(UTC).timestamp())
    tampered_payload = _b64url({"sub": str(bob), "iat": now, "exp": now + 3600})

    tampered = ".".join([header, tampered_payload, signature])

    assert token_manager.extract_user_id_from_token(tampered) is None


@pytest.mark.parametrize("garbage", ["not-a-jwt", "a.b.c", "...", "e30.e30."])
def test_malformed_tokens_fail_closed(token_manager: TokenManager, garbage: str):
    assert token_manager.extract_user_id_from_token(garbage) is None


def test_subject_must_be_a_user_id(token_manager: TokenManager):
    expire = datetime.now(UTC) + timedelta(minutes=5)
    token = jwt.encode({"sub": "alice", "exp": expire}, SECRET, algorithm="HS256")
    no_subject = jwt.encode({"exp": expire}, SECRET, algorithm="HS256")

    assert token_manager.extract_user_id_from_token(token) is None
    assert token_manager.extract_user_id_from_token(no_subject) is None


def test_missing_token_is_reported_as_such(token_manager: TokenManager):
    with pytest.raises(UnauthorizedError, match="No token provided"):
        token_manager.verify_session_token(None)
    with pytest.raises(UnauthorizedError, match="No token provided"):
        token_manager.verify_session_token("")


def test_empty_secret_key_is_refused():
    with pytest.raises(ValueError):
        TokenManager(secret_key="")
