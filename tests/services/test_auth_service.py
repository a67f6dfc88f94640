from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_api.db_handlers import UserDBHandler
from todo_api.exceptions import (
    ConflictError,
    InvalidOtpError,
    NotFoundError,
    UnauthorizedError,
)
from todo_api.services.auth_service import AuthService, generate_otp
from todo_api.utils.auth import TokenManager, verify_password


@pytest.fixture
def user_db_handler(session_factory: async_sessionmaker[AsyncSession]) -> UserDBHandler:
    return UserDBHandler(session_factory)


@pytest.fixture
def token_manager() -> TokenManager:
    return TokenManager(secret_key="service-test-secret")


@pytest.fixture
def auth_service(user_db_handler, token_manager) -> AuthService:
    return AuthService(user_db_handler, token_manager)


def test_generated_codes_are_four_digits():
    codes = {generate_otp() for _ in range(200)}

    assert all(len(code) == 4 and code.isdigit() for code in codes)
    assert all(1000 <= int(code) <= 9999 for code in codes)


@pytest.mark.asyncio
async def test_register_stores_hash_and_rejects_duplicate_email(
    auth_service: AuthService, user_db_handler: UserDBHandler
):
    await auth_service.register("alice", "a@x.com", "pw123456")

    stored = await user_db_handler.get_user_by_email("a@x.com")
    assert stored.hashed_password != "pw123456"
    assert verify_password("pw123456", stored.hashed_password)
    assert stored.otp is None

    with pytest.raises(ConflictError):
        await auth_service.register("alice2", "a@x.com", "other-password")


@pytest.mark.asyncio
async def test_login_outcomes(auth_service: AuthService, token_manager: TokenManager):
    user = await auth_service.register("alice", "a@x.com", "pw123456")

    with pytest.raises(NotFoundError):
        await auth_service.login("nobody@x.com", "pw123456")
    with pytest.raises(UnauthorizedError, match="Invalid credentials"):
        await auth_service.login("a@x.com", "wrong-password")

    logged_in, token = await auth_service.login("a@x.com", "pw123456")
    assert logged_in.id == user.id
    assert token_manager.verify_session_token(token) == user.id


@pytest.mark.asyncio
async def test_reset_requires_a_known_email(auth_service: AuthService):
    with pytest.raises(NotFoundError):
        await auth_service.request_password_reset("nobody@x.com")
    with pytest.raises(NotFoundError):
        await auth_service.reset_password("nobody@x.com", "1234", "new-password")


@pytest.mark.asyncio
async def test_code_never_issued_is_rejected(auth_service: AuthService):
    await auth_service.register("alice", "a@x.com", "pw123456")

    with pytest.raises(InvalidOtpError):
        await auth_service.reset_password("a@x.com", "1234", "new-password")


@pytest.mark.asyncio
async def test_code_issued_for_another_email_is_rejected(auth_service: AuthService):
    await auth_service.register("alice", "a@x.com", "pw123456")
    await auth_service.register("bob", "b@x.com", "pw123456")

    alice_code = await auth_service.request_password_reset("a@x.com")

    with pytest.raises(InvalidOtpError):
        await auth_service.reset_password("b@x.com", alice_code, "new-password")


@pytest.mark.asyncio
async def test_successful_reset_replaces_password_and_consumes_code(
    auth_service: AuthService, user_db_handler: UserDBHandler
):
    await auth_service.register("alice", "a@x.com", "pw123456")
    code = await auth_service.request_password_reset("a@x.com")

    await auth_service.reset_password("a@x.com", code, "new-password")

    stored = await user_db_handler.get_user_by_email("a@x.com")
    assert stored.otp is None
    assert stored.otp_expires_at is None
    await auth_service.login("a@x.com", "new-password")
    with pytest.raises(UnauthorizedError):
        await auth_service.login("a@x.com", "pw123456")

    with pytest.raises(InvalidOtpError):
        await auth_service.reset_password("a@x.com", code, "third-password")


@pytest.mark.asyncio
async def test_expired_code_is_rejected_and_cleared(
    user_db_handler: UserDBHandler, token_manager: TokenManager
):
    auth_service = AuthService(user_db_handler, token_manager, otp_ttl=timedelta(0))
    await auth_service.register("alice", "a@x.com", "pw123456")
    code = await auth_service.request_password_reset("a@x.com")

    with pytest.raises(InvalidOtpError, match="expired"):
        await auth_service.reset_password("a@x.com", code, "new-password")

    stored = await user_db_handler.get_user_by_email("a@x.com")
    assert stored.otp is None
    await auth_service.login("a@x.com", "pw123456")
