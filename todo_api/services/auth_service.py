"""
Account service: registration, login and the OTP password reset flow.

Reset state lives on the user row. A user with no `otp` has no pending reset;
`request_password_reset` stores a fresh 4-digit code with an expiry and
`reset_password` consumes it. Codes are single use and compared in constant
time.
"""

from __future__ import annotations

import hmac
import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError

from todo_api.db_handlers.user import UserDBHandler
from todo_api.exceptions import (
    ConflictError,
    InvalidOtpError,
    NotFoundError,
    UnauthorizedError,
)
from todo_api.models.user import User
from todo_api.utils.auth import TokenManager, get_password_hash, verify_password
from todo_api.utils.logger import setup_logger

logger = setup_logger("auth_service")

OTP_DIGITS = 4


def generate_otp() -> str:
    """Random code in 1000-9999."""
    low = 10 ** (OTP_DIGITS - 1)
    return str(low + secrets.randbelow(9 * low))


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class AuthService:
    def __init__(
        self,
        user_db_handler: UserDBHandler,
        token_manager: TokenManager,
        otp_ttl: timedelta = timedelta(minutes=10),
    ):
        self.user_db_handler = user_db_handler
        self.token_manager = token_manager
        self.otp_ttl = otp_ttl

    async def _get_user_or_404(self, email: str) -> User:
        user = await self.user_db_handler.get_user_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def register(self, username: str, email: str, password: str) -> User:
        """Create an account. Raises ConflictError if the email is taken."""
        if await self.user_db_handler.get_user_by_email(email):
            raise ConflictError("User already exists")

        try:
            user = await self.user_db_handler.create_user(
                username, email, get_password_hash(password)
            )
        except IntegrityError as e:
            # Lost a race against a concurrent registration
            raise ConflictError("User already exists") from e

        logger.info(f"User registered: {user.id}")
        return user

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and mint a session token for the user."""
        user = await self._get_user_or_404(email)
        if not verify_password(password, user.hashed_password):
            logger.info(f"Rejected login for user {user.id}: bad password")
            raise UnauthorizedError("Invalid credentials")

        token = self.token_manager.create_access_token(user.id)
        logger.info(f"User logged in: {user.id}")
        return user, token

    async def request_password_reset(self, email: str) -> str:
        """Store a new reset code on the user and return it for delivery."""
        user = await self._get_user_or_404(email)
        otp = generate_otp()
        await self.user_db_handler.save(
            user, {"otp": otp, "otp_expires_at": datetime.now(UTC) + self.otp_ttl}
        )
        logger.info(f"Password reset requested for user {user.id}")
        return otp

    async def reset_password(self, email: str, otp: str, new_password: str) -> None:
        """Consume a pending reset code and replace the password."""
        user = await self._get_user_or_404(email)

        if not user.otp or not hmac.compare_digest(
            user.otp.encode("utf-8"), otp.encode("utf-8")
        ):
            raise InvalidOtpError("Invalid OTP")

        if (
            user.otp_expires_at is None
            or datetime.now(UTC) >= _as_utc(user.otp_expires_at)
        ):
            await self.user_db_handler.save(user, {"otp": None, "otp_expires_at": None})
            raise InvalidOtpError("OTP has expired")

        await self.user_db_handler.save(
            user,
            {
                "hashed_password": get_password_hash(new_password),
                "otp": None,
                "otp_expires_at": None,
            },
        )
        logger.info(f"Password reset completed for user {user.id}")
