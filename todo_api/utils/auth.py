"""
Authentication utilities with JWT session tokens and bcrypt password hashing.

- bcrypt with a per-password salt
- HS256 signed tokens carrying the user id in ``sub``
- Token lifetime and signing key supplied by the caller, not read from globals
"""

import uuid
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from todo_api.exceptions import UnauthorizedError

# bcrypt refuses longer input
MAX_PASSWORD_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    pwd_bytes = plain_password.encode("utf-8")
    if len(pwd_bytes) > MAX_PASSWORD_BYTES:
        # Nothing that long could have been hashed
        return False
    return bcrypt.checkpw(pwd_bytes, hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password=pwd_bytes, salt=salt)
    return hashed_password.decode("utf-8")


class TokenManager:
    """Issues and verifies signed, self-expiring session tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 1440,
    ):
        if not secret_key:
            raise ValueError("A non-empty secret key is required to sign tokens")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expire_minutes)

    def create_access_token(
        self, user_id: uuid.UUID, expires_delta: timedelta | None = None
    ) -> str:
        """Create a JWT for `user_id`, valid from now for the configured window."""
        issued_at = datetime.now(UTC)
        expire = issued_at + (expires_delta or self.expires_delta)
        to_encode = {"sub": str(user_id), "iat": issued_at, "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> dict | None:
        """Decode and verify a JWT. Returns None on any signature, claim or expiry problem."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

    def extract_user_id_from_token(self, token: str) -> uuid.UUID | None:
        payload = self.decode_access_token(token)
        if payload is None:
            return None
        try:
            return uuid.UUID(str(payload["sub"]))
        except (KeyError, ValueError):
            return None

    def verify_session_token(self, token: str | None) -> uuid.UUID:
        """Resolve a token to its user id or raise UnauthorizedError."""
        if not token:
            raise UnauthorizedError("Unauthorized: No token provided")
        user_id = self.extract_user_id_from_token(token)
        if user_id is None:
            raise UnauthorizedError("Unauthorized: Invalid token")
        return user_id
