from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_api.db_handlers.base import BaseDBHandler
from todo_api.models.user import User
from todo_api.utils.logger import setup_logger

logger = setup_logger("db_handlers.user")


class UserDBHandler(BaseDBHandler[User]):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(User, session_factory)

    async def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        return await self.get_by_attributes(email=email)

    async def create_user(
        self, username: str, email: str, hashed_password: str
    ) -> User:
        return await self.create(
            {"username": username, "email": email, "hashed_password": hashed_password}
        )

    async def save(self, user: User, fields: dict[str, Any]) -> User:
        """Persist changed fields of an existing user."""
        logger.debug(f"Saving {sorted(fields)} for user {user.id}")
        return await self.update(user, fields)
