from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_api.db_handlers.base import BaseDBHandler
from todo_api.models.error_log import ErrorLog


class ErrorLogDBHandler(BaseDBHandler[ErrorLog]):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(ErrorLog, session_factory)

    async def record(
        self, error_message: str, stack_trace: str | None = None, path: str | None = None
    ) -> ErrorLog:
        return await self.create(
            {"error_message": error_message, "stack_trace": stack_trace, "path": path}
        )
