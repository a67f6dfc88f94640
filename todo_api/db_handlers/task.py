from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_api.db_handlers.base import BaseDBHandler, check_local_db
from todo_api.models.task import Task
from todo_api.utils.logger import setup_logger

logger = setup_logger("task_db_handler")


class TaskDBHandler(BaseDBHandler[Task]):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(Task, session_factory)

    @check_local_db
    async def create_task(
        self,
        owner_id: uuid.UUID,
        title: str,
        description: str = "",
        *,
        db: AsyncSession = None,
    ) -> Task:
        task = await super().create(
            {
                "owner_id": owner_id,
                "title": title,
                "description": description,
                "completed": False,
            },
            db=db,
        )
        logger.debug(f"Created task {task.id} for owner {owner_id}")
        return task

    @check_local_db
    async def get_tasks_by_owner(
        self, owner_id: uuid.UUID, *, db: AsyncSession = None
    ) -> list[Task]:
        """All tasks of one owner, oldest first."""
        return await super().get_multi_by_attributes(
            db=db, owner_id=owner_id, order_by=[Task.created_at, Task.id]
        )
