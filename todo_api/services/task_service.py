"""
Owner-scoped task operations.

Every read and write is restricted to tasks whose owner is the verified
caller. Mutations of someone else's task fail with ForbiddenError; unknown ids
fail with NotFoundError.
"""

from __future__ import annotations

import uuid
from typing import Any

from todo_api.db_handlers.task import TaskDBHandler
from todo_api.exceptions import ForbiddenError, NotFoundError
from todo_api.models.task import Task
from todo_api.utils.logger import setup_logger

logger = setup_logger("task_service")

UPDATABLE_FIELDS = ("title", "description", "completed")


class TaskService:
    def __init__(self, task_db_handler: TaskDBHandler):
        self.task_db_handler = task_db_handler

    async def _get_owned_task(self, task_id: uuid.UUID, owner_id: uuid.UUID) -> Task:
        task = await self.task_db_handler.get(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        if task.owner_id != owner_id:
            logger.warning(
                f"User {owner_id} attempted to modify task {task_id} owned by {task.owner_id}"
            )
            raise ForbiddenError("Not authorized to modify this task")
        return task

    async def create_task(
        self, owner_id: uuid.UUID, title: str, description: str = ""
    ) -> Task:
        return await self.task_db_handler.create_task(owner_id, title, description)

    async def list_tasks(self, owner_id: uuid.UUID) -> list[Task]:
        return await self.task_db_handler.get_tasks_by_owner(owner_id)

    async def update_task(
        self, task_id: uuid.UUID, owner_id: uuid.UUID, fields: dict[str, Any]
    ) -> Task:
        """Apply a partial update. Keys other than title/description/completed are ignored."""
        task = await self._get_owned_task(task_id, owner_id)
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not changes:
            return task
        return await self.task_db_handler.update(task, changes)

    async def delete_task(self, task_id: uuid.UUID, owner_id: uuid.UUID) -> None:
        await self._get_owned_task(task_id, owner_id)
        await self.task_db_handler.remove(task_id)
        logger.info(f"Task {task_id} deleted by owner {owner_id}")
