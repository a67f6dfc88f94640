"""
Task API routes.

All routes require a valid session. Listing is scoped to the caller, and
updates or deletes of another user's task are refused with 403.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from todo_api.dependencies.auth import get_current_user_id
from todo_api.dependencies.services import get_task_service
from todo_api.schemas import (
    MessageResponse,
    TaskCreate,
    TaskEnvelope,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from todo_api.services.task_service import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@router.post(
    "/todos", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED
)
async def create_task(
    task_data: TaskCreate,
    user_id: UUID = Depends(get_current_user_id),
    task_service: TaskService = Depends(get_task_service),
):
    task = await task_service.create_task(user_id, task_data.title, task_data.description)
    return TaskEnvelope(task=TaskResponse.model_validate(task))


@router.get("/todos", response_model=TaskListResponse)
async def get_tasks(
    user_id: UUID = Depends(get_current_user_id),
    task_service: TaskService = Depends(get_task_service),
):
    """Retrieve all tasks owned by the current user."""
    tasks = await task_service.list_tasks(user_id)
    return TaskListResponse(tasks=[TaskResponse.model_validate(t) for t in tasks])


@router.put("/todos/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: UUID,
    task_data: TaskUpdate,
    user_id: UUID = Depends(get_current_user_id),
    task_service: TaskService = Depends(get_task_service),
):
    """Partially update a task owned by the current user."""
    changes = task_data.model_dump(exclude_unset=True)
    task = await task_service.update_task(task_id, user_id, changes)
    return TaskEnvelope(task=TaskResponse.model_validate(task))


@router.delete("/todos/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    task_service: TaskService = Depends(get_task_service),
):
    await task_service.delete_task(task_id, user_id)
    return MessageResponse(message="Task deleted successfully")
