from todo_api.dependencies.auth import get_current_user_id, get_token_manager
from todo_api.dependencies.services import (
    get_auth_service,
    get_mailer,
    get_task_service,
)

__all__ = [
    "get_current_user_id",
    "get_token_manager",
    "get_auth_service",
    "get_task_service",
    "get_mailer",
]
