from todo_api.db_handlers.base import BaseDBHandler, check_local_db
from todo_api.db_handlers.error_log import ErrorLogDBHandler
from todo_api.db_handlers.task import TaskDBHandler
from todo_api.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "check_local_db",
    "ErrorLogDBHandler",
    "TaskDBHandler",
    "UserDBHandler",
]
