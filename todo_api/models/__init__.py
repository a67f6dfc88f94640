"""
Database models for the to-do service.

Architecture: User → Task ownership, plus an ErrorLog of server failures.
"""

from todo_api.models.error_log import ErrorLog
from todo_api.models.task import Task
from todo_api.models.user import User

__all__ = [
    "User",
    "Task",
    "ErrorLog",
]
