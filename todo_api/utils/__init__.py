"""
Utility helpers: logging setup and authentication primitives.
"""

from todo_api.utils.auth import TokenManager, get_password_hash, verify_password
from todo_api.utils.logger import setup_logger

__all__ = [
    "TokenManager",
    "get_password_hash",
    "verify_password",
    "setup_logger",
]
