"""
Record of an unexpected server-side failure.

Rows are written best-effort by the application's generic exception handler.
"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql.functions import now as db_now

from todo_api.models.base import Base, UUIDMixin


class ErrorLog(Base, UUIDMixin):
    __tablename__ = "error_logs"

    error_message = Column(Text, nullable=False, comment="str() of the exception")

    stack_trace = Column(Text, nullable=True, comment="Formatted traceback")

    path = Column(String(255), nullable=True, comment="Request path that failed")

    occurred_at = Column(
        DateTime(timezone=True),
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the failure was recorded",
    )

    def __repr__(self):
        return f"<ErrorLog(id={self.id}, path='{self.path}')>"
