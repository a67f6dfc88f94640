"""
Task model for to-do items.

Every task belongs to exactly one user. The owner is captured from the
verified session when the task is created and never changes afterwards.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Text, Uuid, false
from sqlalchemy.orm import relationship

from todo_api.models.base import Base, TimestampMixin, UUIDMixin


class Task(Base, UUIDMixin, TimestampMixin):
    """A single to-do item owned by one user."""

    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_owner_id", "owner_id"),)

    title = Column(
        String(255),
        nullable=False,
        comment="Short title of the to-do item",
    )

    description = Column(
        Text,
        nullable=False,
        default="",
        server_default="",
        comment="Free-text details",
    )

    completed = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Whether the item has been done",
    )

    owner_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Reference to the user who created this task",
    )

    owner = relationship(
        "User",
        back_populates="tasks",
        doc="User who created this task",
    )

    def __repr__(self):
        return (
            f"<Task(id={self.id}, owner_id={self.owner_id}, "
            f"completed={self.completed}, title='{(self.title or '')[:50]}')>"
        )
