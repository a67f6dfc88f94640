"""
User model for authentication and task ownership.

Architecture:
    User → Task

Key Features:
    - bcrypt password hashes, never plain text
    - Email-based login with a unique index
    - Pending password reset code with an expiry
"""

from sqlalchemy import Column, DateTime, Index, String
from sqlalchemy.orm import relationship

from todo_api.models.base import Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """
    Registered account that owns to-do tasks.

    `otp` and `otp_expires_at` are only set between a password reset request
    and its consumption.
    """

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_email", "email", unique=True),)

    username = Column(
        String(50),
        nullable=False,
        comment="Display name chosen at registration",
    )

    email = Column(
        String(255),
        nullable=False,
        comment="Unique email address used to log in",
    )

    hashed_password = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password for secure authentication",
    )

    otp = Column(
        String(8),
        nullable=True,
        comment="Pending password reset code",
    )

    otp_expires_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="Moment after which the pending reset code is rejected",
    )

    tasks = relationship(
        "Task",
        back_populates="owner",
        cascade="all, delete-orphan",
        doc="Tasks created by this user",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
