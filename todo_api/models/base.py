"""
Base configurations and mixins for database models.

Tables are declared without a schema; when a Postgres schema is configured the
engine maps them onto it through ``schema_translate_map``.
"""

import uuid

from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.functions import now as db_now


Base = declarative_base()


class TimestampMixin:
    """
    Mixin class that adds automatic timestamp management to models.

    created_at is set by the database on insert, updated_at on every update.
    """

    created_at = Column(
        DateTime(timezone=True),
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was created",
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=db_now(),
        onupdate=db_now(),
        nullable=False,
        comment="Timestamp when the record was last updated",
    )


class UUIDMixin:
    """Mixin class that adds a UUID4 primary key to models."""

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key using UUID4 format",
    )


__all__ = ["Base", "TimestampMixin", "UUIDMixin"]
