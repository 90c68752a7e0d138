"""
SQLAlchemy table for materialized lifecycle notifications.

The partial unique index is the storage-level guarantee that a subject never
holds two active notifications for the same event code, even when passes for
the same subject run concurrently.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Column, Date, DateTime, Index, String, Text, text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

_ACTIVE_PREDICATE = text("status IN ('pending', 'sent')")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class NotificationRow(Base):
    """One materialized occurrence of a catalog event for a subject."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    subject_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False, default="lifecycle_event")
    event_code = Column(String, nullable=False)  # denormalized from context_data for the index
    category = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending")
    channel = Column(String, nullable=False, default="in_app")
    scheduled_at = Column(Date, nullable=True)
    context_data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index(
            "uq_notifications_active_event",
            "subject_id",
            "type",
            "event_code",
            unique=True,
            sqlite_where=_ACTIVE_PREDICATE,
            postgresql_where=_ACTIVE_PREDICATE,
        ),
        Index("ix_notifications_subject_status", "subject_id", "status"),
    )
