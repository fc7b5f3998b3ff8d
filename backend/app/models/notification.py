"""
Notification read receipts and system announcements.
"""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy import Uuid as SQLAlchemyUUID

from app.core.database import Base


class NotificationRead(Base):
    """
    Marks that a user acknowledged a notification about one entity.

    Unique per (user_id, entity_type, entity_id).
    """

    __tablename__ = "notification_reads"
    __table_args__ = (
        UniqueConstraint("user_id", "entity_type", "entity_id", name="uq_notification_read_entity"),
    )

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    user_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entity_type = Column(String(30), nullable=False, comment="ORDER|SYSTEM|ANNOUNCEMENT")
    entity_id = Column(String(64), nullable=False)
    # "metadata" is reserved on declarative classes
    extra_metadata = Column("metadata", Text, nullable=True)
    read_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
