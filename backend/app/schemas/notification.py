"""
Pydantic schemas for notification read receipts.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NotificationEntityType(str, Enum):
    ORDER = "ORDER"
    SYSTEM = "SYSTEM"
    ANNOUNCEMENT = "ANNOUNCEMENT"


class MarkNotificationRead(BaseModel):
    entity_type: NotificationEntityType
    entity_id: str = Field(min_length=1, max_length=64)
    metadata: str | None = None


class MarkMultipleNotificationsRead(BaseModel):
    notifications: list[MarkNotificationRead] = Field(min_length=1, max_length=200)


class NotificationReadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    user_id: UUID
    entity_type: NotificationEntityType
    entity_id: str
    metadata: str | None = Field(default=None, validation_alias="extra_metadata")
    read_at: datetime


class MarkReadResult(BaseModel):
    success: bool = True
    notification_read: NotificationReadResponse


class MarkMultipleReadResult(BaseModel):
    success: bool = True
    count: int
    results: list[NotificationReadResponse]


class ReadStatusResponse(BaseModel):
    is_read: bool
    read_at: datetime | None = None
