"""
Notification read-receipt endpoints for the current user.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import raise_service_http_error
from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.notification import (
    MarkMultipleNotificationsRead,
    MarkMultipleReadResult,
    MarkNotificationRead,
    MarkReadResult,
    NotificationEntityType,
    NotificationReadResponse,
    ReadStatusResponse,
)
from app.services.errors import ServiceError
from app.services.notification_service import NotificationService

router = APIRouter()


@router.post("/read", response_model=MarkReadResult)
async def mark_as_read(
    payload: MarkNotificationRead,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MarkReadResult:
    try:
        receipt = await NotificationService(db).mark_as_read(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    return MarkReadResult(notification_read=NotificationReadResponse.model_validate(receipt))


@router.post("/read-multiple", response_model=MarkMultipleReadResult)
async def mark_multiple_as_read(
    payload: MarkMultipleNotificationsRead,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MarkMultipleReadResult:
    """
    Mark a batch as read. The batch is committed only if every entry succeeds.
    """
    try:
        receipts = await NotificationService(db).mark_multiple_as_read(
            current_user.id,
            payload.notifications,
        )
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    return MarkMultipleReadResult(
        count=len(receipts),
        results=[NotificationReadResponse.model_validate(r) for r in receipts],
    )


@router.get("/read-status", response_model=ReadStatusResponse)
async def read_status(
    entity_type: NotificationEntityType = Query(...),
    entity_id: str = Query(..., min_length=1, max_length=64),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ReadStatusResponse:
    is_read, read_at = await NotificationService(db).is_read(current_user.id, entity_type, entity_id)
    return ReadStatusResponse(is_read=is_read, read_at=read_at)


@router.get("/read", response_model=list[NotificationReadResponse])
async def list_read_notifications(
    entity_type: NotificationEntityType | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[NotificationReadResponse]:
    """Last 100 receipts of the current user, newest first."""
    receipts = await NotificationService(db).list_read(current_user.id, entity_type)
    return [NotificationReadResponse.model_validate(r) for r in receipts]
