"""
NotificationService: per-user read receipts for notifications.

Receipts are keyed by (user, entity_type, entity_id); marking twice only
refreshes ``read_at`` and replaces the metadata.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Announcement, NotificationRead
from app.models.order import Order
from app.schemas.notification import MarkNotificationRead, NotificationEntityType
from app.services.errors import NotFoundError

READ_NOTIFICATIONS_LIMIT = 100

UPSERT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


class NotificationService:
    """Read-receipt tracking scoped to the calling user."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def mark_as_read(self, user_id: UUID, payload: MarkNotificationRead) -> NotificationRead:
        """
        Record the receipt with a single INSERT ... ON CONFLICT DO UPDATE.

        Concurrent identical requests converge on one row instead of
        tripping ``uq_notification_read_entity``.
        """
        await self._validate_entity(payload.entity_type, payload.entity_id)

        now = datetime.utcnow()
        insert = UPSERT_INSERTS[self._db.bind.dialect.name]
        columns = NotificationRead.__table__.c
        stmt = insert(NotificationRead).values(
            user_id=user_id,
            entity_type=payload.entity_type.value,
            entity_id=payload.entity_id,
            extra_metadata=payload.metadata,
            read_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[columns.user_id, columns.entity_type, columns.entity_id],
            set_={
                columns.read_at: stmt.excluded.read_at,
                columns["metadata"]: stmt.excluded["metadata"],
                columns.updated_at: now,
            },
        )
        await self._db.execute(stmt)
        return await self._find(user_id, payload.entity_type, payload.entity_id)

    async def mark_multiple_as_read(
        self,
        user_id: UUID,
        notifications: list[MarkNotificationRead],
    ) -> list[NotificationRead]:
        """
        Mark a batch sequentially in the caller's session.

        A failing entry aborts the whole batch; every entry is idempotent,
        so the batch can be retried as a whole.
        """
        results = []
        for notification in notifications:
            results.append(await self.mark_as_read(user_id, notification))
        return results

    async def is_read(
        self,
        user_id: UUID,
        entity_type: NotificationEntityType,
        entity_id: str,
    ) -> tuple[bool, Optional[datetime]]:
        receipt = await self._find(user_id, entity_type, entity_id)
        if receipt is None:
            return False, None
        return True, receipt.read_at

    async def list_read(
        self,
        user_id: UUID,
        entity_type: Optional[NotificationEntityType] = None,
    ) -> list[NotificationRead]:
        stmt = select(NotificationRead).where(NotificationRead.user_id == user_id)
        if entity_type is not None:
            stmt = stmt.where(NotificationRead.entity_type == entity_type.value)
        stmt = stmt.order_by(NotificationRead.read_at.desc()).limit(READ_NOTIFICATIONS_LIMIT)
        return list((await self._db.execute(stmt)).scalars().all())

    async def _find(
        self,
        user_id: UUID,
        entity_type: NotificationEntityType,
        entity_id: str,
    ) -> Optional[NotificationRead]:
        stmt = select(NotificationRead).where(
            NotificationRead.user_id == user_id,
            NotificationRead.entity_type == entity_type.value,
            NotificationRead.entity_id == entity_id,
        ).execution_options(populate_existing=True)
        return (await self._db.execute(stmt)).scalar_one_or_none()

    async def _validate_entity(self, entity_type: NotificationEntityType, entity_id: str) -> None:
        # SYSTEM notifications have no backing row
        if entity_type == NotificationEntityType.ORDER:
            if not await self._exists(Order, entity_id):
                raise NotFoundError(
                    f"Pedido com ID {entity_id} não encontrado",
                    code="order_not_found",
                )
        elif entity_type == NotificationEntityType.ANNOUNCEMENT:
            if not await self._exists(Announcement, entity_id):
                raise NotFoundError(
                    f"Aviso com ID {entity_id} não encontrado",
                    code="announcement_not_found",
                )

    async def _exists(self, model, entity_id: str) -> bool:
        try:
            row_id = UUID(entity_id)
        except ValueError:
            return False
        stmt = select(model.id).where(model.id == row_id)
        return (await self._db.execute(stmt)).scalar_one_or_none() is not None
