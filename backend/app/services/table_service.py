"""
TableService — dine-in table lifecycle for a branch.

Status flow::

    AVAILABLE/CLOSED -> RESERVED -> CLOSED
    OPEN -> CLEANING (close) -> CLOSED (mark clean)
    OPEN -> CLOSED (transfer origin), free -> OPEN (transfer destination)
    any -> MERGED (merged into another table)
"""
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update

from app.models.dining_table import FREE_TABLE_STATUSES, DiningTable, TableStatus
from app.models.order import ACTIVE_ORDER_STATUSES, Order
from app.schemas.table import (
    TableBulkCreate,
    TableCreate,
    TableMerge,
    TableReserve,
    TableTransfer,
    TableUpdate,
)
from app.services.branch_scope import BranchScopedService
from app.services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class TableService(BranchScopedService):

    async def list_tables(
        self,
        user_id: UUID,
        *,
        include_merged: bool = False,
        status: Optional[TableStatus] = None,
    ) -> list[DiningTable]:
        """
        List the branch's tables ordered by number.

        MERGED tables are hidden unless ``include_merged``; an explicit
        ``status`` overrides that, and ``ALL`` disables status filtering.
        """
        branch_id = await self._branch_id(user_id)
        stmt = select(DiningTable).where(DiningTable.branch_id == branch_id)
        if status is not None and status != TableStatus.ALL:
            stmt = stmt.where(DiningTable.status == status.value)
        elif status is None and not include_merged:
            stmt = stmt.where(DiningTable.status != TableStatus.MERGED.value)
        stmt = stmt.order_by(func.length(DiningTable.number), DiningTable.number)
        return list((await self._db.execute(stmt)).scalars().all())

    async def get_table(self, user_id: UUID, table_id: UUID) -> DiningTable:
        branch_id = await self._branch_id(user_id)
        return await self._get_in_branch(branch_id, table_id)

    async def create_table(self, user_id: UUID, payload: TableCreate) -> DiningTable:
        branch_id = await self._branch_id(user_id)
        if await self._number_taken(branch_id, payload.number):
            raise ConflictError("Já existe uma mesa com este número", code="table_conflict")

        table = DiningTable(
            branch_id=branch_id,
            number=payload.number,
            identification=payload.identification,
            status=TableStatus.AVAILABLE.value,
            user_id=user_id,
        )
        self._db.add(table)
        await self._db.flush()
        return table

    async def bulk_create(self, user_id: UUID, payload: TableBulkCreate) -> dict[str, int]:
        """Create numbered tables, skipping numbers that already exist."""
        branch_id = await self._branch_id(user_id)
        numbers = [str(payload.start_number + offset) for offset in range(payload.quantity)]
        existing_stmt = select(DiningTable.number).where(
            DiningTable.branch_id == branch_id,
            DiningTable.number.in_(numbers),
        )
        existing = set((await self._db.execute(existing_stmt)).scalars().all())

        created = 0
        for number in numbers:
            if number in existing:
                continue
            self._db.add(
                DiningTable(
                    branch_id=branch_id,
                    number=number,
                    identification=payload.identification,
                    number_of_people=payload.number_of_people,
                    status=TableStatus.AVAILABLE.value,
                    user_id=user_id,
                )
            )
            created += 1
        await self._db.flush()
        return {"created": created, "skipped": len(existing), "total": payload.quantity}

    async def update_table(self, user_id: UUID, table_id: UUID, payload: TableUpdate) -> DiningTable:
        branch_id = await self._branch_id(user_id)
        table = await self._get_in_branch(branch_id, table_id)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("status") == TableStatus.ALL:
            raise ValidationError("Status inválido", code="invalid_status")
        number = changes.get("number")
        if number is not None and number != table.number:
            if await self._number_taken(branch_id, number, exclude_id=table.id):
                raise ConflictError("Já existe uma mesa com este número", code="table_conflict")

        for field_name, value in changes.items():
            if field_name == "status" and value is not None:
                value = value.value
            setattr(table, field_name, value)
        table.user_id = user_id
        await self._db.flush()
        return table

    async def update_status(self, user_id: UUID, table_id: UUID, status: TableStatus) -> DiningTable:
        if status == TableStatus.ALL:
            raise ValidationError("Status inválido", code="invalid_status")
        branch_id = await self._branch_id(user_id)
        table = await self._get_in_branch(branch_id, table_id)
        table.status = status.value
        table.user_id = user_id
        await self._db.flush()
        return table

    async def delete_table(self, user_id: UUID, table_id: UUID) -> None:
        branch_id = await self._branch_id(user_id)
        table = await self._get_in_branch(branch_id, table_id)
        if table.status not in FREE_TABLE_STATUSES:
            raise ValidationError(
                "Só é possível remover mesas disponíveis",
                code="invalid_table_state",
            )
        await self._db.delete(table)
        await self._db.flush()

    async def close_table(self, user_id: UUID, table_id: UUID) -> DiningTable:
        """Send a table without active orders (and the branch's merged tables) to cleaning."""
        branch_id = await self._branch_id(user_id)
        table = await self._get_in_branch(branch_id, table_id)
        if await self._active_order_ids([table.id]):
            raise ValidationError("Mesa possui comandas abertas", code="invalid_table_state")

        await self._reset_tables(branch_id, table, TableStatus.CLEANING, user_id)
        return table

    async def mark_clean(self, user_id: UUID, table_id: UUID) -> DiningTable:
        branch_id = await self._branch_id(user_id)
        table = await self._get_in_branch(branch_id, table_id)
        await self._reset_tables(branch_id, table, TableStatus.CLOSED, user_id)
        return table

    async def reserve(self, user_id: UUID, table_id: UUID, payload: TableReserve) -> DiningTable:
        branch_id = await self._branch_id(user_id)
        table = await self._get_in_branch(branch_id, table_id)
        if table.status not in FREE_TABLE_STATUSES:
            raise ValidationError("Mesa não está disponível", code="invalid_table_state")

        table.status = TableStatus.RESERVED.value
        table.reservation_name = payload.reservation_name
        table.reservation_phone = payload.reservation_phone
        table.reserved_for = payload.reserved_for
        table.number_of_people = payload.number_of_people
        table.user_id = user_id
        await self._db.flush()
        return table

    async def cancel_reservation(self, user_id: UUID, table_id: UUID) -> DiningTable:
        branch_id = await self._branch_id(user_id)
        table = await self._get_in_branch(branch_id, table_id)
        table.status = TableStatus.CLOSED.value
        table.number_of_people = None
        table.reservation_name = None
        table.reservation_phone = None
        table.reserved_for = None
        table.user_id = user_id
        await self._db.flush()
        return table

    async def transfer(self, user_id: UUID, payload: TableTransfer) -> DiningTable:
        """
        Move the active orders of an open table to a free one.

        Returns the destination table, now OPEN.
        """
        if payload.from_table_id == payload.to_table_id:
            raise ValidationError("Mesas de origem e destino são iguais", code="invalid_transfer")
        branch_id = await self._branch_id(user_id)
        origin = await self._get_in_branch(branch_id, payload.from_table_id)
        destination = await self._get_in_branch(branch_id, payload.to_table_id)

        if origin.status != TableStatus.OPEN.value:
            raise ValidationError("Mesa de origem não está ocupada", code="invalid_transfer")
        if destination.status not in FREE_TABLE_STATUSES:
            raise ValidationError("Mesa de destino não está disponível", code="invalid_transfer")

        order_ids = await self._active_order_ids([origin.id])
        if order_ids:
            await self._db.execute(
                update(Order).where(Order.id.in_(order_ids)).values(table_id=destination.id)
            )

        destination.status = TableStatus.OPEN.value
        destination.number_of_people = origin.number_of_people
        destination.user_id = user_id
        origin.status = TableStatus.CLOSED.value
        origin.number_of_people = None
        origin.user_id = user_id
        await self._db.flush()
        logger.info(
            "Mesa %s transferida para %s (%d pedidos)",
            origin.number,
            destination.number,
            len(order_ids),
        )
        return destination

    async def merge(self, user_id: UUID, payload: TableMerge) -> dict:
        """
        Merge tables into ``target_table_id``.

        Active orders move to the target, which receives the summed party
        size; every other table becomes MERGED.
        """
        table_ids = list(dict.fromkeys(payload.table_ids))
        if payload.target_table_id not in table_ids:
            table_ids.append(payload.target_table_id)
        if len(table_ids) < 2:
            raise ValidationError("Selecione ao menos 2 mesas", code="invalid_merge")

        branch_id = await self._branch_id(user_id)
        stmt = select(DiningTable).where(
            DiningTable.id.in_(table_ids),
            DiningTable.branch_id == branch_id,
        )
        tables = {table.id: table for table in (await self._db.execute(stmt)).scalars().all()}
        target = tables.get(payload.target_table_id)
        if target is None:
            raise NotFoundError("Mesa de destino não encontrada", code="table_not_found")
        if len(tables) != len(table_ids):
            raise NotFoundError("Mesa não encontrada", code="table_not_found")

        merged_ids = [table_id for table_id in table_ids if table_id != target.id]
        moved_order_ids = await self._active_order_ids(merged_ids)
        if moved_order_ids:
            await self._db.execute(
                update(Order).where(Order.id.in_(moved_order_ids)).values(table_id=target.id)
            )
        has_orders = bool(moved_order_ids) or bool(await self._active_order_ids([target.id]))

        total_people = sum(table.number_of_people or 0 for table in tables.values())
        target.status = TableStatus.OPEN.value if has_orders else TableStatus.CLOSED.value
        target.number_of_people = total_people or None
        target.user_id = user_id
        for table_id in merged_ids:
            merged = tables[table_id]
            merged.status = TableStatus.MERGED.value
            merged.number_of_people = None
            merged.user_id = user_id
        await self._db.flush()
        return {"table": target, "merged_table_ids": merged_ids, "moved_orders": len(moved_order_ids)}

    async def _reset_tables(
        self,
        branch_id: UUID,
        table: DiningTable,
        status: TableStatus,
        user_id: UUID,
    ) -> None:
        await self._db.execute(
            update(DiningTable)
            .where(
                DiningTable.branch_id == branch_id,
                DiningTable.status == TableStatus.MERGED.value,
            )
            .values(status=status.value, number_of_people=None, user_id=user_id)
            .execution_options(synchronize_session="fetch")
        )
        table.status = status.value
        table.number_of_people = None
        table.user_id = user_id
        await self._db.flush()

    async def _active_order_ids(self, table_ids: list[UUID]) -> list[UUID]:
        if not table_ids:
            return []
        stmt = select(Order.id).where(
            Order.table_id.in_(table_ids),
            Order.status.in_(ACTIVE_ORDER_STATUSES),
        )
        return list((await self._db.execute(stmt)).scalars().all())

    async def _number_taken(
        self,
        branch_id: UUID,
        number: str,
        exclude_id: Optional[UUID] = None,
    ) -> bool:
        stmt = select(DiningTable.id).where(
            DiningTable.branch_id == branch_id,
            DiningTable.number == number,
        )
        if exclude_id is not None:
            stmt = stmt.where(DiningTable.id != exclude_id)
        return (await self._db.execute(stmt)).first() is not None

    async def _get_in_branch(self, branch_id: UUID, table_id: UUID) -> DiningTable:
        stmt = select(DiningTable).where(
            DiningTable.id == table_id,
            DiningTable.branch_id == branch_id,
        )
        table = (await self._db.execute(stmt)).scalar_one_or_none()
        if table is None:
            raise NotFoundError("Mesa não encontrada", code="table_not_found")
        return table
