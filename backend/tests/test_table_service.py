"""
Dine-in table lifecycle tests.
"""
from __future__ import annotations

from uuid import UUID

import pytest
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.dining_table import DiningTable, TableStatus
from app.models.order import Order, OrderStatus
from app.schemas.table import (
    TableBulkCreate,
    TableCreate,
    TableMerge,
    TableReserve,
    TableTransfer,
    TableUpdate,
)
from app.services.errors import ConflictError, NotFoundError, ValidationError
from app.services.table_service import TableService


async def _table(
    db: AsyncSession,
    branch_id: UUID,
    number: str,
    status: TableStatus = TableStatus.AVAILABLE,
    people: int | None = None,
) -> DiningTable:
    table = DiningTable(branch_id=branch_id, number=number, status=status.value, number_of_people=people)
    db.add(table)
    await db.flush()
    return table


async def _order(db: AsyncSession, table: DiningTable, status: OrderStatus = OrderStatus.PENDING) -> Order:
    order = Order(branch_id=table.branch_id, table_id=table.id, order_number=1, status=status.value)
    db.add(order)
    await db.flush()
    return order


async def _order_table_ids(db: AsyncSession, *orders: Order) -> list[UUID]:
    stmt = select(Order.table_id).where(Order.id.in_([o.id for o in orders]))
    return list((await db.execute(stmt)).scalars().all())


@pytest.mark.asyncio
async def test_create_and_bulk_create_skip_taken_numbers(db_session, tenant) -> None:
    service = TableService(db_session)
    user_id = tenant.manager.id
    created = await service.create_table(user_id, TableCreate(number="2"))

    with pytest.raises(ConflictError) as exc_info:
        await service.create_table(user_id, TableCreate(number="2"))
    result = await service.bulk_create(user_id, TableBulkCreate(start_number=1, quantity=10))

    assert created.status == TableStatus.AVAILABLE.value
    assert exc_info.value.code == "table_conflict"
    assert result == {"created": 9, "skipped": 1, "total": 10}
    numbers = [t.number for t in await service.list_tables(user_id)]
    assert numbers == [str(n) for n in range(1, 11)]


@pytest.mark.asyncio
async def test_same_number_is_allowed_in_another_branch(db_session, tenant, other_tenant) -> None:
    service = TableService(db_session)
    await service.create_table(tenant.manager.id, TableCreate(number="1"))

    table = await service.create_table(other_tenant.manager.id, TableCreate(number="1"))

    assert table.branch_id == other_tenant.branch.id


@pytest.mark.asyncio
async def test_list_hides_merged_unless_requested(db_session, tenant) -> None:
    branch_id = tenant.branch.id
    await _table(db_session, branch_id, "1", TableStatus.OPEN)
    await _table(db_session, branch_id, "2", TableStatus.MERGED)
    await _table(db_session, branch_id, "3", TableStatus.RESERVED)
    service = TableService(db_session)
    user_id = tenant.waiter.id

    default = await service.list_tables(user_id)
    with_merged = await service.list_tables(user_id, include_merged=True)
    merged_only = await service.list_tables(user_id, status=TableStatus.MERGED)
    everything = await service.list_tables(user_id, status=TableStatus.ALL)

    assert [t.number for t in default] == ["1", "3"]
    assert len(with_merged) == 3
    assert [t.number for t in merged_only] == ["2"]
    assert len(everything) == 3


@pytest.mark.asyncio
async def test_update_rejects_filter_only_status(db_session, tenant) -> None:
    table = await _table(db_session, tenant.branch.id, "1")
    service = TableService(db_session)

    with pytest.raises(ValidationError):
        await service.update_table(tenant.manager.id, table.id, TableUpdate(status=TableStatus.ALL))
    with pytest.raises(ValidationError):
        await service.update_status(tenant.manager.id, table.id, TableStatus.ALL)

    updated = await service.update_table(
        tenant.manager.id,
        table.id,
        TableUpdate(identification="Varanda", status=TableStatus.OCCUPIED),
    )
    assert updated.identification == "Varanda"
    assert updated.status == TableStatus.OCCUPIED.value


@pytest.mark.asyncio
async def test_delete_only_free_tables(db_session, tenant) -> None:
    busy = await _table(db_session, tenant.branch.id, "1", TableStatus.OPEN)
    free = await _table(db_session, tenant.branch.id, "2", TableStatus.CLOSED)
    service = TableService(db_session)

    with pytest.raises(ValidationError) as exc_info:
        await service.delete_table(tenant.manager.id, busy.id)
    await service.delete_table(tenant.manager.id, free.id)

    assert exc_info.value.code == "invalid_table_state"
    assert [t.number for t in await service.list_tables(tenant.manager.id)] == ["1"]


@pytest.mark.asyncio
async def test_close_requires_no_active_orders_and_resets_merged(db_session, tenant) -> None:
    table = await _table(db_session, tenant.branch.id, "1", TableStatus.OPEN, people=4)
    merged = await _table(db_session, tenant.branch.id, "2", TableStatus.MERGED)
    order = await _order(db_session, table)
    service = TableService(db_session)

    with pytest.raises(ValidationError):
        await service.close_table(tenant.waiter.id, table.id)

    order.status = OrderStatus.DELIVERED.value
    await db_session.flush()
    closed = await service.close_table(tenant.waiter.id, table.id)
    await db_session.refresh(merged)

    assert closed.status == TableStatus.CLEANING.value
    assert closed.number_of_people is None
    assert merged.status == TableStatus.CLEANING.value

    cleaned = await service.mark_clean(tenant.waiter.id, table.id)
    assert cleaned.status == TableStatus.CLOSED.value


@pytest.mark.asyncio
async def test_reserve_and_cancel_reservation(db_session, tenant) -> None:
    table = await _table(db_session, tenant.branch.id, "5")
    busy = await _table(db_session, tenant.branch.id, "6", TableStatus.OPEN)
    service = TableService(db_session)

    reserved = await service.reserve(
        tenant.waiter.id,
        table.id,
        TableReserve(reservation_name="Ana", number_of_people=3),
    )
    assert reserved.status == TableStatus.RESERVED.value
    assert reserved.reservation_name == "Ana"

    with pytest.raises(ValidationError):
        await service.reserve(tenant.waiter.id, busy.id, TableReserve(reservation_name="Bia"))

    canceled = await service.cancel_reservation(tenant.waiter.id, table.id)
    assert canceled.status == TableStatus.CLOSED.value
    assert canceled.reservation_name is None
    assert canceled.number_of_people is None


@pytest.mark.asyncio
async def test_transfer_moves_active_orders(db_session, tenant) -> None:
    origin = await _table(db_session, tenant.branch.id, "1", TableStatus.OPEN, people=2)
    destination = await _table(db_session, tenant.branch.id, "2", TableStatus.CLOSED)
    active = await _order(db_session, origin)
    done = await _order(db_session, origin, OrderStatus.DELIVERED)
    service = TableService(db_session)

    result = await service.transfer(
        tenant.waiter.id,
        TableTransfer(from_table_id=origin.id, to_table_id=destination.id),
    )

    assert result.id == destination.id
    assert result.status == TableStatus.OPEN.value
    assert result.number_of_people == 2
    assert origin.status == TableStatus.CLOSED.value
    assert await _order_table_ids(db_session, active) == [destination.id]
    assert await _order_table_ids(db_session, done) == [origin.id]


@pytest.mark.asyncio
async def test_transfer_requires_open_origin_and_free_destination(db_session, tenant) -> None:
    closed = await _table(db_session, tenant.branch.id, "1", TableStatus.CLOSED)
    open_a = await _table(db_session, tenant.branch.id, "2", TableStatus.OPEN)
    open_b = await _table(db_session, tenant.branch.id, "3", TableStatus.OPEN)
    service = TableService(db_session)

    for from_id, to_id in ((closed.id, open_a.id), (open_a.id, open_b.id), (open_a.id, open_a.id)):
        with pytest.raises(ValidationError) as exc_info:
            await service.transfer(tenant.waiter.id, TableTransfer(from_table_id=from_id, to_table_id=to_id))
        assert exc_info.value.code == "invalid_transfer"


@pytest.mark.asyncio
async def test_merge_moves_orders_to_target(db_session, tenant) -> None:
    target = await _table(db_session, tenant.branch.id, "1", TableStatus.OPEN, people=2)
    other = await _table(db_session, tenant.branch.id, "2", TableStatus.OPEN, people=3)
    empty = await _table(db_session, tenant.branch.id, "3", TableStatus.AVAILABLE)
    moved = await _order(db_session, other)
    service = TableService(db_session)

    result = await service.merge(
        tenant.waiter.id,
        TableMerge(table_ids=[target.id, other.id, empty.id], target_table_id=target.id),
    )

    assert result["table"].id == target.id
    assert result["table"].status == TableStatus.OPEN.value
    assert result["table"].number_of_people == 5
    assert result["merged_table_ids"] == [other.id, empty.id]
    assert result["moved_orders"] == 1
    assert other.status == TableStatus.MERGED.value
    assert empty.status == TableStatus.MERGED.value
    assert await _order_table_ids(db_session, moved) == [target.id]


@pytest.mark.asyncio
async def test_merge_rejects_table_of_other_branch(db_session, tenant, other_tenant) -> None:
    mine = await _table(db_session, tenant.branch.id, "1", TableStatus.OPEN)
    foreign = await _table(db_session, other_tenant.branch.id, "1", TableStatus.OPEN)

    with pytest.raises(NotFoundError):
        await TableService(db_session).merge(
            tenant.waiter.id,
            TableMerge(table_ids=[mine.id, foreign.id], target_table_id=mine.id),
        )

    assert foreign.status == TableStatus.OPEN.value


FOREIGN_TABLE_CALLS = [
    pytest.param(lambda service, user_id, foreign, mine: service.get_table(user_id, foreign), id="get"),
    pytest.param(
        lambda service, user_id, foreign, mine: service.update_table(
            user_id, foreign, TableUpdate(identification="Invasão")
        ),
        id="update",
    ),
    pytest.param(
        lambda service, user_id, foreign, mine: service.update_status(user_id, foreign, TableStatus.OPEN),
        id="update_status",
    ),
    pytest.param(lambda service, user_id, foreign, mine: service.delete_table(user_id, foreign), id="delete"),
    pytest.param(lambda service, user_id, foreign, mine: service.close_table(user_id, foreign), id="close"),
    pytest.param(lambda service, user_id, foreign, mine: service.mark_clean(user_id, foreign), id="clean"),
    pytest.param(
        lambda service, user_id, foreign, mine: service.reserve(
            user_id, foreign, TableReserve(reservation_name="Ana")
        ),
        id="reserve",
    ),
    pytest.param(
        lambda service, user_id, foreign, mine: service.cancel_reservation(user_id, foreign),
        id="cancel_reservation",
    ),
    pytest.param(
        lambda service, user_id, foreign, mine: service.transfer(
            user_id, TableTransfer(from_table_id=mine, to_table_id=foreign)
        ),
        id="transfer_to",
    ),
    pytest.param(
        lambda service, user_id, foreign, mine: service.transfer(
            user_id, TableTransfer(from_table_id=foreign, to_table_id=mine)
        ),
        id="transfer_from",
    ),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("call", FOREIGN_TABLE_CALLS)
async def test_table_of_other_branch_behaves_as_missing(db_session, tenant, other_tenant, call) -> None:
    mine = await _table(db_session, tenant.branch.id, "1", TableStatus.OPEN, people=2)
    foreign = await _table(db_session, other_tenant.branch.id, "7", TableStatus.AVAILABLE)

    with pytest.raises(NotFoundError) as exc_info:
        await call(TableService(db_session), tenant.manager.id, foreign.id, mine.id)

    assert exc_info.value.code == "table_not_found"
    row = (
        await db_session.execute(
            select(DiningTable.status, DiningTable.identification, DiningTable.reservation_name)
            .where(DiningTable.id == foreign.id)
        )
    ).one()
    assert tuple(row) == (TableStatus.AVAILABLE.value, None, None)
    assert mine.status == TableStatus.OPEN.value


@pytest.mark.parametrize("field_name", ["number", "status"])
def test_update_schema_rejects_null_for_required_columns(field_name: str) -> None:
    with pytest.raises(SchemaValidationError):
        TableUpdate.model_validate({field_name: None})


@pytest.mark.asyncio
async def test_update_can_clear_optional_fields(db_session, tenant) -> None:
    table = await _table(db_session, tenant.branch.id, "4", people=3)
    table.identification = "Janela"
    await db_session.flush()

    updated = await TableService(db_session).update_table(
        tenant.manager.id,
        table.id,
        TableUpdate.model_validate({"identification": None, "number_of_people": None}),
    )

    assert updated.number == "4"
    assert updated.identification is None
    assert updated.number_of_people is None
