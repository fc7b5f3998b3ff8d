"""
Dine-in table endpoints (branch-scoped).
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import raise_service_http_error
from app.core.database import get_db
from app.core.dependencies import require_roles
from app.core.rbac import BACK_OFFICE_ROLES, FLOOR_ROLES
from app.models.dining_table import TableStatus
from app.models.user import User
from app.schemas.table import (
    TableBulkCreate,
    TableBulkCreateResult,
    TableCreate,
    TableMerge,
    TableMergeResult,
    TableReserve,
    TableResponse,
    TableStatusUpdate,
    TableTransfer,
    TableUpdate,
)
from app.schemas.upload import MessageResponse
from app.services.errors import ServiceError
from app.services.table_service import TableService

router = APIRouter()


@router.get("", response_model=list[TableResponse])
async def list_tables(
    include_merged: bool = Query(default=False),
    status_filter: TableStatus | None = Query(default=None, alias="status"),
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> list[TableResponse]:
    try:
        tables = await TableService(db).list_tables(
            current_user.id,
            include_merged=include_merged,
            status=status_filter,
        )
    except ServiceError as exc:
        raise_service_http_error(exc)
    return [TableResponse.model_validate(t) for t in tables]


@router.post("", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
async def create_table(
    payload: TableCreate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).create_table(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(table)
    return TableResponse.model_validate(table)


@router.post("/bulk", response_model=TableBulkCreateResult, status_code=status.HTTP_201_CREATED)
async def bulk_create_tables(
    payload: TableBulkCreate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableBulkCreateResult:
    """Create ``quantity`` tables numbered from ``start_number``; existing numbers are skipped."""
    try:
        result = await TableService(db).bulk_create(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    return TableBulkCreateResult(**result)


@router.post("/transfer", response_model=TableResponse)
async def transfer_table(
    payload: TableTransfer,
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).transfer(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(table)
    return TableResponse.model_validate(table)


@router.post("/merge", response_model=TableMergeResult)
async def merge_tables(
    payload: TableMerge,
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableMergeResult:
    try:
        result = await TableService(db).merge(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(result["table"])
    return TableMergeResult(
        table=TableResponse.model_validate(result["table"]),
        merged_table_ids=result["merged_table_ids"],
        moved_orders=result["moved_orders"],
    )


@router.get("/{table_id}", response_model=TableResponse)
async def get_table(
    table_id: UUID,
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).get_table(current_user.id, table_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return TableResponse.model_validate(table)


@router.patch("/{table_id}", response_model=TableResponse)
async def update_table(
    table_id: UUID,
    payload: TableUpdate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).update_table(current_user.id, table_id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(table)
    return TableResponse.model_validate(table)


@router.patch("/{table_id}/status", response_model=TableResponse)
async def update_table_status(
    table_id: UUID,
    payload: TableStatusUpdate,
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).update_status(current_user.id, table_id, payload.status)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(table)
    return TableResponse.model_validate(table)


@router.delete("/{table_id}", response_model=MessageResponse)
async def delete_table(
    table_id: UUID,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await TableService(db).delete_table(current_user.id, table_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    return MessageResponse(message="Mesa removida com sucesso")


@router.post("/{table_id}/close", response_model=TableResponse)
async def close_table(
    table_id: UUID,
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).close_table(current_user.id, table_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(table)
    return TableResponse.model_validate(table)


@router.post("/{table_id}/clean", response_model=TableResponse)
async def mark_table_clean(
    table_id: UUID,
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).mark_clean(current_user.id, table_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(table)
    return TableResponse.model_validate(table)


@router.post("/{table_id}/reserve", response_model=TableResponse)
async def reserve_table(
    table_id: UUID,
    payload: TableReserve,
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).reserve(current_user.id, table_id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(table)
    return TableResponse.model_validate(table)


@router.delete("/{table_id}/reserve", response_model=TableResponse)
async def cancel_table_reservation(
    table_id: UUID,
    current_user: User = Depends(require_roles(*FLOOR_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> TableResponse:
    try:
        table = await TableService(db).cancel_reservation(current_user.id, table_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(table)
    return TableResponse.model_validate(table)
