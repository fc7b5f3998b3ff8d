"""
Stock movement endpoints (branch-scoped).
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import raise_service_http_error
from app.core.database import get_db
from app.core.dependencies import require_roles
from app.core.rbac import BACK_OFFICE_ROLES
from app.models.user import User
from app.schemas.stock import (
    StockItemType,
    StockMovementCreate,
    StockMovementList,
    StockMovementResponse,
)
from app.schemas.upload import MessageResponse
from app.services.errors import ServiceError
from app.services.stock_service import StockService, movement_to_response

router = APIRouter()


@router.post("", response_model=StockMovementResponse, status_code=status.HTTP_201_CREATED)
async def create_movement(
    payload: StockMovementCreate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> StockMovementResponse:
    """
    Record a stock movement for exactly one product, option or ingredient.
    """
    try:
        movement = await StockService(db).create_movement(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    response = movement_to_response(movement)
    await db.commit()
    return response


@router.get("", response_model=StockMovementList)
async def list_movements(
    item_type: StockItemType | None = Query(default=None),
    item_id: UUID | None = Query(default=None),
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> StockMovementList:
    try:
        movements = await StockService(db).list_movements(
            current_user.id,
            item_type=item_type,
            item_id=item_id,
        )
    except ServiceError as exc:
        raise_service_http_error(exc)
    return StockMovementList(movements=[movement_to_response(m) for m in movements])


@router.get("/{movement_id}", response_model=StockMovementResponse)
async def get_movement(
    movement_id: UUID,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> StockMovementResponse:
    try:
        movement = await StockService(db).get_movement(current_user.id, movement_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return movement_to_response(movement)


@router.delete("/{movement_id}", response_model=MessageResponse)
async def delete_movement(
    movement_id: UUID,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await StockService(db).delete_movement(current_user.id, movement_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    return MessageResponse(message="Movimentação excluída com sucesso")
