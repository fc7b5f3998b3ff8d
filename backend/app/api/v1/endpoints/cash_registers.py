"""
Cash register endpoints for the current operator.
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import raise_service_http_error
from app.core.database import get_db
from app.core.dependencies import require_roles
from app.core.rbac import BACK_OFFICE_ROLES
from app.models.user import User
from app.schemas.cash_register import (
    CashMovementCreate,
    CashMovementResponse,
    CashRegisterClose,
    CashRegisterOpen,
    CashRegisterResponse,
    ExpectedBalanceResponse,
)
from app.services.cash_register_service import CashRegisterService
from app.services.errors import ServiceError

router = APIRouter()


@router.post("", response_model=CashRegisterResponse, status_code=status.HTTP_201_CREATED)
async def open_cash_register(
    payload: CashRegisterOpen,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> CashRegisterResponse:
    """
    Open a register. The drawer starts with what the previous closing left
    plus ``opening_amount``.
    """
    try:
        register = await CashRegisterService(db).open_register(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    response = CashRegisterResponse.model_validate(register)
    await db.commit()
    return response


@router.get("", response_model=list[CashRegisterResponse])
async def list_cash_registers(
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> list[CashRegisterResponse]:
    try:
        registers = await CashRegisterService(db).list_registers(current_user.id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return [CashRegisterResponse.model_validate(r) for r in registers]


@router.get("/expected-balance", response_model=ExpectedBalanceResponse)
async def expected_balance(
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> ExpectedBalanceResponse:
    try:
        balance = await CashRegisterService(db).expected_balance(current_user.id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return ExpectedBalanceResponse(**balance)


@router.post("/movements", response_model=CashMovementResponse, status_code=status.HTTP_201_CREATED)
async def add_cash_movement(
    payload: CashMovementCreate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> CashMovementResponse:
    try:
        movement = await CashRegisterService(db).add_movement(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(movement)
    return CashMovementResponse.model_validate(movement)


@router.get("/{register_id}", response_model=CashRegisterResponse)
async def get_cash_register(
    register_id: UUID,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> CashRegisterResponse:
    try:
        register = await CashRegisterService(db).get_register(current_user.id, register_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return CashRegisterResponse.model_validate(register)


@router.post("/{register_id}/close", response_model=CashRegisterResponse)
async def close_cash_register(
    register_id: UUID,
    payload: CashRegisterClose,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> CashRegisterResponse:
    """
    Close the register withdrawing ``withdraw_amount``; the rest stays for the next opening.
    """
    try:
        register = await CashRegisterService(db).close_register(current_user.id, register_id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    response = CashRegisterResponse.model_validate(register)
    await db.commit()
    return response
