"""
Payment method endpoints: platform catalog (master) and branch assignment.
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import raise_service_http_error
from app.core.database import get_db
from app.core.dependencies import get_current_user, require_roles
from app.core.rbac import BACK_OFFICE_ROLES, UserRole
from app.models.user import User
from app.schemas.payment_method import (
    BranchPaymentAssignRequest,
    BranchPaymentMethodResponse,
    PaymentMethodCreate,
    PaymentMethodResponse,
    PaymentMethodUpdate,
)
from app.services.errors import ServiceError
from app.services.payment_method_service import PaymentMethodService

router = APIRouter()


@router.post("", response_model=PaymentMethodResponse, status_code=status.HTTP_201_CREATED)
async def create_payment_method(
    payload: PaymentMethodCreate,
    current_user: User = Depends(require_roles(UserRole.MASTER)),
    db: AsyncSession = Depends(get_db),
) -> PaymentMethodResponse:
    try:
        method = await PaymentMethodService(db).create(payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(method)
    return PaymentMethodResponse.model_validate(method)


@router.get("", response_model=list[PaymentMethodResponse])
async def list_payment_methods(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[PaymentMethodResponse]:
    """List active payment methods of the platform catalog."""
    methods = await PaymentMethodService(db).list_active()
    return [PaymentMethodResponse.model_validate(m) for m in methods]


@router.get("/branch", response_model=list[BranchPaymentMethodResponse])
async def list_branch_payment_methods(
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> list[BranchPaymentMethodResponse]:
    try:
        assignments = await PaymentMethodService(db).list_branch_payments(current_user.id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return [BranchPaymentMethodResponse.model_validate(a) for a in assignments]


@router.put("/branch", response_model=list[BranchPaymentMethodResponse])
async def assign_branch_payment_methods(
    payload: BranchPaymentAssignRequest,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> list[BranchPaymentMethodResponse]:
    """
    Enable payment methods for the caller's branch (dine-in and/or delivery).
    """
    try:
        assignments = await PaymentMethodService(db).assign_to_branch(current_user.id, payload.payments)
    except ServiceError as exc:
        raise_service_http_error(exc)
    response = [BranchPaymentMethodResponse.model_validate(a) for a in assignments]
    await db.commit()
    return response


@router.patch("/{method_id}", response_model=PaymentMethodResponse)
async def update_payment_method(
    method_id: UUID,
    payload: PaymentMethodUpdate,
    current_user: User = Depends(require_roles(UserRole.MASTER)),
    db: AsyncSession = Depends(get_db),
) -> PaymentMethodResponse:
    try:
        method = await PaymentMethodService(db).update(method_id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(method)
    return PaymentMethodResponse.model_validate(method)


@router.delete("/{method_id}", response_model=PaymentMethodResponse)
async def deactivate_payment_method(
    method_id: UUID,
    current_user: User = Depends(require_roles(UserRole.MASTER)),
    db: AsyncSession = Depends(get_db),
) -> PaymentMethodResponse:
    try:
        method = await PaymentMethodService(db).deactivate(method_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(method)
    return PaymentMethodResponse.model_validate(method)
