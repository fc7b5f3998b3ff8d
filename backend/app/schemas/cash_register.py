"""
Pydantic schemas for cash register sessions.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.cash_register import CashMovementType, PaymentKind


class CashRegisterOpen(BaseModel):
    opening_amount: Decimal = Field(ge=0)
    notes: str | None = None


class CashRegisterClose(BaseModel):
    withdraw_amount: Decimal = Field(ge=0, description="Valor retirado no fechamento")
    notes: str | None = None


class CashMovementCreate(BaseModel):
    type: CashMovementType
    amount: Decimal = Field(gt=0)
    payment_method: PaymentKind = PaymentKind.CASH
    order_id: UUID | None = None
    description: str | None = None


class CashMovementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: CashMovementType
    amount: Decimal
    payment_method: PaymentKind
    user_id: UUID | None = None
    order_id: UUID | None = None
    description: str | None = None
    created_at: datetime


class CashRegisterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    branch_id: UUID
    opened_by: UUID
    closed_by: UUID | None = None
    status: str
    opening_amount: Decimal
    expected_amount: Decimal | None = None
    closing_amount: Decimal | None = None
    difference: Decimal | None = None
    opening_date: datetime
    closing_date: datetime | None = None
    notes: str | None = None
    movements: list[CashMovementResponse] = []


class CashBalance(BaseModel):
    cash: Decimal
    credit: Decimal
    debit: Decimal
    pix: Decimal
    online: Decimal
    total: Decimal


class ExpectedBalanceResponse(BaseModel):
    cash_register_id: UUID
    opening_amount: Decimal
    expected_amount: Decimal
    total_sales: Decimal
    total_deposits: Decimal
    total_withdrawals: Decimal
    balance: CashBalance
