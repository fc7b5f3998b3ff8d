"""
Pydantic schemas for the payment method catalog and branch assignment.
"""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentMethodCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    is_active: bool = True


class PaymentMethodUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    is_active: bool | None = None

    @field_validator("name", "is_active")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("campo não pode ser nulo")
        return value


class PaymentMethodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class BranchPaymentAssignment(BaseModel):
    payment_method_id: UUID
    for_dine_in: bool = False
    for_delivery: bool = False


class BranchPaymentAssignRequest(BaseModel):
    payments: list[BranchPaymentAssignment] = Field(min_length=1)


class BranchPaymentMethodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    branch_id: UUID
    payment_method_id: UUID
    for_dine_in: bool
    for_delivery: bool
    payment_method: PaymentMethodResponse
