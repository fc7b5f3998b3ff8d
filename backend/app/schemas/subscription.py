"""
Pydantic schemas for plans, subscriptions and trial status.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.models.plan import BillingPeriod


class PlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    type: str
    price: Decimal
    billing_period: str
    limits: dict[str, Any] | None = None
    features: list[str] | dict[str, Any] | None = None
    is_trial: bool
    trial_days: int | None = None
    is_featured: bool
    display_order: int


class SubscriptionCreate(BaseModel):
    plan_id: UUID
    billing_period: BillingPeriod = BillingPeriod.MONTHLY


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    plan_id: UUID
    status: str
    billing_period: str
    start_date: datetime
    end_date: datetime | None = None
    next_billing_date: datetime | None = None
    notes: str | None = None
    plan: PlanResponse | None = None


class TrialStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    days_remaining: int
    end_date: datetime
    is_expired: bool
    status: str
