"""
Pydantic schemas for ingredients and ingredient categories.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IngredientCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()


class IngredientCategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("nome não pode ser nulo")
        return value.strip()


class IngredientCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    branch_id: UUID
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class IngredientCategoryRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class IngredientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    unit: str = Field(default="un", max_length=20)
    category_id: UUID | None = None
    cost_price: Decimal | None = Field(default=None, ge=0)
    stock_quantity: float = 0
    min_stock: float | None = Field(default=None, ge=0)
    is_active: bool = True


class IngredientUpdate(BaseModel):
    """Partial update; only fields explicitly sent are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    unit: str | None = Field(default=None, max_length=20)
    category_id: UUID | None = None
    cost_price: Decimal | None = Field(default=None, ge=0)
    stock_quantity: float | None = None
    min_stock: float | None = Field(default=None, ge=0)
    is_active: bool | None = None

    @field_validator("name", "unit", "stock_quantity", "is_active")
    @classmethod
    def reject_null(cls, value):
        """Columns without a null state can be omitted but never cleared."""
        if value is None:
            raise ValueError("campo não pode ser nulo")
        return value


class IngredientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    branch_id: UUID
    category_id: UUID | None = None
    name: str
    unit: str
    cost_price: Decimal | None = None
    stock_quantity: float
    min_stock: float | None = None
    is_active: bool
    category: IngredientCategoryRef | None = None
    created_at: datetime
    updated_at: datetime
