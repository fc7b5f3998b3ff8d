"""
Pydantic schemas for stock movements.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class StockMovementType(str, Enum):
    ENTRADA = "ENTRADA"
    SAIDA = "SAIDA"
    AJUSTE = "AJUSTE"
    VENDA = "VENDA"


class StockItemType(str, Enum):
    PRODUCT = "PRODUCT"
    OPTION = "OPTION"
    INGREDIENT = "INGREDIENT"


class StockMovementCreate(BaseModel):
    """
    Request payload. Exactly one of the three item ids must be sent; the
    service turns them into a ``StockTarget`` before touching the database.
    """

    type: StockMovementType
    item_type: StockItemType | None = None
    product_id: UUID | None = None
    option_id: UUID | None = None
    ingredient_id: UUID | None = None
    variation: float
    reason: str | None = Field(default=None, max_length=500)


class StockMovementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    branch_id: UUID
    type: StockMovementType
    item_type: StockItemType
    item_id: UUID
    item_name: str | None = None
    product_id: UUID | None = None
    option_id: UUID | None = None
    ingredient_id: UUID | None = None
    variation: float
    quantity: float
    description: str | None = None
    created_at: datetime


class StockMovementList(BaseModel):
    movements: list[StockMovementResponse]
