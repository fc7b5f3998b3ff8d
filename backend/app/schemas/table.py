"""
Pydantic schemas for dine-in tables.
"""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.dining_table import TableStatus


class TableCreate(BaseModel):
    number: str = Field(min_length=1, max_length=20)
    identification: str | None = Field(default=None, max_length=120)


class TableBulkCreate(BaseModel):
    start_number: int = Field(ge=1)
    quantity: int = Field(ge=1, le=500)
    identification: str | None = Field(default=None, max_length=120)
    number_of_people: int | None = Field(default=None, ge=1)


class TableUpdate(BaseModel):
    number: str | None = Field(default=None, min_length=1, max_length=20)
    identification: str | None = Field(default=None, max_length=120)
    status: TableStatus | None = None
    number_of_people: int | None = Field(default=None, ge=1)

    @field_validator("number", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("campo não pode ser nulo")
        return value


class TableStatusUpdate(BaseModel):
    status: TableStatus


class TableReserve(BaseModel):
    reservation_name: str = Field(min_length=1, max_length=255)
    reservation_phone: str | None = Field(default=None, max_length=32)
    reserved_for: datetime | None = None
    number_of_people: int | None = Field(default=None, ge=1)


class TableTransfer(BaseModel):
    from_table_id: UUID
    to_table_id: UUID


class TableMerge(BaseModel):
    table_ids: list[UUID] = Field(min_length=2)
    target_table_id: UUID


class TableResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    branch_id: UUID
    number: str
    identification: str | None = None
    status: TableStatus
    number_of_people: int | None = None
    user_id: UUID | None = None
    reservation_name: str | None = None
    reservation_phone: str | None = None
    reserved_for: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TableBulkCreateResult(BaseModel):
    created: int
    skipped: int
    total: int


class TableMergeResult(BaseModel):
    table: TableResponse
    merged_table_ids: list[UUID]
    moved_orders: int
