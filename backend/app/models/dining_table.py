"""
DiningTable model: dine-in tables of a branch.
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy import Uuid as SQLAlchemyUUID

from app.core.database import Base


class TableStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    RESERVED = "RESERVED"
    OCCUPIED = "OCCUPIED"
    CLEANING = "CLEANING"
    MERGED = "MERGED"
    AVAILABLE = "AVAILABLE"
    # Filter-only value, never stored
    ALL = "ALL"


# Statuses from which a table can be reserved, deleted or receive a transfer
FREE_TABLE_STATUSES: tuple[str, ...] = (TableStatus.CLOSED.value, TableStatus.AVAILABLE.value)


class DiningTable(Base):
    __tablename__ = "dining_tables"
    __table_args__ = (
        UniqueConstraint("branch_id", "number", name="uq_dining_table_branch_number"),
    )

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    branch_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    number = Column(String(20), nullable=False)
    identification = Column(String(120), nullable=True)
    status = Column(String(20), nullable=False, default=TableStatus.CLOSED.value)
    number_of_people = Column(Integer, nullable=True)

    # Last staff member who changed the table
    user_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    reservation_name = Column(String(255), nullable=True)
    reservation_phone = Column(String(32), nullable=True)
    reserved_for = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<DiningTable(id={self.id}, number='{self.number}', status='{self.status}')>"
