"""
Cash register sessions and their movements.
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy import Uuid as SQLAlchemyUUID
from sqlalchemy.orm import relationship

from app.core.database import Base


class CashRegisterStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class CashMovementType(str, Enum):
    OPENING = "OPENING"
    SALE = "SALE"
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


class PaymentKind(str, Enum):
    CASH = "CASH"
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    PIX = "PIX"
    ONLINE = "ONLINE"


class CashRegister(Base):
    """
    One register session per (branch, operator) at a time.
    """

    __tablename__ = "cash_registers"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    branch_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    opened_by = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    closed_by = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    status = Column(String(20), nullable=False, default=CashRegisterStatus.OPEN.value)

    opening_amount = Column(Numeric(12, 2), nullable=False, default=0)
    expected_amount = Column(Numeric(12, 2), nullable=True)
    closing_amount = Column(Numeric(12, 2), nullable=True)
    difference = Column(Numeric(12, 2), nullable=True)

    opening_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    closing_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    movements = relationship(
        "CashMovement",
        back_populates="cash_register",
        cascade="all, delete-orphan",
        order_by="CashMovement.created_at.desc()",
    )


class CashMovement(Base):
    __tablename__ = "cash_movements"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    cash_register_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("cash_registers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    order_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
    )
    type = Column(String(20), nullable=False, comment="OPENING|SALE|DEPOSIT|WITHDRAWAL")
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default=PaymentKind.CASH.value)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    cash_register = relationship("CashRegister", back_populates="movements")
