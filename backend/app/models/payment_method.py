"""
Payment method catalog and per-branch assignment.
"""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy import Uuid as SQLAlchemyUUID
from sqlalchemy.orm import relationship

from app.core.database import Base


class PaymentMethod(Base):
    """
    Platform-wide payment method, managed by ``master`` users.
    """

    __tablename__ = "payment_methods"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    name = Column(String(100), nullable=False, unique=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PaymentMethod(id={self.id}, name='{self.name}')>"


class BranchPaymentMethod(Base):
    __tablename__ = "branch_payment_methods"
    __table_args__ = (
        UniqueConstraint("branch_id", "payment_method_id", name="uq_branch_payment_method"),
    )

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    branch_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payment_method_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("payment_methods.id", ondelete="CASCADE"),
        nullable=False,
    )
    for_dine_in = Column(Boolean, default=False, nullable=False)
    for_delivery = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    payment_method = relationship("PaymentMethod", lazy="joined")
