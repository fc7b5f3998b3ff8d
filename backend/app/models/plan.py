"""
Plan model: service tiers offered to companies.
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy import Uuid as SQLAlchemyUUID
from sqlalchemy.orm import relationship

from app.core.database import Base


class PlanType(str, Enum):
    TRIAL = "TRIAL"
    BASIC = "BASIC"
    PREMIUM = "PREMIUM"
    ENTERPRISE = "ENTERPRISE"


class BillingPeriod(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class Plan(Base):
    """
    Catalog entry with pricing, limits and trial configuration.

    Read-only from the subscription lifecycle's point of view.
    """

    __tablename__ = "plans"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(20), nullable=False, comment="TRIAL|BASIC|PREMIUM|ENTERPRISE")

    price = Column(Numeric(10, 2), nullable=False, default=0)
    billing_period = Column(
        String(20),
        nullable=False,
        default=BillingPeriod.MONTHLY.value,
        comment="MONTHLY|QUARTERLY|YEARLY",
    )

    limits = Column(JSON, nullable=True, comment="branches/users/products/ordersPerMonth")
    features = Column(JSON, nullable=True, comment="Feature flags per plan")

    is_trial = Column(Boolean, default=False, nullable=False)
    trial_days = Column(Integer, nullable=True)

    active = Column(Boolean, default=True, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    subscriptions = relationship("Subscription", back_populates="plan")

    def __repr__(self) -> str:
        return f"<Plan(id={self.id}, name='{self.name}', trial={self.is_trial})>"
