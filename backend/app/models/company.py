"""
Company and Branch models forming the tenant hierarchy.
"""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy import Uuid as SQLAlchemyUUID
from sqlalchemy.orm import relationship

from app.core.database import Base


class Company(Base):
    """
    Top-level tenant. Owns branches and exactly one subscription.
    """

    __tablename__ = "companies"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    document = Column(String(32), nullable=True, comment="CNPJ/CPF")
    onboarding_completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    branches = relationship(
        "Branch",
        back_populates="company",
        cascade="all, delete-orphan",
    )
    subscription = relationship(
        "Subscription",
        back_populates="company",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name='{self.name}')>"


class Branch(Base):
    """
    Physical/operational location of a company; the tenant-isolation boundary
    for catalog, stock, tables and cash registers.
    """

    __tablename__ = "branches"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    company_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    company = relationship("Company", back_populates="branches")

    def __repr__(self) -> str:
        return f"<Branch(id={self.id}, company_id={self.company_id}, name='{self.name}')>"
