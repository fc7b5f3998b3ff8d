"""
Ingredient and IngredientCategory models — branch-scoped inventory items.
"""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Numeric, String, Text
from sqlalchemy import Uuid as SQLAlchemyUUID
from sqlalchemy.orm import relationship

from app.core.database import Base


class IngredientCategory(Base):
    __tablename__ = "ingredient_categories"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    branch_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    ingredients = relationship("Ingredient", back_populates="category")

    def __repr__(self) -> str:
        return f"<IngredientCategory(id={self.id}, name='{self.name}')>"


class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    branch_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("ingredient_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name = Column(String(255), nullable=False)
    unit = Column(String(20), nullable=False, default="un", comment="un|kg|g|l|ml")
    cost_price = Column(Numeric(10, 2), nullable=True)
    stock_quantity = Column(Float, nullable=False, default=0)
    min_stock = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    category = relationship("IngredientCategory", back_populates="ingredients")

    def __repr__(self) -> str:
        return f"<Ingredient(id={self.id}, name='{self.name}')>"
