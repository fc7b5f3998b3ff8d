"""
StockMovement model — quantity delta applied to one catalog item.
"""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy import Uuid as SQLAlchemyUUID
from sqlalchemy.orm import relationship

from app.core.database import Base


class StockMovement(Base):
    """
    Exactly one of ``product_id``, ``option_id`` and ``ingredient_id`` is set.

    ``variation`` keeps the sign given by the caller; ``quantity`` is always
    ``abs(variation)`` and ``type`` carries the direction.
    """

    __tablename__ = "stock_movements"
    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN product_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN option_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN ingredient_id IS NOT NULL THEN 1 ELSE 0 END) = 1",
            name="single_target",
        ),
    )

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    branch_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(String(20), nullable=False, comment="ENTRADA|SAIDA|AJUSTE|VENDA")

    product_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    option_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("complement_options.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    ingredient_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("ingredients.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    variation = Column(Float, nullable=False)
    quantity = Column(Float, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    product = relationship("Product", lazy="joined")
    option = relationship("ComplementOption", lazy="joined")
    ingredient = relationship("Ingredient", lazy="joined")

    def __repr__(self) -> str:
        return f"<StockMovement(id={self.id}, type='{self.type}', variation={self.variation})>"
