"""
User model: back-office staff and platform operators.
"""
from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy import Uuid as SQLAlchemyUUID
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.rbac import UserRole


class User(Base):
    """
    Authenticated user. Company staff carry ``company_id`` and usually
    ``branch_id``; platform operators (``master``) carry neither.
    """
    __tablename__ = "users"

    id = Column(SQLAlchemyUUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)

    role = Column(
        String(20),
        default=UserRole.MANAGER.value,
        nullable=False,
        comment="master|admin|manager|waiter",
    )

    company_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    branch_id = Column(
        SQLAlchemyUUID(as_uuid=True),
        ForeignKey("branches.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )
    last_login_at = Column(DateTime, nullable=True)

    company = relationship("Company")
    branch = relationship("Branch")

    def __repr__(self):
        return (
            f"<User(id={self.id}, email='{self.email}', "
            f"role='{self.role}', branch_id={self.branch_id})>"
        )
