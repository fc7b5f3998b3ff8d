"""
Tenant scoping shared by the branch-level CRUD services.
"""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.errors import BranchNotAssociatedError


async def resolve_branch_id(db: AsyncSession, user_id: UUID) -> UUID:
    """
    Resolve the branch of the calling user.

    Raises:
        BranchNotAssociatedError: user is unknown or has no branch.
    """
    stmt = select(User.branch_id).where(User.id == user_id)
    branch_id = (await db.execute(stmt)).scalar_one_or_none()
    if branch_id is None:
        raise BranchNotAssociatedError()
    return branch_id


class BranchScopedService:
    """
    Base for services whose rows are owned by a branch.

    Subclasses filter every statement by the branch returned from
    ``_branch_id``; rows of other branches are reported as not found.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def _branch_id(self, user_id: UUID) -> UUID:
        return await resolve_branch_id(self._db, user_id)
