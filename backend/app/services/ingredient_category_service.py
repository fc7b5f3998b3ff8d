"""
IngredientCategoryService — branch-scoped CRUD for ingredient categories.
"""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from app.models.ingredient import IngredientCategory
from app.schemas.ingredient import IngredientCategoryCreate, IngredientCategoryUpdate
from app.services.branch_scope import BranchScopedService
from app.services.errors import NotFoundError


class IngredientCategoryService(BranchScopedService):

    async def create(self, user_id: UUID, payload: IngredientCategoryCreate) -> IngredientCategory:
        branch_id = await self._branch_id(user_id)
        category = IngredientCategory(
            branch_id=branch_id,
            name=payload.name,
            description=payload.description,
        )
        self._db.add(category)
        await self._db.flush()
        return category

    async def list_all(self, user_id: UUID) -> list[IngredientCategory]:
        branch_id = await self._branch_id(user_id)
        stmt = (
            select(IngredientCategory)
            .where(IngredientCategory.branch_id == branch_id)
            .order_by(IngredientCategory.name.asc())
        )
        return list((await self._db.execute(stmt)).scalars().all())

    async def get(self, user_id: UUID, category_id: UUID) -> IngredientCategory:
        branch_id = await self._branch_id(user_id)
        return await self._get_in_branch(branch_id, category_id)

    async def update(
        self,
        user_id: UUID,
        category_id: UUID,
        payload: IngredientCategoryUpdate,
    ) -> IngredientCategory:
        branch_id = await self._branch_id(user_id)
        category = await self._get_in_branch(branch_id, category_id)
        for field_name, value in payload.model_dump(exclude_unset=True).items():
            setattr(category, field_name, value)
        await self._db.flush()
        return category

    async def delete(self, user_id: UUID, category_id: UUID) -> None:
        branch_id = await self._branch_id(user_id)
        category = await self._get_in_branch(branch_id, category_id)
        await self._db.delete(category)
        await self._db.flush()

    async def _get_in_branch(self, branch_id: UUID, category_id: UUID) -> IngredientCategory:
        stmt = select(IngredientCategory).where(
            IngredientCategory.id == category_id,
            IngredientCategory.branch_id == branch_id,
        )
        category = (await self._db.execute(stmt)).scalar_one_or_none()
        if category is None:
            raise NotFoundError("Categoria não encontrada", code="category_not_found")
        return category
