"""
IngredientService: branch-scoped CRUD for ingredients.

Categories referenced by an ingredient must belong to the same branch.
"""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.models.ingredient import Ingredient, IngredientCategory
from app.schemas.ingredient import IngredientCreate, IngredientUpdate
from app.services.branch_scope import BranchScopedService
from app.services.errors import NotFoundError


class IngredientService(BranchScopedService):

    async def create(self, user_id: UUID, payload: IngredientCreate) -> Ingredient:
        branch_id = await self._branch_id(user_id)
        if payload.category_id is not None:
            await self._ensure_category(branch_id, payload.category_id)

        ingredient = Ingredient(branch_id=branch_id, **payload.model_dump())
        self._db.add(ingredient)
        await self._db.flush()
        return await self._get_in_branch(branch_id, ingredient.id)

    async def list_all(self, user_id: UUID, category_id: Optional[UUID] = None) -> list[Ingredient]:
        branch_id = await self._branch_id(user_id)
        stmt = (
            select(Ingredient)
            .options(selectinload(Ingredient.category))
            .where(Ingredient.branch_id == branch_id)
        )
        if category_id is not None:
            stmt = stmt.where(Ingredient.category_id == category_id)
        stmt = stmt.order_by(Ingredient.name.asc())
        return list((await self._db.execute(stmt)).scalars().all())

    async def get(self, user_id: UUID, ingredient_id: UUID) -> Ingredient:
        branch_id = await self._branch_id(user_id)
        return await self._get_in_branch(branch_id, ingredient_id)

    async def update(
        self,
        user_id: UUID,
        ingredient_id: UUID,
        payload: IngredientUpdate,
    ) -> Ingredient:
        branch_id = await self._branch_id(user_id)
        ingredient = await self._get_in_branch(branch_id, ingredient_id)

        changes = payload.model_dump(exclude_unset=True)
        if changes.get("category_id") is not None:
            await self._ensure_category(branch_id, changes["category_id"])
        for field_name, value in changes.items():
            setattr(ingredient, field_name, value)
        await self._db.flush()
        return await self._get_in_branch(branch_id, ingredient.id)

    async def delete(self, user_id: UUID, ingredient_id: UUID) -> None:
        branch_id = await self._branch_id(user_id)
        ingredient = await self._get_in_branch(branch_id, ingredient_id)
        await self._db.delete(ingredient)
        await self._db.flush()

    async def _get_in_branch(self, branch_id: UUID, ingredient_id: UUID) -> Ingredient:
        stmt = (
            select(Ingredient)
            .options(selectinload(Ingredient.category))
            .where(Ingredient.id == ingredient_id, Ingredient.branch_id == branch_id)
            .execution_options(populate_existing=True)
        )
        ingredient = (await self._db.execute(stmt)).scalar_one_or_none()
        if ingredient is None:
            raise NotFoundError("Ingrediente não encontrado", code="ingredient_not_found")
        return ingredient

    async def _ensure_category(self, branch_id: UUID, category_id: UUID) -> None:
        stmt = select(IngredientCategory.id).where(
            IngredientCategory.id == category_id,
            IngredientCategory.branch_id == branch_id,
        )
        if (await self._db.execute(stmt)).scalar_one_or_none() is None:
            raise NotFoundError("Categoria não encontrada", code="category_not_found")
