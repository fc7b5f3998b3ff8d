"""
Ingredient endpoints (branch-scoped).
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import raise_service_http_error
from app.core.database import get_db
from app.core.dependencies import require_roles
from app.core.rbac import BACK_OFFICE_ROLES
from app.models.user import User
from app.schemas.ingredient import IngredientCreate, IngredientResponse, IngredientUpdate
from app.schemas.upload import MessageResponse
from app.services.errors import ServiceError
from app.services.ingredient_service import IngredientService

router = APIRouter()


@router.post("", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    payload: IngredientCreate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> IngredientResponse:
    try:
        ingredient = await IngredientService(db).create(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    response = IngredientResponse.model_validate(ingredient)
    await db.commit()
    return response


@router.get("", response_model=list[IngredientResponse])
async def list_ingredients(
    category_id: UUID | None = Query(default=None),
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> list[IngredientResponse]:
    try:
        ingredients = await IngredientService(db).list_all(current_user.id, category_id=category_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return [IngredientResponse.model_validate(i) for i in ingredients]


@router.get("/{ingredient_id}", response_model=IngredientResponse)
async def get_ingredient(
    ingredient_id: UUID,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> IngredientResponse:
    try:
        ingredient = await IngredientService(db).get(current_user.id, ingredient_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return IngredientResponse.model_validate(ingredient)


@router.patch("/{ingredient_id}", response_model=IngredientResponse)
async def update_ingredient(
    ingredient_id: UUID,
    payload: IngredientUpdate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> IngredientResponse:
    try:
        ingredient = await IngredientService(db).update(current_user.id, ingredient_id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    response = IngredientResponse.model_validate(ingredient)
    await db.commit()
    return response


@router.delete("/{ingredient_id}", response_model=MessageResponse)
async def delete_ingredient(
    ingredient_id: UUID,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await IngredientService(db).delete(current_user.id, ingredient_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    return MessageResponse(message="Ingrediente excluído com sucesso")
