"""
Ingredient category endpoints (branch-scoped).
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import raise_service_http_error
from app.core.database import get_db
from app.core.dependencies import require_roles
from app.core.rbac import BACK_OFFICE_ROLES
from app.models.user import User
from app.schemas.ingredient import (
    IngredientCategoryCreate,
    IngredientCategoryResponse,
    IngredientCategoryUpdate,
)
from app.schemas.upload import MessageResponse
from app.services.errors import ServiceError
from app.services.ingredient_category_service import IngredientCategoryService

router = APIRouter()


@router.post("", response_model=IngredientCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: IngredientCategoryCreate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> IngredientCategoryResponse:
    try:
        category = await IngredientCategoryService(db).create(current_user.id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(category)
    return IngredientCategoryResponse.model_validate(category)


@router.get("", response_model=list[IngredientCategoryResponse])
async def list_categories(
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> list[IngredientCategoryResponse]:
    try:
        categories = await IngredientCategoryService(db).list_all(current_user.id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return [IngredientCategoryResponse.model_validate(c) for c in categories]


@router.get("/{category_id}", response_model=IngredientCategoryResponse)
async def get_category(
    category_id: UUID,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> IngredientCategoryResponse:
    try:
        category = await IngredientCategoryService(db).get(current_user.id, category_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return IngredientCategoryResponse.model_validate(category)


@router.patch("/{category_id}", response_model=IngredientCategoryResponse)
async def update_category(
    category_id: UUID,
    payload: IngredientCategoryUpdate,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> IngredientCategoryResponse:
    try:
        category = await IngredientCategoryService(db).update(current_user.id, category_id, payload)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    await db.refresh(category)
    return IngredientCategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: UUID,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await IngredientCategoryService(db).delete(current_user.id, category_id)
    except ServiceError as exc:
        raise_service_http_error(exc)
    await db.commit()
    return MessageResponse(message="Categoria excluída com sucesso")
