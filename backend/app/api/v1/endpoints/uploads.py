"""
Image upload endpoints backed by S3-compatible object storage.
"""
from __future__ import annotations

import asyncio
from typing import Literal

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.api.v1.errors import raise_service_http_error
from app.core.config import settings
from app.core.dependencies import require_roles
from app.core.rbac import BACK_OFFICE_ROLES
from app.models.user import User
from app.schemas.upload import DeleteFileRequest, MessageResponse, UploadResponse
from app.services.errors import ServiceError
from app.services.upload_service import UploadService, validate_image

router = APIRouter()


def get_upload_service() -> UploadService:
    """Dependency that builds the storage client from settings."""
    try:
        return UploadService.from_settings()
    except ServiceError as exc:
        raise_service_http_error(exc)


async def _store_image(
    storage: UploadService,
    file: UploadFile,
    folder: str,
    *,
    max_size_mb: int = settings.MAX_IMAGE_SIZE_MB,
    allow_any_image: bool = False,
) -> str:
    data = await file.read()
    try:
        validate_image(
            file.content_type,
            len(data),
            max_size_mb=max_size_mb,
            allow_any_image=allow_any_image,
        )
        return await asyncio.to_thread(
            storage.upload_file,
            data,
            file.filename or "upload",
            file.content_type or "application/octet-stream",
            folder,
        )
    except ServiceError as exc:
        raise_service_http_error(exc)


@router.post("/image", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    folder: str | None = Form(default=None),
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    storage: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    url = await _store_image(storage, file, folder or "images")
    return UploadResponse(url=url, message="Arquivo enviado com sucesso")


@router.post("/category-image", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_category_image(
    file: UploadFile = File(...),
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    storage: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    url = await _store_image(storage, file, "categories")
    return UploadResponse(url=url, message="Imagem da categoria enviada com sucesso")


@router.post("/product-image", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_product_image(
    file: UploadFile = File(...),
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    storage: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    url = await _store_image(storage, file, "products")
    return UploadResponse(url=url, message="Imagem do produto enviada com sucesso")


@router.post("/person-image", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_person_image(
    file: UploadFile = File(...),
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    storage: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    url = await _store_image(storage, file, "persons", allow_any_image=True)
    return UploadResponse(url=url, message="Imagem enviada com sucesso")


@router.post("/branding", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_branding(
    file: UploadFile = File(...),
    type: Literal["logo", "banner"] = Form(...),
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    storage: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    """
    Upload a company logo (max 2 MB) or banner (max 5 MB).
    """
    is_logo = type == "logo"
    url = await _store_image(
        storage,
        file,
        "branding/logos" if is_logo else "branding/banners",
        max_size_mb=settings.MAX_LOGO_SIZE_MB if is_logo else settings.MAX_IMAGE_SIZE_MB,
        allow_any_image=True,
    )
    return UploadResponse(
        url=url,
        type=type,
        message="Logo enviado com sucesso" if is_logo else "Banner enviado com sucesso",
    )


@router.delete("/file", response_model=MessageResponse)
async def delete_file(
    payload: DeleteFileRequest,
    current_user: User = Depends(require_roles(*BACK_OFFICE_ROLES)),
    storage: UploadService = Depends(get_upload_service),
) -> MessageResponse:
    try:
        await asyncio.to_thread(storage.delete_file, payload.url)
    except ServiceError as exc:
        raise_service_http_error(exc)
    return MessageResponse(message="Arquivo removido com sucesso")
