"""
Translation of service-layer errors into HTTP responses.
"""
from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException, status

from app.services.errors import ServiceError

EXACT_CODE_STATUS: dict[str, int] = {
    "branch_not_associated": status.HTTP_400_BAD_REQUEST,
    "file_too_large": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    "storage_error": status.HTTP_502_BAD_GATEWAY,
    "storage_not_configured": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for_code(code: str) -> int:
    if code in EXACT_CODE_STATUS:
        return EXACT_CODE_STATUS[code]
    if code == "not_found" or code.endswith("_not_found"):
        return status.HTTP_404_NOT_FOUND
    if code == "conflict" or code.endswith("_conflict"):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def raise_service_http_error(exc: ServiceError) -> NoReturn:
    """
    Convert domain error to HTTP response.
    """
    raise HTTPException(status_code=status_for_code(exc.code), detail=exc.detail) from exc
