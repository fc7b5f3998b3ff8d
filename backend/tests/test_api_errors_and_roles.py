"""
Error mapping and role guard tests.
"""
from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi import HTTPException, status

from app.api.v1.errors import EXACT_CODE_STATUS, raise_service_http_error, status_for_code
from app.core.dependencies import require_roles
from app.core.rbac import BACK_OFFICE_ROLES, COMPANY_OWNER_ROLES, UserRole, normalize_role
from app.services.errors import (
    BranchNotAssociatedError,
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from app.services.upload_service import StorageError, StorageNotConfiguredError


@pytest.mark.parametrize(
    ("code", "expected_status"),
    [
        ("branch_not_associated", status.HTTP_400_BAD_REQUEST),
        ("not_found", status.HTTP_404_NOT_FOUND),
        ("table_not_found", status.HTTP_404_NOT_FOUND),
        ("cash_register_conflict", status.HTTP_409_CONFLICT),
        ("file_too_large", status.HTTP_413_REQUEST_ENTITY_TOO_LARGE),
        ("storage_error", status.HTTP_502_BAD_GATEWAY),
        ("storage_not_configured", status.HTTP_503_SERVICE_UNAVAILABLE),
        ("invalid_transfer", status.HTTP_400_BAD_REQUEST),
    ],
)
def test_raise_service_http_error_maps_codes(code: str, expected_status: int) -> None:
    """
    Domain errors must be translated to deterministic HTTP responses.
    """
    assert status_for_code(code) == expected_status

    with pytest.raises(HTTPException) as exc_info:
        raise_service_http_error(ServiceError("erro", code=code))

    assert exc_info.value.status_code == expected_status
    assert exc_info.value.detail == "erro"


def test_branch_error_keeps_portuguese_detail() -> None:
    with pytest.raises(HTTPException) as exc_info:
        raise_service_http_error(BranchNotAssociatedError())

    assert exc_info.value.detail == "Usuário não possui filial associada"


def test_authorization_is_left_to_the_role_guard() -> None:
    """
    Services report tenancy and state errors only; 403 comes from require_roles.
    """
    assert set(ServiceError.__subclasses__()) == {
        BranchNotAssociatedError,
        NotFoundError,
        ValidationError,
        ConflictError,
        StorageNotConfiguredError,
        StorageError,
    }
    assert "forbidden" not in EXACT_CODE_STATUS


def test_normalize_role_accepts_known_values_only() -> None:
    assert normalize_role("MANAGER") is UserRole.MANAGER
    assert normalize_role(UserRole.WAITER) is UserRole.WAITER
    assert normalize_role("owner") is None
    assert normalize_role(None) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("allowed", "role", "granted"),
    [
        (BACK_OFFICE_ROLES, "manager", True),
        (BACK_OFFICE_ROLES, "admin", True),
        (BACK_OFFICE_ROLES, "waiter", False),
        (BACK_OFFICE_ROLES, "master", False),
        (COMPANY_OWNER_ROLES, "master", True),
        ((UserRole.MASTER,), "admin", False),
    ],
)
async def test_require_roles_guard(allowed: tuple[UserRole, ...], role: str, granted: bool) -> None:
    guard = require_roles(*allowed)
    user = SimpleNamespace(role=role)

    if granted:
        assert await guard(current_user=user) is user
        return

    with pytest.raises(HTTPException) as exc_info:
        await guard(current_user=user)
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN
