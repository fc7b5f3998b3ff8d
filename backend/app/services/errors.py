"""
Domain errors raised by services and translated to HTTP by the endpoints.
"""
from __future__ import annotations


class ServiceError(Exception):
    """Base domain error carrying a user-facing detail and a stable code."""

    def __init__(self, detail: str, code: str = "service_error") -> None:
        self.detail = detail
        self.code = code
        super().__init__(detail)


class BranchNotAssociatedError(ServiceError):
    """Caller has no branch; every branch-scoped operation is refused."""

    def __init__(self, detail: str = "Usuário não possui filial associada") -> None:
        super().__init__(detail, code="branch_not_associated")


class NotFoundError(ServiceError):
    """Row missing, or owned by another tenant."""

    def __init__(self, detail: str, code: str = "not_found") -> None:
        super().__init__(detail, code=code)


class ValidationError(ServiceError):
    def __init__(self, detail: str, code: str = "validation_error") -> None:
        super().__init__(detail, code=code)


class ConflictError(ServiceError):
    def __init__(self, detail: str, code: str = "conflict") -> None:
        super().__init__(detail, code=code)

