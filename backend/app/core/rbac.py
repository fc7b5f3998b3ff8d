"""
Role-Based Access Control (RBAC) definitions and helpers.
"""
from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """
    System roles used for authorization.

    ``master`` operates the platform itself; the others belong to a company
    and, usually, to one of its branches.
    """

    MASTER = "master"
    ADMIN = "admin"
    MANAGER = "manager"
    WAITER = "waiter"


# Allow-lists shared by the endpoint modules
BACK_OFFICE_ROLES: tuple[UserRole, ...] = (UserRole.ADMIN, UserRole.MANAGER)
FLOOR_ROLES: tuple[UserRole, ...] = (UserRole.ADMIN, UserRole.MANAGER, UserRole.WAITER)
COMPANY_OWNER_ROLES: tuple[UserRole, ...] = (UserRole.ADMIN, UserRole.MASTER)


def normalize_role(role: str | UserRole | None) -> UserRole | None:
    """
    Normalize string/enum role values to a valid ``UserRole``.

    Args:
        role: Raw role value from DB/token input.

    Returns:
        Normalized role, or ``None`` for unknown values (never granted).
    """

    if isinstance(role, UserRole):
        return role

    if role is None:
        return None

    try:
        return UserRole(str(role).lower())
    except ValueError:
        return None


def is_role_allowed(role: str | UserRole | None, allowed_roles: frozenset[UserRole]) -> bool:
    """
    Check if a role is part of an endpoint allow-list.

    Args:
        role: Role value.
        allowed_roles: Roles accepted by the endpoint.

    Returns:
        ``True`` if the role is allowed.
    """

    normalized_role = normalize_role(role)
    return normalized_role is not None and normalized_role in allowed_roles
