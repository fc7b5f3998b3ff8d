"""
FastAPI dependencies for authentication and role guards.
"""
from collections.abc import Callable
from typing import Optional
from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.database import get_db
from app.core.rbac import UserRole, is_role_allowed
from app.core.security import decode_token
from app.models.user import User

# OAuth2 scheme for JWT bearer token
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user.

    Args:
        credentials: JWT token from Authorization header
        db: Database session

    Returns:
        User object

    Raises:
        HTTPException: If token is invalid or user not found

    Example:
        @router.get("/me")
        async def get_me(user: User = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    if payload.get("type", "access") != "access":
        raise credentials_exception

    raw_user_id: Optional[str] = payload.get("sub")
    if raw_user_id is None:
        raise credentials_exception
    try:
        user_id = UUID(str(raw_user_id))
    except (TypeError, ValueError):
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled"
        )

    return user


def require_roles(*allowed_roles: UserRole) -> Callable[..., User]:
    """
    Build dependency that allows access only for specific roles.

    Args:
        allowed_roles: Roles accepted for endpoint access.

    Returns:
        FastAPI dependency that yields authenticated user if role is allowed.
    """

    normalized_allowed_roles = frozenset(allowed_roles)

    async def _role_dependency(
        current_user: User = Depends(get_current_user),
    ) -> User:
        if not is_role_allowed(current_user.role, normalized_allowed_roles):
            allowed_roles_str = ", ".join(role.value for role in allowed_roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient role. Allowed roles: {allowed_roles_str}",
            )

        return current_user

    return _role_dependency
