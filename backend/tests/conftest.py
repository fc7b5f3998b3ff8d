"""
Pytest fixtures for backend tests.

Each test runs against a fresh in-memory SQLite database. API tests drive the
real routers through httpx with the caller injected via dependency overrides.
"""
from __future__ import annotations

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DEBUG", "true")

from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from dataclasses import dataclass  # noqa: E402
from typing import Any, Optional  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import HTTPException, status  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.models  # noqa: F401, E402
from app.core.database import Base, get_db  # noqa: E402
from app.core.dependencies import get_current_user  # noqa: E402
from app.core.rate_limit import check_login_rate_limit  # noqa: E402
from app.core.rbac import UserRole  # noqa: E402
from app.main import app  # noqa: E402
from app.models.company import Branch, Company  # noqa: E402
from app.models.user import User  # noqa: E402


@dataclass
class Tenant:
    """A company with one branch and one user per company role."""

    company: Company
    branch: Branch
    admin: User
    manager: User
    waiter: User


def make_user(
    email: str,
    role: UserRole,
    company: Optional[Company] = None,
    branch: Optional[Branch] = None,
) -> User:
    return User(
        email=email,
        hashed_password="hashed::secret",
        name=email.split("@")[0],
        role=role.value,
        company_id=company.id if company else None,
        branch_id=branch.id if branch else None,
        is_active=True,
    )


async def create_tenant(db: AsyncSession, slug: str) -> Tenant:
    """Persist and commit a tenant named after ``slug``."""
    company = Company(name=f"Restaurante {slug}", email=f"{slug}@example.com")
    db.add(company)
    await db.flush()
    branch = Branch(company_id=company.id, name=f"Matriz {slug}")
    db.add(branch)
    await db.flush()

    admin = make_user(f"admin-{slug}@example.com", UserRole.ADMIN, company, branch)
    manager = make_user(f"manager-{slug}@example.com", UserRole.MANAGER, company, branch)
    waiter = make_user(f"waiter-{slug}@example.com", UserRole.WAITER, company, branch)
    db.add_all([admin, manager, waiter])
    await db.commit()
    return Tenant(company=company, branch=branch, admin=admin, manager=manager, waiter=waiter)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async session over a private in-memory SQLite database.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def tenant(db_session: AsyncSession) -> Tenant:
    return await create_tenant(db_session, "centro")


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession) -> Tenant:
    return await create_tenant(db_session, "bairro")


@pytest_asyncio.fixture
async def master(db_session: AsyncSession) -> User:
    user = make_user("master@example.com", UserRole.MASTER)
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def sync_session() -> Generator[Session, None, None]:
    """
    Sync session for worker code, with SAVEPOINT support on pysqlite.

    pysqlite manages transactions itself and breaks nested transactions;
    the listeners hand BEGIN back to SQLAlchemy.
    """
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    session = Session(bind=engine, expire_on_commit=False, autoflush=False)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def auth_state() -> dict[str, Optional[User]]:
    return {"user": None}


@pytest.fixture
def login_as(auth_state: dict[str, Optional[User]]) -> Callable[[Optional[User]], None]:
    """Switch the user the API sees as authenticated."""

    def _login(user: Optional[User]) -> None:
        auth_state["user"] = user

    return _login


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    auth_state: dict[str, Optional[User]],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client with dependency overrides.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    async def override_get_current_user() -> User:
        user = auth_state["user"]
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not validate credentials",
            )
        return user

    async def override_rate_limit() -> None:
        return None

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    app.dependency_overrides[check_login_rate_limit] = override_rate_limit

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as async_client:
        yield async_client

    app.dependency_overrides.clear()
